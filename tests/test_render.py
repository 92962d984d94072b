"""Tests for share card drawing."""

from PIL import Image, ImageChops

from sharecard import render
from sharecard.render import (
    BACKGROUND,
    CARD_SIZE,
    GRADIENT_STOPS,
    fit_to_card,
    linear_gradient,
    load_font,
    render_card,
)


def test_card_is_opaque_and_card_sized():
    card = render_card("Ligma")
    assert card.mode == "RGBA"
    assert card.size == CARD_SIZE
    assert card.getchannel("A").getextrema() == (255, 255)


def test_gradient_wash_tints_background():
    card = render_card("")
    r, g, b, _ = card.getpixel((0, 0))
    # Half-transparent red over the light grey background.
    assert r > 245
    assert g < BACKGROUND[1] - 100
    assert b < BACKGROUND[2] - 100


def test_gradient_runs_from_red_to_green():
    layer = linear_gradient((100, 50), (0.0, 0.0), (100.0, 50.0), GRADIENT_STOPS)

    assert layer.mode == "RGBA"
    r, g, _, a = layer.getpixel((0, 0))
    assert r > 250 and g < 5 and a == 128
    r, g, _, a = layer.getpixel((99, 49))
    assert g > 240 and r < 15 and a == 128


def test_gradient_repeats_past_its_end():
    stops = [(0.0, (0, 0, 0, 255)), (1.0, (255, 255, 255, 255))]
    layer = linear_gradient((20, 1), (0.0, 0.0), (10.0, 0.0), stops)

    assert layer.getpixel((0, 0)) == layer.getpixel((10, 0))
    assert layer.getpixel((4, 0)) == layer.getpixel((14, 0))


def test_overlay_is_drawn_at_origin():
    plain = render_card("")
    with_overlay = render_card("", overlay=Image.new("RGB", (10, 10), (0, 0, 255)))

    assert with_overlay.getpixel((5, 5))[0] < plain.getpixel((5, 5))[0] - 50
    assert with_overlay.getpixel((50, 50)) == plain.getpixel((50, 50))


def test_oversized_overlay_is_cropped():
    card = render_card("", overlay=Image.new("RGBA", (2000, 2000), (0, 0, 255, 255)))
    assert card.size == CARD_SIZE


def test_title_changes_pixels_near_its_origin():
    diff = ImageChops.difference(render_card(""), render_card("Xin chao"))
    # Both cards are opaque, so the alpha of the difference is all zero.
    box = diff.convert("RGB").getbbox()
    assert box is not None
    left, top, _, _ = box
    assert left >= 250
    assert top < 256


def test_fit_to_card_fills_the_card():
    fitted = fit_to_card(Image.new("RGB", (300, 300), (1, 2, 3)))
    assert fitted.size == CARD_SIZE
    assert fitted.mode == "RGBA"


def test_load_font_falls_back_when_path_is_missing():
    font = load_font("/nonexistent/font.ttf", size=40)
    assert font.getbbox("A")[2] > 0


def test_card_renders_with_pillow_default_font(monkeypatch):
    monkeypatch.setattr(render, "SYSTEM_FONTS", [])

    plain = render_card("")
    titled = render_card("Xin chao")

    assert titled.size == CARD_SIZE
    assert ImageChops.difference(plain, titled).convert("RGB").getbbox() is not None

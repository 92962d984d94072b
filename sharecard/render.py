from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont, ImageOps


Size = Tuple[int, int]
Point = Tuple[float, float]
RGBA = Tuple[int, int, int, int]
GradientStop = Tuple[float, RGBA]
Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

CARD_SIZE: Size = (1200, 630)
BACKGROUND: RGBA = (248, 249, 250, 255)

# Half-transparent red fading into half-transparent green, corner to corner.
GRADIENT_STOPS: List[GradientStop] = [
    (0.0, (255, 0, 0, 128)),
    (1.0, (0, 255, 0, 128)),
]

TITLE_COLOR: RGBA = (255, 0, 255, 255)
TITLE_SIZE = 120
TITLE_ORIGIN: Tuple[int, int] = (256, 256)
TITLE_MARGIN = 64

SYSTEM_FONTS = [
    # Linux
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    # macOS
    "/System/Library/Fonts/Helvetica.ttc",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "/Library/Fonts/Arial.ttf",
    # Windows
    "C:/Windows/Fonts/arial.ttf",
]


def render_card(
    title: str,
    overlay: Optional[Image.Image] = None,
    size: Size = CARD_SIZE,
    font_path: Optional[str] = None,
) -> Image.Image:
    """
    Draw a share card: background fill, optional bitmap at the origin,
    a diagonal gradient wash, then the title.

    Returns an RGBA image in straight alpha; premultiplying is left to the
    framebuffer packing step.
    """
    w, h = size
    card = Image.new("RGBA", size, BACKGROUND)

    if overlay is not None:
        overlay = overlay.convert("RGBA")
        visible = overlay.crop((0, 0, min(overlay.width, w), min(overlay.height, h)))
        card.alpha_composite(visible, dest=(0, 0))

    wash = linear_gradient(size, (0.0, 0.0), (float(w), float(h)), GRADIENT_STOPS)
    card.alpha_composite(wash)

    font = load_font(font_path, size=TITLE_SIZE)
    draw = ImageDraw.Draw(card)
    x, y = TITLE_ORIGIN
    _draw_text_block(
        draw,
        text=title,
        font=font,
        max_width=w - x - TITLE_MARGIN,
        x=x,
        baseline=y,
        fill=TITLE_COLOR,
        line_height=int(TITLE_SIZE * 1.15),
    )
    return card


def fit_to_card(img: Image.Image, size: Size = CARD_SIZE) -> Image.Image:
    """
    Resize + crop a bitmap so it fills the whole card.
    """
    return ImageOps.fit(img.convert("RGBA"), size, Image.LANCZOS)


def linear_gradient(
    size: Size,
    start: Point,
    end: Point,
    stops: Sequence[GradientStop],
) -> Image.Image:
    """
    Render a linear gradient along start -> end as an RGBA layer.

    Positions beyond the stop range repeat, so the pattern tiles along the
    gradient axis. Pixels are sampled at their centres.
    """
    w, h = size
    (x0, y0), (x1, y1) = start, end
    dx, dy = x1 - x0, y1 - y0
    length_sq = dx * dx + dy * dy or 1.0

    ys, xs = np.mgrid[0:h, 0:w].astype(np.float64)
    t = ((xs + 0.5 - x0) * dx + (ys + 0.5 - y0) * dy) / length_sq
    t = np.mod(t, 1.0)

    positions = [position for position, _ in stops]
    colors = np.array([color for _, color in stops], dtype=np.float64)
    layer = np.stack(
        [np.interp(t, positions, colors[:, channel]) for channel in range(4)],
        axis=-1,
    )
    return Image.fromarray(np.rint(layer).astype(np.uint8))


def load_font(font_path: Optional[str], size: int) -> Font:
    """
    Load a sans-serif TrueType font: the given path first, then common
    system fonts, then Pillow's bundled default at the requested size.
    """
    candidates = ([font_path] if font_path else []) + SYSTEM_FONTS
    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size=size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _draw_text_block(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: Font,
    max_width: int,
    x: int,
    baseline: int,
    fill: RGBA,
    line_height: int,
) -> None:
    for line in _wrap_text(draw, text, font, max_width):
        draw.text((x, baseline), line, font=font, fill=fill, anchor="ls")
        baseline += line_height


def _wrap_text(
    draw: ImageDraw.ImageDraw, text: str, font: Font, max_width: int
) -> List[str]:
    words = text.split()
    lines: List[str] = []
    current = ""
    for word in words:
        test = f"{current} {word}".strip()
        if draw.textlength(test, font=font) <= max_width or not current:
            current = test
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines

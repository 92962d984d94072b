from dataclasses import dataclass
from typing import Iterable

import numpy as np
from PIL import Image


@dataclass(frozen=True)
class Framebuffer:
    """
    A finished, premultiplied-alpha raster.

    `pixels` is a flat row-major uint32 array, one word per pixel packed as
    A<<24 | R<<16 | G<<8 | B, with every colour channel already scaled by
    alpha / 255.
    """

    width: int
    height: int
    pixels: np.ndarray

    @classmethod
    def from_words(cls, width: int, height: int, words: Iterable[int]) -> "Framebuffer":
        # Length is checked against width * height by the encoder, not here.
        if not isinstance(words, np.ndarray):
            words = np.array(list(words), dtype=np.int64)
        return cls(width=width, height=height, pixels=words.astype(np.uint32).reshape(-1))

    @classmethod
    def from_image(cls, img: Image.Image) -> "Framebuffer":
        """
        Premultiply a Pillow image and pack it into ARGB words.
        """
        premultiplied = np.asarray(img.convert("RGBA").convert("RGBa"), dtype=np.uint8)
        return cls(width=img.width, height=img.height, pixels=pack_argb(premultiplied))

    @property
    def pixel_count(self) -> int:
        return int(self.pixels.size)


def pack_argb(rgba: np.ndarray) -> np.ndarray:
    """
    Pack an (..., 4) uint8 array of R, G, B, A lanes into flat ARGB words.

    Channel values are copied as they are; premultiply first if the result
    is meant to be a framebuffer.
    """
    lanes = np.asarray(rgba, dtype=np.uint32).reshape(-1, 4)
    r, g, b, a = lanes[:, 0], lanes[:, 1], lanes[:, 2], lanes[:, 3]
    return (a << 24) | (r << 16) | (g << 8) | b


def unpack_argb(words: np.ndarray) -> np.ndarray:
    """
    Split ARGB words into an (n, 4) uint32 array of A, R, G, B lanes.
    """
    words = np.asarray(words, dtype=np.uint32).reshape(-1)
    return np.stack(
        [(words >> 24) & 0xFF, (words >> 16) & 0xFF, (words >> 8) & 0xFF, words & 0xFF],
        axis=1,
    )

import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

import numpy as np

from .framebuffer import Framebuffer, unpack_argb


# Smallest slice of pixels handed to a worker thread.
DEFAULT_MIN_CHUNK = 65_536


def unpremultiply_to_rgb(
    framebuffer: Framebuffer,
    workers: Optional[int] = None,
    min_chunk: int = DEFAULT_MIN_CHUNK,
) -> bytes:
    """
    Convert premultiplied ARGB words into straight-alpha interleaved RGB bytes.

    Every pixel is independent, so the flat pixel range is cut into
    contiguous chunks and mapped on a thread pool. Each worker fills its own
    slice of a preallocated output array, which keeps the result in input
    order whatever the completion order.

    Fully transparent pixels come out black: the target format has no alpha
    channel to keep their colour meaningful. Channels that exceed their alpha
    (a broken premultiply upstream) are clamped to 255.
    """
    words = np.ascontiguousarray(framebuffer.pixels, dtype=np.uint32).reshape(-1)
    out = np.empty((words.size, 3), dtype=np.uint8)

    chunks = _chunk_bounds(words.size, workers or os.cpu_count() or 1, min_chunk)
    if len(chunks) <= 1:
        _convert_range(words, out, 0, words.size)
    else:
        with ThreadPoolExecutor(max_workers=len(chunks)) as executor:
            futures = [
                executor.submit(_convert_range, words, out, start, stop)
                for start, stop in chunks
            ]
            for future in futures:
                future.result()

    return out.tobytes()


def _convert_range(words: np.ndarray, out: np.ndarray, start: int, stop: int) -> None:
    lanes = unpack_argb(words[start:stop]).astype(np.float64)
    alpha = lanes[:, 0]
    rgb = lanes[:, 1:]

    target = out[start:stop]
    target[:] = 0

    visible = alpha != 0.0
    # c / (a / 255), written as c * 255 / a so whole quotients stay exact.
    straight = rgb[visible] * 255.0 / alpha[visible, None]
    target[visible] = np.minimum(straight, 255.0).astype(np.uint8)


def _chunk_bounds(total: int, workers: int, min_chunk: int) -> List[Tuple[int, int]]:
    if total == 0:
        return []
    chunk = max(-(-total // max(workers, 1)), max(min_chunk, 1))
    return [(start, min(start + chunk, total)) for start in range(0, total, chunk)]

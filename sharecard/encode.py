from typing import BinaryIO, Union

from PIL import Image

from .errors import DimensionMismatch, EncodeFailure, SinkWriteFailure


MIN_QUALITY = 1
MAX_QUALITY = 100

BytesLike = Union[bytes, bytearray, memoryview]


def encode_jpeg(
    rgb: BytesLike,
    width: int,
    height: int,
    quality: int,
    sink: BinaryIO,
) -> int:
    """
    Encode interleaved RGB bytes as a JPEG and stream it into `sink`.

    Huffman tables are always optimized for the image. Pillow's encoder
    output is pushed through a write-only wrapper, so it arrives at the sink
    in chunks via `sink.write` rather than through a file descriptor.

    Returns the number of bytes written. The sink is flushed if it can be,
    never closed.
    """
    data = bytes(rgb)
    if len(data) != width * height * 3:
        raise DimensionMismatch(width, height, len(data))
    if width <= 0 or height <= 0:
        raise EncodeFailure(f"cannot encode a {width}x{height} image")
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise EncodeFailure(f"quality must be an integer, got {quality!r}")
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise EncodeFailure(
            f"quality {quality} is outside {MIN_QUALITY}..{MAX_QUALITY}"
        )

    img = Image.frombytes("RGB", (width, height), data)
    writer = _ChunkWriter(sink)
    try:
        img.save(writer, format="JPEG", quality=quality, optimize=True)
        writer.flush()
    except SinkWriteFailure:
        raise
    except (OSError, ValueError) as exc:
        raise EncodeFailure(f"JPEG encoder failed: {exc}") from exc
    return writer.bytes_written


class _ChunkWriter:
    """
    Minimal file-like front for an arbitrary sink.

    It has no `fileno`, so Pillow stays on its chunked `write` path and
    every byte and every sink error passes through here.
    """

    def __init__(self, sink: BinaryIO) -> None:
        self._sink = sink
        self.bytes_written = 0

    def write(self, data: bytes) -> int:
        view = memoryview(data)
        while view:
            try:
                written = self._sink.write(view)
            except OSError as exc:
                raise SinkWriteFailure(
                    f"writing to the sink failed after {self.bytes_written} bytes: {exc}",
                    self.bytes_written,
                ) from exc
            if written is None:
                written = len(view)
            if written == 0:
                raise SinkWriteFailure(
                    f"sink accepted no bytes after {self.bytes_written} bytes",
                    self.bytes_written,
                )
            self.bytes_written += written
            view = view[written:]
        return len(data)

    def flush(self) -> None:
        flush = getattr(self._sink, "flush", None)
        if flush is None:
            return
        try:
            flush()
        except OSError as exc:
            raise SinkWriteFailure(
                f"flushing the sink failed after {self.bytes_written} bytes: {exc}",
                self.bytes_written,
            ) from exc

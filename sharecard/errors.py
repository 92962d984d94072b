from typing import Optional


class EncodeError(Exception):
    """
    Base class for failures of the framebuffer -> JPEG pipeline.
    """


class DimensionMismatch(EncodeError, ValueError):
    """
    The converted buffer does not hold width * height RGB pixels.

    Raised before anything is written to the sink.
    """

    def __init__(self, width: int, height: int, actual: int) -> None:
        self.width = width
        self.height = height
        self.expected = width * height * 3
        self.actual = actual
        super().__init__(
            f"RGB buffer holds {actual} bytes but a {width}x{height} image "
            f"needs {self.expected}"
        )


class EncodeFailure(EncodeError):
    """
    The JPEG encoder rejected the image or its options.

    The underlying error, when there is one, is available as `__cause__`.
    """


class SinkWriteFailure(EncodeFailure):
    """
    Writing the encoded stream to the sink failed part-way.

    `bytes_written` bytes already reached the sink; they are not a valid
    image and cleaning them up is up to whoever owns the sink.
    """

    def __init__(self, message: str, bytes_written: int) -> None:
        self.bytes_written = bytes_written
        super().__init__(message)


class CardSourceError(RuntimeError):
    """
    The blog post or its thumbnail could not be fetched or decoded.
    """

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        self.url = url
        super().__init__(message if url is None else f"{message} ({url})")

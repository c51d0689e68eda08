"""
File opener for streaming image files into Slack uploads.
"""

import logging
import os
from typing import BinaryIO, Optional

from image_bot.exceptions import ImageOpenError


class ImageFile:
    """
    Open handle on an image file.

    Owned by the single request that opened it. Use as a context manager so
    the stream is released on every exit path, including task cancellation.
    """

    def __init__(self, path: str, stream: BinaryIO):
        self.path = path
        self.file_name = os.path.basename(path)
        self.stream = stream

    @property
    def closed(self) -> bool:
        return self.stream.closed

    def read(self, size: int = -1) -> bytes:
        return self.stream.read(size)

    def close(self) -> None:
        self.stream.close()

    def __enter__(self) -> "ImageFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ImageFile(path={self.path!r}, closed={self.closed})"


def open_image(path: str, logger: Optional[logging.Logger] = None) -> ImageFile:
    """
    Open an image for streaming reads.

    No timeout is applied here; callers bound the whole request.

    Args:
        path: Image path, typically from ImageIndex.get_random_image()
        logger: Logger for diagnostics

    Returns:
        ImageFile handle; caller must close it

    Raises:
        ImageOpenError: If the path is missing or cannot be opened
    """
    log = logger or logging.getLogger(__name__)
    log.debug(f"Opening image file: {path}")

    try:
        stream = open(path, "rb")
    except OSError as e:
        log.error(f"Failed to open image file {path}: {e}")
        raise ImageOpenError(path, e) from e

    image = ImageFile(path, stream)
    log.debug(f"Opened image file: {image.file_name}")
    return image

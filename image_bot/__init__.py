"""
image_bot - random image replies for Slack, served from a local directory tree.
"""

from image_bot.exceptions import (
    DirectoryScanError,
    EmptyIndexError,
    ImageBotError,
    ImageOpenError,
)
from image_bot.image_file import ImageFile, open_image
from image_bot.image_index import IMAGE_EXTENSIONS, ImageIndex

__all__ = [
    "DirectoryScanError",
    "EmptyIndexError",
    "ImageBotError",
    "ImageOpenError",
    "ImageFile",
    "open_image",
    "IMAGE_EXTENSIONS",
    "ImageIndex",
]

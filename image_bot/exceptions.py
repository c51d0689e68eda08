"""
Custom exceptions for image_bot indexing and file handling.
"""

from typing import Optional


class ImageBotError(Exception):
    """Base class for image_bot errors."""

    pass


class DirectoryScanError(ImageBotError):
    """Raised when the image base directory cannot be traversed."""

    def __init__(self, base_dir: str, cause: Optional[OSError] = None):
        self.base_dir = base_dir
        self.cause = cause
        message = f"Failed to scan image directory {base_dir}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class EmptyIndexError(ImageBotError):
    """Raised when a directory scan finds no image categories."""

    def __init__(self, base_dir: str):
        self.base_dir = base_dir
        super().__init__(f"No image categories found in directory: {base_dir}")


class ImageOpenError(ImageBotError):
    """Raised when a selected image file cannot be opened."""

    def __init__(self, path: str, cause: Optional[OSError] = None):
        self.path = path
        self.cause = cause
        message = f"Failed to open image file {path}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)

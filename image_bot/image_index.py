"""
Image index - category lookup over a directory of images.

Scans a base directory once, groups image files by their top-level
subdirectory (the category), and serves random picks from a category.
The index is read-only after construction, so concurrent handlers can
share one instance without locking.
"""

import logging
import os
import random
from typing import Dict, Iterable, List, Optional, Tuple

from image_bot.exceptions import DirectoryScanError, EmptyIndexError


IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".webp"})


def is_image_file(path: str) -> bool:
    """Check whether a path has an accepted image extension (case-insensitive)."""
    _, ext = os.path.splitext(path)
    return ext.lower() in IMAGE_EXTENSIONS


def category_for_path(base_dir: str, path: str) -> Optional[str]:
    """
    Derive the category of a file from its location under base_dir.

    Returns:
        First path segment under base_dir, or None for files that sit
        directly in base_dir
    """
    rel_path = os.path.relpath(path, base_dir)
    parts = rel_path.split(os.sep)
    if len(parts) < 2:
        return None
    return parts[0]


class ImageIndex:
    """In-memory mapping from category name to image file paths."""

    def __init__(
        self,
        categories: Dict[str, Iterable[str]],
        base_dir: str = "",
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize index from an already-built category mapping.

        Most callers want ImageIndex.build() instead.

        Args:
            categories: Category name -> image paths
            base_dir: Directory the paths were scanned from
            rng: Random generator used for picks (default: a private instance)
            logger: Logger for lookup diagnostics
        """
        self._categories: Dict[str, Tuple[str, ...]] = {
            name: tuple(paths) for name, paths in categories.items()
        }
        self.base_dir = base_dir
        self._rng = rng or random.Random()
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def build(
        cls,
        base_dir: str,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "ImageIndex":
        """
        Scan base_dir and build an index.

        Args:
            base_dir: Root of the image tree (<base>/<category>/.../<file>)
            rng: Random generator used for picks
            logger: Logger for scan progress

        Returns:
            Populated ImageIndex

        Raises:
            DirectoryScanError: If base_dir is missing or cannot be traversed
            EmptyIndexError: If no image was found below a category directory
        """
        log = logger or logging.getLogger(__name__)
        log.info(f"Initializing image index from {base_dir}")

        categories: Dict[str, List[str]] = {}

        def _raise_scan_error(error: OSError) -> None:
            raise DirectoryScanError(base_dir, error) from error

        if not os.path.isdir(base_dir):
            error = FileNotFoundError(f"Not a directory: {base_dir}")
            log.error(f"Error scanning image directory {base_dir}: {error}")
            raise DirectoryScanError(base_dir, error) from error

        try:
            for dirpath, dirnames, filenames in os.walk(
                base_dir, onerror=_raise_scan_error
            ):
                dirnames.sort()
                for filename in sorted(filenames):
                    if not is_image_file(filename):
                        continue
                    path = os.path.join(dirpath, filename)
                    category = category_for_path(base_dir, path)
                    if category is None:
                        continue
                    categories.setdefault(category, []).append(path)
                    log.debug(f"Found image: category={category}, file={filename}")
        except DirectoryScanError as e:
            log.error(f"Error scanning image directory {base_dir}: {e.cause}")
            raise

        if not categories:
            log.error(f"No image categories found in {base_dir}")
            raise EmptyIndexError(base_dir)

        for category in sorted(categories):
            log.info(
                f"Loaded image category: {category} ({len(categories[category])} images)"
            )
        log.info(f"Image index initialized with {len(categories)} categories")

        return cls(categories, base_dir=base_dir, rng=rng, logger=log)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, name: object) -> bool:
        return name in self._categories

    @property
    def total_images(self) -> int:
        return sum(len(paths) for paths in self._categories.values())

    def has_category(self, name: str) -> bool:
        """Exact-match category membership (case-sensitive)."""
        return name in self._categories

    def get_random_image(self, name: str) -> str:
        """
        Pick one image from a category uniformly at random.

        Picks are independent; the same image may come up twice in a row.

        Returns:
            Image path, or "" if the category is unknown or empty
        """
        images = self._categories.get(name)
        if not images:
            self.logger.warning(f"No images found for category: {name}")
            return ""

        selected = self._rng.choice(images)
        self.logger.debug(
            f"Selected random image: category={name}, "
            f"image={os.path.basename(selected)}, total_available={len(images)}"
        )
        return selected

    def get_image_count(self, name: str) -> int:
        return len(self._categories.get(name, ()))

    def get_available_categories(self) -> List[str]:
        """All known categories, sorted by name."""
        return sorted(self._categories)

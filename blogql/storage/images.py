"""
Local storage for uploaded post images.

Images live in one directory that is also served statically. A post
stores the relative path returned by ``save`` (``images/<file>``);
``clear_image`` removes the file again when a post is deleted or its image
replaced. Removal is best-effort and never fails the caller.
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("image/png", "image/jpg", "image/jpeg")


class ImageStore:
    """Directory-backed image storage."""

    def __init__(self, directory: Union[str, Path] = "images", url_prefix: str = "images"):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.strip("/")

    def _resolve(self, image_url: str) -> Optional[Path]:
        """Map a stored image path back to a file inside the directory."""
        name = os.path.basename(image_url.replace("\\", "/").rstrip("/"))
        if not name or name in (".", ".."):
            return None
        return self.directory / name

    def save(self, filename: Optional[str], contents: bytes) -> str:
        """
        Store image bytes under a unique name.

        Args:
            filename: Original client filename (only its basename is kept)
            contents: Raw file contents

        Returns:
            Relative path to persist on the post, e.g. ``images/<file>``
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        original = os.path.basename(filename or "image").replace(" ", "-")
        stored_name = f"{uuid.uuid4().hex}-{original}"
        (self.directory / stored_name).write_bytes(contents)
        logger.info(f"Stored image {stored_name} ({len(contents)} bytes)")
        return f"{self.url_prefix}/{stored_name}"

    def clear_image(self, image_url: Optional[str]) -> bool:
        """
        Remove a stored image.

        Returns:
            True if a file was removed
        """
        if not image_url:
            return False

        path = self._resolve(image_url)
        if path is None:
            logger.warning(f"Ignoring image path outside image store: {image_url!r}")
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"Image already gone: {path}")
            return False
        except OSError as e:
            logger.error(f"Could not remove image {path}: {e}")
            return False

        logger.info(f"Removed image {path}")
        return True

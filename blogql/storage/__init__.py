"""
Storage for uploaded post images.
"""

from blogql.storage.images import ImageStore, ALLOWED_IMAGE_TYPES

__all__ = ["ImageStore", "ALLOWED_IMAGE_TYPES"]

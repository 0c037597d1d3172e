"""
Dependency injection for BlogQL API.

Provides the database, image store, and settings for routes and the
GraphQL context.
"""

import logging
from typing import Optional

from blogql.config.settings import get_settings
from blogql.database.mongodb import MongoDB, initialize_database
from blogql.storage.images import ImageStore

logger = logging.getLogger(__name__)


# =============================================================================
# Database
# =============================================================================

_db_instance: Optional[MongoDB] = None


def get_db() -> MongoDB:
    """
    Get database instance.

    Creates a new connection if not already connected.

    Returns:
        MongoDB instance

    Raises:
        RuntimeError: If database connection fails
    """
    global _db_instance

    if _db_instance is None or not _db_instance.connected:
        settings = get_settings()
        _db_instance = initialize_database(
            settings.mongodb_uri,
            settings.db_name,
            use_transactions=settings.use_transactions,
        )

        if not _db_instance.connected:
            raise RuntimeError("Failed to connect to database")

    return _db_instance


def close_db():
    """Close database connection."""
    global _db_instance
    if _db_instance:
        _db_instance.disconnect()
        _db_instance = None


# =============================================================================
# Image Store
# =============================================================================

_image_store: Optional[ImageStore] = None


def get_image_store() -> ImageStore:
    """Get the image store for uploaded post images."""
    global _image_store

    if _image_store is None:
        settings = get_settings()
        _image_store = ImageStore(settings.images_dir, url_prefix="images")

    return _image_store


def cleanup():
    """Release all held resources."""
    global _image_store
    close_db()
    _image_store = None
    logger.info("Dependencies cleaned up")

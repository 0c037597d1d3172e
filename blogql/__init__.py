"""
BlogQL - GraphQL API for a small blogging application.

Key Features:
- Account registration and token-based log in
- Ownership-scoped CRUD over posts
- Paginated post listing with populated creators
- Image upload and static serving for post images
"""

__version__ = "0.1.0"
__author__ = "BlogQL Team"

from blogql.config.settings import Settings, get_settings
from blogql.errors import (
    BlogQLError,
    InvalidInputError,
    UnauthenticatedError,
    UnauthorizedError,
    NotFoundError,
    ConflictError,
)

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "BlogQLError",
    "InvalidInputError",
    "UnauthenticatedError",
    "UnauthorizedError",
    "NotFoundError",
    "ConflictError",
]

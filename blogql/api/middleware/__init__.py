"""
BlogQL API Middleware.

Provides authentication and request logging middleware.
"""

from blogql.api.middleware.auth import (
    AuthMiddleware,
    caller_from_header,
    get_caller,
)
from blogql.api.middleware.logging import RequestLoggingMiddleware

__all__ = [
    # Middleware
    "AuthMiddleware",
    "RequestLoggingMiddleware",
    # Auth helpers
    "caller_from_header",
    "get_caller",
]

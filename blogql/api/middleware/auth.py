"""
API middleware for authentication.

Derives the caller identity from the ``Authorization: Bearer <token>``
header and stores it on ``request.state.caller``. Requests are never
rejected here: a missing or invalid token yields an anonymous identity and
each resolver decides whether authentication is required.
"""

import logging
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from blogql.auth.context import CallerIdentity
from blogql.auth.tokens import verify_token
from blogql.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def caller_from_header(
    auth_header: Optional[str],
    settings: Optional[Settings] = None,
) -> CallerIdentity:
    """
    Build the caller identity from an Authorization header value.

    Args:
        auth_header: Raw header value (may be None)
        settings: Settings providing the signing secret

    Returns:
        Authenticated identity if the token verifies, anonymous otherwise
    """
    settings = settings or get_settings()

    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return CallerIdentity.anonymous()

    if not settings.jwt_secret:
        logger.warning("JWT_SECRET not configured, treating caller as anonymous")
        return CallerIdentity.anonymous()

    token = auth_header[len(BEARER_PREFIX):].strip()
    caller = verify_token(token, secret=settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return caller or CallerIdentity.anonymous()


class AuthMiddleware(BaseHTTPMiddleware):
    """Attach the caller identity to every request."""

    async def dispatch(self, request: Request, call_next):
        request.state.caller = caller_from_header(request.headers.get("Authorization"))
        return await call_next(request)


def get_caller(request: Request) -> CallerIdentity:
    """Dependency returning the caller identity of the current request."""
    return getattr(request.state, "caller", None) or CallerIdentity.anonymous()

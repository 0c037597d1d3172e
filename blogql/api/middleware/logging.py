"""
API middleware for request logging.
"""

import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all API requests."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000

        caller = getattr(request.state, "caller", None)
        user = caller.user_id if caller is not None and caller.is_auth else "-"

        logger.info(
            f"{request.method} {request.url.path} "
            f"status={response.status_code} "
            f"user={user} "
            f"duration={duration_ms:.1f}ms"
        )

        return response

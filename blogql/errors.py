"""
Error taxonomy for BlogQL resolvers.

Every failure a resolver can signal to a client is a ``BlogQLError``.
graphql-core copies ``extensions`` from the original exception into the
wire error, so clients receive ``code``, ``status`` and, for invalid input,
the list of field violations under ``data``.
"""

from typing import Any, Dict, List, Optional


class BlogQLError(Exception):
    """Base class for client-facing resolver errors."""

    code: str = "INTERNAL_ERROR"
    status: Optional[int] = 500
    default_message: str = "Something went wrong..."

    def __init__(self, message: Optional[str] = None, data: Optional[List[Dict[str, Any]]] = None):
        self.message = message or self.default_message
        self.data = list(data) if data else []
        super().__init__(self.message)

    @property
    def extensions(self) -> Dict[str, Any]:
        extensions: Dict[str, Any] = {"code": self.code, "status": self.status}
        if self.data:
            extensions["data"] = self.data
        return extensions


class InvalidInputError(BlogQLError):
    """One or more input fields failed validation."""
    code = "INVALID_INPUT"
    status = 422
    default_message = "Invalid Input"


class UnauthenticatedError(BlogQLError):
    """Caller is not logged in or presented bad credentials."""
    code = "UNAUTHENTICATED"
    status = 401
    default_message = "User is not authenticated..."


class UnauthorizedError(BlogQLError):
    """Caller is logged in but may not act on the entity."""
    code = "UNAUTHORIZED"
    status = 401
    default_message = "User is not authorized..."


class NotFoundError(BlogQLError):
    """Referenced entity does not exist."""
    code = "NOT_FOUND"
    status = 404
    default_message = "Something went wrong while fetching the resource..."


class ConflictError(BlogQLError):
    """A unique key is already taken."""
    code = "CONFLICT"
    status = 409
    default_message = "Resource already exists"

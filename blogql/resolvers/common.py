"""
Helpers shared by resolvers.
"""

from typing import Any, Dict, Optional

from blogql.auth.context import CallerIdentity
from blogql.errors import InvalidInputError, UnauthenticatedError, UnauthorizedError
from blogql.validation import errors_to_data


def require_auth(caller: Optional[CallerIdentity]) -> CallerIdentity:
    """Fail unless the caller is authenticated."""
    if caller is None or not caller.is_auth or not caller.user_id:
        raise UnauthenticatedError("User is not authenticated...")
    return caller


def raise_if_invalid(errors) -> None:
    """Raise ``InvalidInputError`` carrying every violation, if any."""
    if errors:
        raise InvalidInputError("Invalid Input", data=errors_to_data(errors))


def require_owner(post: Dict[str, Any], caller: CallerIdentity, action: str) -> None:
    """
    Fail unless the caller created the post.

    The post must have its creator populated; a creator that no longer
    exists matches no caller.
    """
    creator = post.get("creator")
    creator_id = str(creator["_id"]) if isinstance(creator, dict) else None
    if creator_id is None or creator_id != str(caller.user_id):
        raise UnauthorizedError(f"User is not authorized to {action} this post...")

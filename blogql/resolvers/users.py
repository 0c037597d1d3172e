"""
Account resolvers: registration, log in, and status.
"""

import logging
from typing import Any, Dict, Optional

from pymongo.errors import DuplicateKeyError

from blogql.auth.context import CallerIdentity
from blogql.auth.passwords import hash_password, verify_password
from blogql.auth.tokens import issue_token
from blogql.config.settings import Settings, get_settings
from blogql.database.mongodb import MongoDB
from blogql.errors import ConflictError, NotFoundError, UnauthenticatedError
from blogql.resolvers.common import raise_if_invalid, require_auth
from blogql.resolvers.serializers import serialize_user
from blogql.validation import validate_user_input

logger = logging.getLogger(__name__)


def create_user(
    db: MongoDB,
    email: str,
    name: str,
    password: str,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """
    Register a new account.

    Raises:
        InvalidInputError: If the email or password is invalid
        ConflictError: If the email is already registered
    """
    settings = settings or get_settings()

    raise_if_invalid(validate_user_input(email, password))

    if db.find_user_by_email(email):
        raise ConflictError("User already exists")

    hashed = hash_password(password, rounds=settings.bcrypt_rounds)

    try:
        user = db.insert_user(email=email, name=name, password_hash=hashed)
    except DuplicateKeyError:
        # Registered concurrently between the lookup and the insert
        raise ConflictError("User already exists")

    return serialize_user(user)


def log_in(
    db: MongoDB,
    email: str,
    password: str,
    settings: Optional[Settings] = None,
) -> Dict[str, str]:
    """
    Authenticate an account and issue a token.

    Returns:
        ``{"token": ..., "user_id": ...}``

    Raises:
        UnauthenticatedError: If the account is unknown or the password wrong
    """
    settings = settings or get_settings()

    user = db.find_user_by_email(email)
    if not user:
        raise UnauthenticatedError("User could not be found...")

    if not verify_password(password, user.get("password", "")):
        raise UnauthenticatedError("Password does not match...")

    user_id = str(user["_id"])
    token = issue_token(
        user_id,
        user["email"],
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    logger.info(f"User {user_id} logged in")
    return {"token": token, "user_id": user_id}


def get_status(db: MongoDB, caller: CallerIdentity) -> Dict[str, Any]:
    """Get the caller's account."""
    caller = require_auth(caller)

    user = db.find_user_by_id(caller.user_id)
    if not user:
        raise NotFoundError("User not found...")

    return serialize_user(user)


def update_status(db: MongoDB, caller: CallerIdentity, status: str) -> Dict[str, Any]:
    """Overwrite the caller's status line."""
    caller = require_auth(caller)

    if not db.find_user_by_id(caller.user_id):
        raise NotFoundError("User not found...")

    user = db.update_user_status(caller.user_id, status)
    if not user:
        raise NotFoundError("User not found...")

    return serialize_user(user)

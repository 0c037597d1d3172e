"""
Signed, time-limited authentication tokens.

Tokens are HS256 JWTs carrying the account identifier and email. The
signing secret comes from ``Settings.jwt_secret``.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from blogql.auth.context import CallerIdentity
from blogql.config.settings import get_settings

logger = logging.getLogger(__name__)

TOKEN_TTL = timedelta(hours=1)


class TokenVerificationError(Exception):
    """Token signature, expiry or claims are invalid."""


def _resolve_secret(secret: Optional[str]) -> str:
    secret = secret if secret is not None else get_settings().jwt_secret
    if not secret:
        raise RuntimeError("JWT secret not configured")
    return secret


def issue_token(
    user_id: str,
    email: str,
    secret: Optional[str] = None,
    algorithm: str = "HS256",
    now: Optional[datetime] = None,
) -> str:
    """
    Issue a signed token for an account.

    Args:
        user_id: Account identifier
        email: Account email
        secret: Signing secret (defaults to the configured one)
        algorithm: JWT algorithm
        now: Issue time (defaults to the current UTC time)

    Returns:
        Encoded JWT expiring ``TOKEN_TTL`` after ``now``
    """
    now = now or datetime.now(timezone.utc)
    payload = {
        "userId": str(user_id),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + TOKEN_TTL).timestamp()),
    }
    return jwt.encode(payload, _resolve_secret(secret), algorithm=algorithm)


def decode_token(
    token: str,
    secret: Optional[str] = None,
    algorithm: str = "HS256",
) -> dict:
    """
    Verify a token and return its claims.

    Raises:
        TokenVerificationError: If the signature, expiry or claims are invalid
    """
    try:
        claims = jwt.decode(
            token,
            _resolve_secret(secret),
            algorithms=[algorithm],
            options={"require": ["exp", "userId"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenVerificationError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise TokenVerificationError(f"Token verification failed: {e}") from e

    if not claims.get("userId"):
        raise TokenVerificationError("Token missing 'userId' claim")

    return claims


def verify_token(
    token: str,
    secret: Optional[str] = None,
    algorithm: str = "HS256",
) -> Optional[CallerIdentity]:
    """Verify a token and build the caller identity, or None if invalid."""
    try:
        claims = decode_token(token, secret=secret, algorithm=algorithm)
    except TokenVerificationError as e:
        logger.debug(f"Rejected token: {e}")
        return None
    return CallerIdentity.from_claims(claims)

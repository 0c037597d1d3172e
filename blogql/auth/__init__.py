"""
Authentication for BlogQL.

Provides:
- Password hashing and comparison (bcrypt)
- Signed, time-limited tokens (PyJWT)
- Request-scoped caller identity
"""

from blogql.auth.context import CallerIdentity
from blogql.auth.passwords import hash_password, verify_password
from blogql.auth.tokens import (
    TOKEN_TTL,
    TokenVerificationError,
    issue_token,
    decode_token,
    verify_token,
)

__all__ = [
    "CallerIdentity",
    "hash_password",
    "verify_password",
    "TOKEN_TTL",
    "TokenVerificationError",
    "issue_token",
    "decode_token",
    "verify_token",
]

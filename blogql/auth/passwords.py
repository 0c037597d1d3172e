"""
Password hashing for account secrets.
"""

import bcrypt

DEFAULT_ROUNDS = 12

# bcrypt only considers the first 72 bytes of a secret
_MAX_SECRET_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_SECRET_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a plaintext password, returning the bcrypt hash as text."""
    hashed = bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash."""
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(_encode(password), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False

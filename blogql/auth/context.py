"""
Caller identity attached to every inbound request.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CallerIdentity:
    """
    Identity of the caller, derived from a verified token.

    Attributes:
        is_auth: Whether the request carried a valid token
        user_id: Account identifier (string form) when authenticated
        email: Account email when authenticated
        exp: Token expiration timestamp
    """
    is_auth: bool = False
    user_id: Optional[str] = None
    email: Optional[str] = None
    exp: Optional[int] = None

    @classmethod
    def anonymous(cls) -> "CallerIdentity":
        """Identity of a caller without a valid token."""
        return cls()

    @classmethod
    def from_claims(cls, claims: dict) -> "CallerIdentity":
        """Create an authenticated identity from verified token claims."""
        return cls(
            is_auth=True,
            user_id=str(claims["userId"]),
            email=claims.get("email"),
            exp=claims.get("exp"),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "is_auth": self.is_auth,
            "user_id": self.user_id,
            "email": self.email,
        }

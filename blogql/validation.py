"""
Input validation for BlogQL resolvers.

Each ``validate_*`` function checks every rule for one input and returns the
complete list of violations; it never stops at the first failure. An empty
list means the input is valid.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List

from email_validator import validate_email, EmailNotValidError


PASSWORD_MIN_LENGTH = 5
TITLE_MIN_LENGTH = 4
CONTENT_MIN_LENGTH = 10


@dataclass(frozen=True)
class FieldError:
    """A single field-scoped validation message."""
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def is_empty(value: str) -> bool:
    return value is None or len(value) == 0


def has_min_length(value: str, minimum: int) -> bool:
    return value is not None and len(value) >= minimum


def is_email(value: str) -> bool:
    """Syntactic e-mail check; no DNS lookups."""
    if is_empty(value):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_user_input(email: str, password: str) -> List[FieldError]:
    """Validate registration input."""
    errors = []

    if not is_email(email):
        errors.append(FieldError("email", "Invalid e-mail..."))

    if is_empty(password) or not has_min_length(password, PASSWORD_MIN_LENGTH):
        errors.append(FieldError("password", "Password is too short..."))

    return errors


def validate_post_input(title: str, content: str) -> List[FieldError]:
    """Validate post title and content."""
    errors = []

    if is_empty(title) or not has_min_length(title, TITLE_MIN_LENGTH):
        errors.append(FieldError("title", "Title is invalid..."))

    if is_empty(content) or not has_min_length(content, CONTENT_MIN_LENGTH):
        errors.append(FieldError("content", "Content is invalid..."))

    return errors


def errors_to_data(errors: List[FieldError]) -> List[Dict[str, str]]:
    """Convert violations to the payload carried by ``InvalidInputError``."""
    return [e.to_dict() for e in errors]

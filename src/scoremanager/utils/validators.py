"""Data validation helpers.

Functions:
- validate_email(email) -> bool: Check email shape
- normalize_identity(value) -> str: Trim an identity for comparison
- parse_grade(value) -> int | None: Parse an optional grade search field
"""

import re

# Email validation pattern
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")


def validate_email(email: str) -> bool:
    """Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if the address looks like an email, False otherwise
    """
    if not email:
        return False
    return bool(EMAIL_PATTERN.match(email.strip()))


def normalize_identity(value: str) -> str:
    """Strip surrounding whitespace. Case is preserved."""
    return value.strip()


def parse_grade(value: str | int | None) -> int | None:
    """Parse a grade search field. Blank or non-numeric means unset."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None

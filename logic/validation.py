"""
Validation and sanitization utilities.

This module contains functions for validating credentials before they are
submitted to the auth provider, and for sanitizing search text and pointer
coordinates coming from the browser.
"""

import math
import re
from typing import Any, Optional, Tuple

from .errors import ValidationError

MAX_QUERY_LEN = 200
MAX_EMAIL_LEN = 254
DEFAULT_MIN_PASSWORD_LEN = 6
POINTER_EVENTS = {"down", "move", "up", "leave"}

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_email(value: Any) -> str:
    """Validate and normalise an email address.

    Args:
        value: Raw email input.

    Returns:
        Trimmed, lowercased email.

    Raises:
        ValidationError: If the address is missing, too long or malformed.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Email is required", field="email")
    value = value.strip().lower()
    if len(value) > MAX_EMAIL_LEN:
        raise ValidationError("Email is too long", field="email")
    if not EMAIL_RE.match(value):
        raise ValidationError("Invalid email address", field="email")
    return value


def validate_password(value: Any, min_length: int = DEFAULT_MIN_PASSWORD_LEN) -> str:
    """Check the password meets the minimum length.

    Raises:
        ValidationError: If the password is missing or too short.
    """
    if not isinstance(value, str) or not value:
        raise ValidationError("Password is required", field="password")
    if len(value) < min_length:
        raise ValidationError(
            f"Password should be at least {min_length} characters", field="password"
        )
    return value


def validate_credentials(
        email: Any, password: Any, min_password_length: int = DEFAULT_MIN_PASSWORD_LEN
) -> Tuple[str, str]:
    return validate_email(email), validate_password(password, min_password_length)


def sanitise_query(value: Any) -> str:
    """Sanitize search box text.

    The text is kept as typed (no trimming) so matching behaves like the
    input field; only the type and length are enforced.
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError("Search query must be text", field="query")
    if len(value) > MAX_QUERY_LEN:
        raise ValidationError("Search query too long", field="query")
    return value


def sanitise_float(value: Any, *, allow_none: bool = False, field: str = None) -> Optional[float]:
    """Sanitize and validate a finite numeric value.

    Args:
        value: Value to convert to float.
        allow_none: Whether None is an acceptable value.
        field: Field name reported in the error.

    Returns:
        Float value or None if allowed.

    Raises:
        ValidationError: If value is not a finite number.
    """
    if value is None and allow_none:
        return None
    if isinstance(value, bool):
        raise ValidationError("Invalid numeric value", field=field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid numeric value", field=field)
    if not math.isfinite(number):
        raise ValidationError("Invalid numeric value", field=field)
    return number


def sanitise_container_width(value: Any) -> float:
    """Rendered map container width; must be strictly positive."""
    width = sanitise_float(value, field="container_width")
    if width <= 0:
        raise ValidationError("Container width must be positive", field="container_width")
    return width


def sanitise_pointer_event(value: Any) -> str:
    if value not in POINTER_EVENTS:
        raise ValidationError(f"Unknown pointer event: {value}", field="event")
    return value

"""
Tests for input validation.

Run with: python -m pytest tests/test_validation.py
"""

import pytest

from logic.errors import ValidationError
from logic.validation import (
    sanitise_container_width,
    sanitise_float,
    sanitise_pointer_event,
    sanitise_query,
    validate_credentials,
    validate_email,
    validate_password,
)


def test_validate_email_normalises():
    assert validate_email("  Hunter@Example.COM ") == "hunter@example.com"


@pytest.mark.parametrize("value", [None, "", "   ", "no-at-sign", "a@b", "two@@example.com", 42])
def test_validate_email_rejects(value):
    with pytest.raises(ValidationError) as exc:
        validate_email(value)
    assert exc.value.field == "email"


def test_password_minimum_length():
    assert validate_password("secret") == "secret"
    with pytest.raises(ValidationError) as exc:
        validate_password("short")
    assert exc.value.field == "password"
    assert "6" in str(exc.value)


def test_password_custom_minimum():
    with pytest.raises(ValidationError):
        validate_password("secret1", min_length=8)


def test_validate_credentials():
    assert validate_credentials("A@B.io", "hunter2!") == ("a@b.io", "hunter2!")
    with pytest.raises(ValidationError):
        validate_credentials("a@b.io", "")


def test_sanitise_query_keeps_text_as_typed():
    assert sanitise_query(" Gold ") == " Gold "
    assert sanitise_query(None) == ""
    with pytest.raises(ValidationError):
        sanitise_query("x" * 500)
    with pytest.raises(ValidationError):
        sanitise_query(12)


def test_sanitise_float():
    assert sanitise_float("1.5") == 1.5
    assert sanitise_float(None, allow_none=True) is None
    for bad in [True, "abc", float("nan"), float("inf"), None]:
        with pytest.raises(ValidationError):
            sanitise_float(bad)


def test_sanitise_container_width():
    assert sanitise_container_width(450) == 450.0
    for bad in [0, -10]:
        with pytest.raises(ValidationError):
            sanitise_container_width(bad)


def test_sanitise_pointer_event():
    for event in ["down", "move", "up", "leave"]:
        assert sanitise_pointer_event(event) == event
    with pytest.raises(ValidationError):
        sanitise_pointer_event("click")

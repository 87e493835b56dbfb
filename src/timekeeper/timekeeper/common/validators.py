from __future__ import annotations

from ..core.exceptions import ValidationError


def require_text(value, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value


def require_non_empty(value: str, field_name: str) -> str:
    value = require_text(value, field_name)
    if not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_length_between(value: str, field_name: str, min_len: int, max_len: int) -> str:
    value = require_text(value, field_name).strip()
    if len(value) < min_len or len(value) > max_len:
        raise ValidationError(f"{field_name} must be between {min_len} and {max_len} characters")
    return value


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if value is not None and len(require_text(value, field_name)) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def require_positive_int(value, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")
    if number < 1:
        raise ValidationError(f"{field_name} must be at least 1")
    return number

from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required", errors=[{"field": field_name, "message": "Required"}])
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        message = f"{field_name} must be at least {min_len} characters long"
        raise ValidationError(message, errors=[{"field": field_name, "message": message}])
    return value


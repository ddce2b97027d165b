from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def clean_optional(value: Optional[str]) -> Optional[str]:
    """Blank strings are stored as NULL."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def require_fields(message: str, *values: Optional[str]) -> None:
    """Raise ``ValidationError(message)`` when any value is missing or blank."""
    for value in values:
        if value is None or not str(value).strip():
            raise ValidationError(message)


def parse_int(value, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")

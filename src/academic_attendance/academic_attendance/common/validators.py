from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_email(value: Optional[str]) -> Optional[str]:
    """Normalize an optional assignee email. Blank and "none" both mean unassigned."""
    v = (value or "").strip()
    if not v or v.lower() == "none":
        return None
    return v


def require_enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"{field_name} is invalid")

from __future__ import annotations

from datetime import date, datetime

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def format_iso_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def normalize_hhmm(value: str) -> str:
    """Validate a 24-hour time and return it zero-padded as HH:MM.

    Slot times are compared as strings, which is only correct for the padded
    form, so every time entering the system goes through here.
    """
    v = (value or "").strip()
    try:
        parsed = datetime.strptime(v, TIME_FORMAT)
    except ValueError:
        raise ValidationError(f"Invalid time {value!r} (expected HH:MM)")
    return parsed.strftime(TIME_FORMAT)


def intervals_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """Half-open [start, end) overlap on HH:MM strings."""
    return start_a < end_b and end_a > start_b


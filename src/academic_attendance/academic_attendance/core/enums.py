from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Faculty role used for authorization."""

    HOD = "hod"
    FACULTY = "faculty"


class SubjectType(str, Enum):
    THEORY = "theory"
    PRACTICAL = "practical"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class Weekday(str, Enum):
    """Teaching days. The week has six days; Sunday is not a teaching day."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"

    @property
    def position(self) -> int:
        return _WEEKDAY_ORDER.index(self)

    @classmethod
    def for_date(cls, value: date) -> Optional["Weekday"]:
        """Weekday of a calendar date, or None on Sunday."""
        i = value.weekday()
        if i >= len(_WEEKDAY_ORDER):
            return None
        return _WEEKDAY_ORDER[i]


_WEEKDAY_ORDER = [
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
    Weekday.FRIDAY,
    Weekday.SATURDAY,
]

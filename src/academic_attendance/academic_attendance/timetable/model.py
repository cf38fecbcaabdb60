from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..common.datetime_utils import intervals_overlap, normalize_hhmm
from ..core.enums import SubjectType, Weekday
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class TimeSlot:
    """Domain entity: a weekly occurrence of a subject for one class division.

    Times are zero-padded 24-hour "HH:MM" strings and the slot covers the
    half-open interval [start_time, end_time) within a single day.
    """

    class_id: str
    division_id: str
    day: Weekday
    start_time: str
    end_time: str
    subject_type: SubjectType = SubjectType.THEORY
    subject_id: Optional[str] = None
    teacher_email: Optional[str] = None
    slot_id: Optional[str] = None

    def __post_init__(self):
        try:
            day = Weekday(self.day)
        except ValueError:
            raise ValidationError(f"{self.day!r} is not a teaching day")
        try:
            subject_type = SubjectType(self.subject_type)
        except ValueError:
            raise ValidationError(f"Unknown subject type {self.subject_type!r}")

        start = normalize_hhmm(self.start_time)
        end = normalize_hhmm(self.end_time)
        if end <= start:
            raise ValidationError("End time must be after start time")

        object.__setattr__(self, "day", day)
        object.__setattr__(self, "subject_type", subject_type)
        object.__setattr__(self, "start_time", start)
        object.__setattr__(self, "end_time", end)

    def overlaps(self, other: "TimeSlot") -> bool:
        return self.day == other.day and intervals_overlap(
            self.start_time, self.end_time, other.start_time, other.end_time
        )

    @property
    def sort_key(self):
        return (self.day.position, self.start_time, self.end_time)

    def label(self) -> str:
        return f"{self.day.value} {self.start_time}-{self.end_time}"


class ConflictKind(str, Enum):
    CLASS_DIVISION = "class_division"
    TEACHER = "teacher"


@dataclass(frozen=True)
class SlotConflict:
    """Why a slot write was refused, and which committed slot it clashes with."""

    kind: ConflictKind
    existing: TimeSlot

    @property
    def message(self) -> str:
        if self.kind == ConflictKind.CLASS_DIVISION:
            return f"Scheduling conflict: time overlap within this class/division ({self.existing.label()})"
        return (
            f"Scheduling conflict: {self.existing.teacher_email} is already booked elsewhere "
            f"at that time ({self.existing.label()})"
        )


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a store write. Falsy when the write was refused."""

    slot_id: Optional[str] = None
    conflict: Optional[SlotConflict] = None
    found: bool = True

    @property
    def ok(self) -> bool:
        return self.found and self.conflict is None

    def __bool__(self) -> bool:
        return self.ok

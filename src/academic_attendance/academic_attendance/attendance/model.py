from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import AttendanceStatus, SubjectType
from ..timetable.model import TimeSlot
from .session import session_key


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status for one attendance session.

    slot_id and session_key tie the record to the timetable slot it was
    taken for.
    """

    student_id: str
    subject_id: str
    subject_type: SubjectType
    class_id: str
    division_id: str
    slot_id: str
    session_key: str
    date: date
    period: str
    status: AttendanceStatus
    marked_by: str
    marked_at: datetime
    remarks: Optional[str] = None
    record_id: Optional[str] = None


@dataclass(frozen=True)
class AttendanceSession:
    """Derived: one teaching occurrence that attendance can be marked for once."""

    slot: TimeSlot
    on: date
    already_marked: bool = False

    @property
    def key(self) -> str:
        return session_key(
            self.slot.class_id,
            self.slot.division_id,
            self.slot.subject_id or "",
            self.slot.slot_id or "",
            self.on,
        )

    @property
    def period(self) -> str:
        return f"{self.slot.start_time}-{self.slot.end_time}"


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of handing a batch of records to the attendance sink."""

    record_ids: Tuple[str, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class SessionSummary:
    session_key: str
    present: int
    absent: int

    @property
    def total(self) -> int:
        return self.present + self.absent

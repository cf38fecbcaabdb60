from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, List, Mapping, Optional, Union

from ..catalog.model import OfferedSubject
from ..catalog.service import SubjectService
from ..catalog.student_service import StudentService
from ..core.enums import AttendanceStatus, SubjectType, Weekday
from ..core.exceptions import AuthorizationError, DuplicateAttendanceError, NotFoundError, ValidationError
from ..timetable.store import ScheduleStore
from ..users.model import Faculty
from .lock import SessionLockStore
from .model import AttendanceRecord, AttendanceSession, SessionSummary
from .repository import AttendanceRepository
from .session import resolve_today_slots

logger = logging.getLogger(__name__)

Mark = Union[bool, AttendanceStatus, str]


class AttendanceService:
    """Use case: a faculty member takes attendance for today's session."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        locks: SessionLockStore,
        schedule: ScheduleStore,
        subjects: SubjectService,
        students: StudentService,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._attendance = attendance
        self._locks = locks
        self._schedule = schedule
        self._subjects = subjects
        self._students = students
        self._clock = clock

    def my_subjects(self, current: Faculty, class_id: str, division_id: str) -> List[OfferedSubject]:
        return self._subjects.subjects_for_faculty(current.email, class_id, division_id)

    def my_sessions_today(
        self,
        current: Faculty,
        *,
        class_id: str,
        division_id: str,
        subject_id: str,
        subject_type: SubjectType,
        on: Optional[date] = None,
    ) -> List[AttendanceSession]:
        """Sessions of ``on`` (default today) that belong to the caller. Empty means nothing to mark."""
        on = on or self._clock().date()
        slots = resolve_today_slots(
            current.email,
            class_id,
            division_id,
            subject_id,
            subject_type,
            self._schedule.slots_for_class_division(class_id, division_id),
            today=on,
        )
        out = []
        for slot in slots:
            session = AttendanceSession(slot=slot, on=on)
            marked = self._locks.has_been_marked(session.key) or self._attendance.exists_for_session(session.key)
            out.append(AttendanceSession(slot=slot, on=on, already_marked=marked))
        return out

    def mark(
        self,
        current: Faculty,
        *,
        slot_id: str,
        marks: Mapping[str, Mark],
        remarks: Optional[str] = None,
    ) -> SessionSummary:
        """Record attendance for one of today's slots. Past and future sessions cannot be marked."""
        now = self._clock()
        on = now.date()

        slot = self._schedule.get(slot_id)
        if not slot:
            raise NotFoundError("Time slot not found")
        if slot.teacher_email != current.email:
            logger.warning("%s tried to mark attendance for slot %s", current.email, slot_id)
            raise AuthorizationError("This slot is assigned to another teacher")
        if Weekday.for_date(on) != slot.day:
            raise ValidationError(f"This slot is scheduled on {slot.day.value}, not on {on.strftime('%A')}")
        if not slot.subject_id:
            raise ValidationError("This slot has no subject assigned")

        session = AttendanceSession(slot=slot, on=on)
        if self._locks.has_been_marked(session.key):
            logger.warning("Attendance for session %s already marked", session.key)
            raise DuplicateAttendanceError("Attendance has already been marked for this session")

        if not marks:
            raise ValidationError("No students marked")
        roster = {s.student_id for s in self._students.roster(slot.class_id, slot.division_id)}
        unknown = sorted(set(marks) - roster)
        if unknown:
            raise ValidationError(f"Students not in this class division: {', '.join(unknown)}")

        remarks = (remarks or "").strip() or None
        records = [
            AttendanceRecord(
                student_id=student_id,
                subject_id=slot.subject_id,
                subject_type=slot.subject_type,
                class_id=slot.class_id,
                division_id=slot.division_id,
                slot_id=slot_id,
                session_key=session.key,
                date=on,
                period=session.period,
                status=self._to_status(mark),
                marked_by=current.email,
                marked_at=now,
                remarks=remarks,
            )
            for student_id, mark in sorted(marks.items())
        ]

        result = self._attendance.submit(records)
        if not result:
            logger.warning("Attendance submit for %s refused: %s", session.key, result.error)
            raise DuplicateAttendanceError(result.error)

        self._locks.mark_as_marked(session.key)
        for r in records:
            self._students.record_attendance(r.student_id, present=r.status == AttendanceStatus.PRESENT)

        summary = self.session_summary(session.key)
        logger.info(
            "Attendance marked for %s by %s: %d present, %d absent",
            session.key, current.email, summary.present, summary.absent,
        )
        return summary

    def session_summary(self, session_key: str) -> SessionSummary:
        records = self._attendance.records_for_session(session_key)
        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        return SessionSummary(session_key=session_key, present=present, absent=len(records) - present)

    def records_for_student(self, student_id: str, subject_id: Optional[str] = None) -> List[AttendanceRecord]:
        records = self._attendance.records_for_student(student_id, subject_id=subject_id)
        return sorted(records, key=lambda r: (r.date, r.period))

    @staticmethod
    def _to_status(mark: Mark) -> AttendanceStatus:
        if isinstance(mark, bool):
            return AttendanceStatus.PRESENT if mark else AttendanceStatus.ABSENT
        try:
            return AttendanceStatus(mark)
        except ValueError:
            raise ValidationError(f"Unknown attendance status {mark!r}")

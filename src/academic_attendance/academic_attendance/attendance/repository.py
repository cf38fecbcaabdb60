from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, SubmitResult


class AttendanceRepository(Protocol):
    def submit(self, records: Sequence[AttendanceRecord]) -> SubmitResult:
        """Store a batch atomically.

        The batch is refused as a whole when any (session_key, student_id)
        pair is already stored or repeated within the batch.
        """

        raise NotImplementedError

    def exists_for_session(self, session_key: str) -> bool:
        raise NotImplementedError

    def records_for_session(self, session_key: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def records_for_student(self, student_id: str, *, subject_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

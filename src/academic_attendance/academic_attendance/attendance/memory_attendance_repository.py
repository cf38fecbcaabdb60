from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from .model import AttendanceRecord, SubmitResult
from .repository import AttendanceRepository


class InMemoryAttendanceRepository(AttendanceRepository):
    def __init__(self):
        self._records: Dict[Tuple[str, str], AttendanceRecord] = {}
        self._seq = itertools.count(1)
        self._lock = threading.Lock()

    def submit(self, records: Sequence[AttendanceRecord]) -> SubmitResult:
        with self._lock:
            seen = set()
            for r in records:
                k = (r.session_key, r.student_id)
                if k in self._records or k in seen:
                    return SubmitResult(error=f"Attendance already recorded for student {r.student_id} in this session")
                seen.add(k)

            ids: List[str] = []
            for r in records:
                record_id = str(next(self._seq))
                self._records[(r.session_key, r.student_id)] = replace(r, record_id=record_id)
                ids.append(record_id)
            return SubmitResult(record_ids=tuple(ids))

    def exists_for_session(self, session_key: str) -> bool:
        return any(k[0] == session_key for k in list(self._records))

    def records_for_session(self, session_key: str) -> Sequence[AttendanceRecord]:
        return [r for r in list(self._records.values()) if r.session_key == session_key]

    def records_for_student(self, student_id: str, *, subject_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        return [
            r
            for r in list(self._records.values())
            if r.student_id == student_id and (subject_id is None or r.subject_id == subject_id)
        ]

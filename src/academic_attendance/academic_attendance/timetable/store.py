from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import replace
from typing import Dict, List, Optional

from ..core.constants import SLOT_ID_PREFIX
from ..core.enums import SubjectType
from .model import ConflictKind, SlotConflict, TimeSlot, WriteResult

logger = logging.getLogger(__name__)

# Fields whose change can create a new overlap.
_SCHEDULING_FIELDS = frozenset({"day", "start_time", "end_time", "class_id", "division_id", "teacher_email"})


class ScheduleStore:
    """Owns the committed time slots and refuses writes that would double-book.

    Two committed slots never overlap on the same day when they share a class
    division, or when they share a teacher. Each write runs its conflict check
    and its mutation under one lock. Reads return copies.
    """

    def __init__(self):
        self._slots: Dict[str, TimeSlot] = {}
        self._seq = itertools.count(1)
        self._lock = threading.Lock()

    def find_conflict(self, candidate: TimeSlot, *, exclude_id: Optional[str] = None) -> Optional[SlotConflict]:
        with self._lock:
            return self._find_conflict(candidate, exclude_id)

    def add_slot(self, slot: TimeSlot) -> WriteResult:
        with self._lock:
            conflict = self._find_conflict(slot, None)
            if conflict:
                logger.debug("add_slot refused: %s", conflict.message)
                return WriteResult(conflict=conflict)

            slot_id = self._next_id()
            self._slots[slot_id] = replace(slot, slot_id=slot_id)
            return WriteResult(slot_id=slot_id)

    def update_slot(self, slot_id: str, **patch) -> WriteResult:
        patch.pop("slot_id", None)
        with self._lock:
            current = self._slots.get(slot_id)
            if not current:
                return WriteResult(slot_id=slot_id, found=False)

            updated = replace(current, **patch)
            if _SCHEDULING_FIELDS.intersection(patch):
                conflict = self._find_conflict(updated, slot_id)
                if conflict:
                    logger.debug("update_slot %s refused: %s", slot_id, conflict.message)
                    return WriteResult(slot_id=slot_id, conflict=conflict)

            self._slots[slot_id] = updated
            return WriteResult(slot_id=slot_id)

    def delete_slot(self, slot_id: str) -> bool:
        with self._lock:
            return self._slots.pop(slot_id, None) is not None

    def delete_for_class(self, class_id: str) -> int:
        """Remove every slot of a class. Returns how many were removed."""
        with self._lock:
            doomed = [slot_id for slot_id, s in self._slots.items() if s.class_id == class_id]
            for slot_id in doomed:
                del self._slots[slot_id]
        if doomed:
            logger.debug("Removed %d slot(s) of class %s", len(doomed), class_id)
        return len(doomed)

    def get(self, slot_id: str) -> Optional[TimeSlot]:
        with self._lock:
            return self._slots.get(slot_id)

    def all_slots(self) -> List[TimeSlot]:
        with self._lock:
            return list(self._slots.values())

    def slots_for_class_division(self, class_id: str, division_id: Optional[str] = None) -> List[TimeSlot]:
        """Slots of a class, limited to one division when division_id is given."""
        return [
            s
            for s in self.all_slots()
            if s.class_id == class_id and (division_id is None or s.division_id == division_id)
        ]

    def slots_for_teacher(self, teacher_email: str) -> List[TimeSlot]:
        return [s for s in self.all_slots() if s.teacher_email == teacher_email]

    def slots_for_subject(self, subject_id: str, subject_type: SubjectType) -> List[TimeSlot]:
        return [s for s in self.all_slots() if s.subject_id == subject_id and s.subject_type == subject_type]

    def _next_id(self) -> str:
        while True:
            slot_id = f"{SLOT_ID_PREFIX}-{next(self._seq)}"
            if slot_id not in self._slots:
                return slot_id

    def _find_conflict(self, candidate: TimeSlot, exclude_id: Optional[str]) -> Optional[SlotConflict]:
        # A class/division clash is reported even when a teacher clash was seen first.
        teacher_clash = None
        for existing in self._slots.values():
            if exclude_id is not None and existing.slot_id == exclude_id:
                continue
            if not candidate.overlaps(existing):
                continue

            if existing.class_id == candidate.class_id and existing.division_id == candidate.division_id:
                return SlotConflict(kind=ConflictKind.CLASS_DIVISION, existing=existing)
            if teacher_clash is None and candidate.teacher_email and existing.teacher_email == candidate.teacher_email:
                teacher_clash = SlotConflict(kind=ConflictKind.TEACHER, existing=existing)
        return teacher_clash

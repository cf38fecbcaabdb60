from __future__ import annotations

import logging
from typing import List, Optional

from ..catalog.service import ClassService, SubjectService
from ..common.validators import optional_email
from ..core.enums import SubjectType, Weekday
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..users.model import Faculty
from .model import TimeSlot, WriteResult
from .store import ScheduleStore

logger = logging.getLogger(__name__)


class TimetableService:
    """Use case: maintain class timetables.

    The head of department may edit any class of the department; a class
    teacher may edit only their own class.
    """

    def __init__(self, store: ScheduleStore, classes: ClassService, subjects: SubjectService):
        self._store = store
        self._classes = classes
        self._subjects = subjects

    def add_slot(
        self,
        current: Faculty,
        *,
        class_id: str,
        division_id: str,
        day: Weekday,
        start_time: str,
        end_time: str,
        subject_type: SubjectType = SubjectType.THEORY,
        subject_id: Optional[str] = None,
        teacher_email: Optional[str] = None,
    ) -> str:
        self._require_editor(current, class_id)
        self._require_division(class_id, division_id)

        subject_id = (subject_id or "").strip() or None
        teacher_email = optional_email(teacher_email)
        if subject_id:
            assigned = self._require_offering(subject_id, subject_type, class_id, division_id)
            teacher_email = teacher_email or assigned

        slot = TimeSlot(
            class_id=class_id,
            division_id=division_id,
            day=day,
            start_time=start_time,
            end_time=end_time,
            subject_type=subject_type,
            subject_id=subject_id,
            teacher_email=teacher_email,
        )
        result = self._store.add_slot(slot)
        self._raise_for(result, current)

        logger.info("Slot %s added (%s %s/%s) by %s", result.slot_id, slot.label(), class_id, division_id, current.email)
        return result.slot_id

    def update_slot(self, current: Faculty, slot_id: str, **patch) -> None:
        existing = self.get(slot_id)
        self._require_editor(current, existing.class_id)

        if "class_id" in patch and patch["class_id"] != existing.class_id:
            self._require_editor(current, patch["class_id"])
        class_id = patch.get("class_id", existing.class_id)
        if "division_id" in patch or "class_id" in patch:
            self._require_division(class_id, patch.get("division_id", existing.division_id))
        if "teacher_email" in patch:
            patch["teacher_email"] = optional_email(patch["teacher_email"])
        subject_id = patch.get("subject_id", existing.subject_id)
        if subject_id and {"subject_id", "subject_type", "class_id", "division_id"}.intersection(patch):
            subject_type = SubjectType(patch.get("subject_type", existing.subject_type))
            division_id = patch.get("division_id", existing.division_id)
            teacher = self._require_offering(subject_id, subject_type, class_id, division_id)
            if "subject_id" in patch:
                patch.setdefault("teacher_email", teacher)

        result = self._store.update_slot(slot_id, **patch)
        self._raise_for(result, current)
        logger.info("Slot %s updated by %s", slot_id, current.email)

    def delete_slot(self, current: Faculty, slot_id: str) -> None:
        existing = self.get(slot_id)
        self._require_editor(current, existing.class_id)

        if not self._store.delete_slot(slot_id):
            raise NotFoundError("Time slot not found")
        logger.info("Slot %s deleted by %s", slot_id, current.email)

    def get(self, slot_id: str) -> TimeSlot:
        slot = self._store.get(slot_id)
        if not slot:
            raise NotFoundError("Time slot not found")
        return slot

    def timetable_for_class(self, class_id: str, division_id: Optional[str] = None) -> List[TimeSlot]:
        return sorted(self._store.slots_for_class_division(class_id, division_id), key=lambda s: s.sort_key)

    def schedule_for_teacher(self, teacher_email: str) -> List[TimeSlot]:
        return sorted(self._store.slots_for_teacher(teacher_email), key=lambda s: s.sort_key)

    def slots_for_subject(self, subject_id: str, subject_type: SubjectType) -> List[TimeSlot]:
        return sorted(self._store.slots_for_subject(subject_id, SubjectType(subject_type)), key=lambda s: s.sort_key)

    def _raise_for(self, result: WriteResult, current: Faculty) -> None:
        if not result.found:
            raise NotFoundError("Time slot not found")
        if result.conflict:
            logger.warning("Slot write by %s refused: %s", current.email, result.conflict.message)
            raise ConflictError(result.conflict)

    def _require_editor(self, current: Faculty, class_id: str) -> None:
        cls = self._classes.get(class_id)
        if current.is_hod and cls.department == current.department:
            return
        if self._classes.is_class_teacher(current, class_id):
            return
        logger.warning("%s tried to edit the timetable of %s", current.email, class_id)
        raise AuthorizationError("Only the class teacher or head of department can edit this timetable")

    def _require_division(self, class_id: str, division_id: str) -> None:
        if not self._classes.get(class_id).has_division(division_id):
            raise ValidationError("Division does not belong to this class")

    def _require_offering(
        self, subject_id: str, subject_type: SubjectType, class_id: str, division_id: str
    ) -> Optional[str]:
        """Check the subject is offered to the class division and return its assigned teacher."""
        subject_type = SubjectType(subject_type)
        if self._subjects.class_of(subject_id, subject_type) != class_id:
            raise ValidationError("Subject does not belong to this class")
        if not self._subjects.is_offered_to(subject_id, subject_type, division_id):
            raise ValidationError("Subject is not offered to this division")
        return self._subjects.teacher_for(subject_id, subject_type)

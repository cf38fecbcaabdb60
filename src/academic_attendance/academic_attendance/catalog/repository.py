from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple

from .model import Division, DivisionScope, Practical, SchoolClass, Student, Subject


class ClassRepository(Protocol):
    def get(self, class_id: str) -> Optional[SchoolClass]:
        raise NotImplementedError

    def add(
        self,
        *,
        name: str,
        department: str,
        divisions: Tuple[Division, ...],
        class_teacher: Optional[str] = None,
        year_coordinator: Optional[str] = None,
    ) -> str:
        """Create a class. Returns class_id."""

        raise NotImplementedError

    def update(self, class_id: str, **changes) -> bool:
        raise NotImplementedError

    def delete(self, class_id: str) -> bool:
        raise NotImplementedError

    def list_for_department(self, department: str) -> Sequence[SchoolClass]:
        raise NotImplementedError


class SubjectRepository(Protocol):
    def get_subject(self, subject_id: str) -> Optional[Subject]:
        raise NotImplementedError

    def add_subject(
        self, *, name: str, code: str, class_id: str, scope: DivisionScope, faculty_email: Optional[str] = None
    ) -> str:
        raise NotImplementedError

    def update_subject(self, subject_id: str, **changes) -> bool:
        raise NotImplementedError

    def delete_subject(self, subject_id: str) -> bool:
        raise NotImplementedError

    def list_subjects(self, *, class_id: Optional[str] = None) -> Sequence[Subject]:
        raise NotImplementedError

    def get_practical(self, practical_id: str) -> Optional[Practical]:
        raise NotImplementedError

    def add_practical(
        self, *, name: str, class_id: str, scope: DivisionScope, teacher_email: Optional[str] = None
    ) -> str:
        raise NotImplementedError

    def update_practical(self, practical_id: str, **changes) -> bool:
        raise NotImplementedError

    def delete_practical(self, practical_id: str) -> bool:
        raise NotImplementedError

    def list_practicals(self, *, class_id: Optional[str] = None) -> Sequence[Practical]:
        raise NotImplementedError


class StudentRepository(Protocol):
    def get(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def add(
        self,
        *,
        name: str,
        email: str,
        reg_no: str,
        mobile: str,
        class_id: str,
        division_id: str,
        mentor_email: Optional[str] = None,
    ) -> str:
        raise NotImplementedError

    def update(self, student_id: str, **changes) -> bool:
        raise NotImplementedError

    def delete(self, student_id: str) -> bool:
        raise NotImplementedError

    def delete_for_class(self, class_id: str) -> int:
        raise NotImplementedError

    def list_students(self, *, class_id: Optional[str] = None, division_id: Optional[str] = None) -> Sequence[Student]:
        raise NotImplementedError

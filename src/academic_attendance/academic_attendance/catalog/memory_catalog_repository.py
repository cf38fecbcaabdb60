from __future__ import annotations

import itertools
from dataclasses import replace
from typing import Dict, Optional, Sequence, Tuple

from ..core.constants import PRACTICAL_ID_PREFIX, STUDENT_ID_PREFIX, SUBJECT_ID_PREFIX
from .model import Division, DivisionScope, Practical, SchoolClass, Student, Subject
from .repository import ClassRepository, StudentRepository, SubjectRepository


class InMemoryClassRepository(ClassRepository):
    def __init__(self):
        self._classes: Dict[str, SchoolClass] = {}
        self._seq = itertools.count(1)

    def get(self, class_id: str) -> Optional[SchoolClass]:
        return self._classes.get(class_id)

    def add(
        self,
        *,
        name: str,
        department: str,
        divisions: Tuple[Division, ...],
        class_teacher: Optional[str] = None,
        year_coordinator: Optional[str] = None,
    ) -> str:
        prefix = (department[:2] or "XX").upper()
        class_id = f"{prefix}-{''.join(name.split())}-{next(self._seq)}"
        self._classes[class_id] = SchoolClass(
            class_id=class_id,
            name=name,
            department=department,
            divisions=tuple(divisions),
            class_teacher=class_teacher,
            year_coordinator=year_coordinator,
        )
        return class_id

    def update(self, class_id: str, **changes) -> bool:
        current = self._classes.get(class_id)
        if not current:
            return False
        if "divisions" in changes:
            changes["divisions"] = tuple(changes["divisions"])
        self._classes[class_id] = replace(current, **changes)
        return True

    def delete(self, class_id: str) -> bool:
        return self._classes.pop(class_id, None) is not None

    def list_for_department(self, department: str) -> Sequence[SchoolClass]:
        return [c for c in self._classes.values() if c.department == department]


class InMemorySubjectRepository(SubjectRepository):
    def __init__(self):
        self._subjects: Dict[str, Subject] = {}
        self._practicals: Dict[str, Practical] = {}
        self._seq = itertools.count(1)

    def get_subject(self, subject_id: str) -> Optional[Subject]:
        return self._subjects.get(subject_id)

    def add_subject(
        self, *, name: str, code: str, class_id: str, scope: DivisionScope, faculty_email: Optional[str] = None
    ) -> str:
        subject_id = f"{SUBJECT_ID_PREFIX}-{next(self._seq)}"
        self._subjects[subject_id] = Subject(
            subject_id=subject_id,
            name=name,
            code=code,
            class_id=class_id,
            scope=scope,
            faculty_email=faculty_email,
        )
        return subject_id

    def update_subject(self, subject_id: str, **changes) -> bool:
        current = self._subjects.get(subject_id)
        if not current:
            return False
        self._subjects[subject_id] = replace(current, **changes)
        return True

    def delete_subject(self, subject_id: str) -> bool:
        return self._subjects.pop(subject_id, None) is not None

    def list_subjects(self, *, class_id: Optional[str] = None) -> Sequence[Subject]:
        return [s for s in self._subjects.values() if class_id is None or s.class_id == class_id]

    def get_practical(self, practical_id: str) -> Optional[Practical]:
        return self._practicals.get(practical_id)

    def add_practical(
        self, *, name: str, class_id: str, scope: DivisionScope, teacher_email: Optional[str] = None
    ) -> str:
        practical_id = f"{PRACTICAL_ID_PREFIX}-{next(self._seq)}"
        self._practicals[practical_id] = Practical(
            practical_id=practical_id,
            name=name,
            class_id=class_id,
            scope=scope,
            teacher_email=teacher_email,
        )
        return practical_id

    def update_practical(self, practical_id: str, **changes) -> bool:
        current = self._practicals.get(practical_id)
        if not current:
            return False
        self._practicals[practical_id] = replace(current, **changes)
        return True

    def delete_practical(self, practical_id: str) -> bool:
        return self._practicals.pop(practical_id, None) is not None

    def list_practicals(self, *, class_id: Optional[str] = None) -> Sequence[Practical]:
        return [p for p in self._practicals.values() if class_id is None or p.class_id == class_id]


class InMemoryStudentRepository(StudentRepository):
    def __init__(self):
        self._students: Dict[str, Student] = {}
        self._seq = itertools.count(1)

    def get(self, student_id: str) -> Optional[Student]:
        return self._students.get(student_id)

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
        student_id = f"{STUDENT_ID_PREFIX}{next(self._seq):03d}"
        self._students[student_id] = Student(
            student_id=student_id,
            name=name,
            email=email,
            reg_no=reg_no,
            mobile=mobile,
            class_id=class_id,
            division_id=division_id,
            mentor_email=mentor_email,
        )
        return student_id

    def update(self, student_id: str, **changes) -> bool:
        current = self._students.get(student_id)
        if not current:
            return False
        self._students[student_id] = replace(current, **changes)
        return True

    def delete(self, student_id: str) -> bool:
        return self._students.pop(student_id, None) is not None

    def delete_for_class(self, class_id: str) -> int:
        doomed = [sid for sid, s in self._students.items() if s.class_id == class_id]
        for sid in doomed:
            del self._students[sid]
        return len(doomed)

    def list_students(self, *, class_id: Optional[str] = None, division_id: Optional[str] = None) -> Sequence[Student]:
        out = []
        for s in self._students.values():
            if class_id is not None and s.class_id != class_id:
                continue
            if division_id is not None and s.division_id != division_id:
                continue
            out.append(s)
        return out

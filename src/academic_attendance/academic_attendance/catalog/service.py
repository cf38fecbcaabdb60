from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..common.validators import optional_email, require_non_empty
from ..core.enums import Role, SubjectType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Faculty
from ..users.repository import FacultyRepository
from .model import Division, OfferedSubject, SchoolClass, resolve_division_scope
from .repository import ClassRepository, StudentRepository, SubjectRepository

logger = logging.getLogger(__name__)


class ClassService:
    """Use case: manage classes, their divisions and class-level roles."""

    def __init__(
        self,
        classes: ClassRepository,
        faculty: FacultyRepository,
        students: StudentRepository,
        *,
        on_delete=None,
    ):
        self._classes = classes
        self._faculty = faculty
        self._students = students
        # Called with the removed SchoolClass so that its timetable and subjects go with it.
        self._on_delete = on_delete

    def _division_id(self, department: str, class_name: str, division_name: str, taken: set) -> str:
        base = "-".join(department.upper().split() + ["".join(class_name.split()), division_name])
        division_id, n = base, 1
        # A renamed class keeps its old division ids, so the plain form can already be in use.
        while division_id in taken:
            n += 1
            division_id = f"{base}-{n}"
        taken.add(division_id)
        return division_id

    def _division_ids_in_use(self, department: str, *, exclude_id: str = "") -> set:
        return {
            d.division_id
            for c in self._classes.list_for_department(department)
            if c.class_id != exclude_id
            for d in c.divisions
        }

    def get(self, class_id: str) -> SchoolClass:
        cls = self._classes.get(class_id)
        if not cls:
            raise NotFoundError("Class not found")
        return cls

    def is_duplicate_class_division(self, department: str, class_name: str, division_name: str, *, exclude_id: str = "") -> bool:
        return any(
            c.class_id != exclude_id and c.name == class_name and any(d.name == division_name for d in c.divisions)
            for c in self._classes.list_for_department(department)
        )

    def add_class(
        self,
        current: Faculty,
        *,
        name: str,
        division_names: Sequence[str],
        class_teacher: Optional[str] = None,
        year_coordinator: Optional[str] = None,
    ) -> str:
        self._require_hod(current)
        name = require_non_empty(name, "Class name")
        divisions = self._build_divisions(current.department, name, division_names)

        for d in divisions:
            if self.is_duplicate_class_division(current.department, name, d.name):
                raise ValidationError(f"Class {name} division {d.name} already exists")

        year_coordinator = optional_email(year_coordinator)
        if not year_coordinator:
            # New division groups of an existing cohort share its coordinator.
            for c in self._classes.list_for_department(current.department):
                if c.name == name and c.year_coordinator:
                    year_coordinator = c.year_coordinator
                    break

        class_id = self._classes.add(
            name=name,
            department=current.department,
            divisions=divisions,
            class_teacher=optional_email(class_teacher),
            year_coordinator=year_coordinator,
        )
        logger.info("Class %s created by %s", class_id, current.email)
        return class_id

    def update_class(
        self,
        current: Faculty,
        class_id: str,
        *,
        name: Optional[str] = None,
        division_names: Optional[Sequence[str]] = None,
    ) -> None:
        self._require_hod(current)
        cls = self.get(class_id)

        changes: Dict[str, object] = {}
        new_name = require_non_empty(name, "Class name") if name is not None else cls.name
        if name is not None:
            changes["name"] = new_name

        if division_names is not None:
            divisions = self._build_divisions(cls.department, new_name, division_names, existing=cls)
            changes["divisions"] = divisions
        else:
            divisions = cls.divisions

        if changes:
            for d in divisions:
                if self.is_duplicate_class_division(cls.department, new_name, d.name, exclude_id=class_id):
                    raise ValidationError(f"Class {new_name} division {d.name} already exists")

        if changes and not self._classes.update(class_id, **changes):
            raise ValidationError("Class update failed")

    def delete_class(self, current: Faculty, class_id: str) -> None:
        self._require_hod(current)
        cls = self.get(class_id)

        removed = self._students.delete_for_class(class_id)
        self._classes.delete(class_id)
        if self._on_delete:
            self._on_delete(cls)
        logger.info("Class %s deleted with %d students", class_id, removed)

    def classes_for_department(self, current: Faculty) -> Sequence[SchoolClass]:
        return list(self._classes.list_for_department(current.department))

    def set_class_teacher(self, current: Faculty, class_id: str, teacher_email: Optional[str]) -> None:
        self._require_hod(current)
        self.get(class_id)
        email = self._require_assignable(current, teacher_email)
        self._classes.update(class_id, class_teacher=email)

    def set_year_coordinator(self, current: Faculty, class_id: str, coordinator_email: Optional[str]) -> None:
        """Assign the coordinator to every class sharing this class's name."""
        self._require_hod(current)
        cls = self.get(class_id)
        email = self._require_assignable(current, coordinator_email)

        for c in self._classes.list_for_department(current.department):
            if c.name == cls.name:
                self._classes.update(c.class_id, year_coordinator=email)

    def is_class_teacher(self, current: Faculty, class_id: str) -> bool:
        cls = self._classes.get(class_id)
        return bool(cls and cls.class_teacher == current.email)

    def is_year_coordinator(self, current: Faculty, class_id: str) -> bool:
        cls = self._classes.get(class_id)
        return bool(cls and cls.year_coordinator == current.email)

    def has_class_access(self, current: Faculty, class_id: str) -> bool:
        if current.is_hod:
            cls = self._classes.get(class_id)
            return bool(cls and cls.department == current.department)
        return self.is_class_teacher(current, class_id) or self.is_year_coordinator(current, class_id)

    def unique_class_names(self, current: Faculty) -> List[SchoolClass]:
        """One class per distinct name, first one wins."""
        seen: Dict[str, SchoolClass] = {}
        for c in self._classes.list_for_department(current.department):
            seen.setdefault(c.name, c)
        return list(seen.values())

    def divisions_for_class_name(self, current: Faculty, class_name: str) -> List[Division]:
        seen: Dict[str, Division] = {}
        for c in self._classes.list_for_department(current.department):
            if c.name == class_name:
                for d in c.divisions:
                    seen.setdefault(d.division_id, d)
        return list(seen.values())

    def class_for_division(self, current: Faculty, class_name: str, division_id: str) -> Optional[SchoolClass]:
        """The class record of a cohort that owns the given division."""
        for c in self._classes.list_for_department(current.department):
            if c.name == class_name and c.has_division(division_id):
                return c
        return None

    def clear_faculty(self, member: Faculty) -> None:
        """Drop class-level roles held by a removed faculty member."""
        for c in self._classes.list_for_department(member.department):
            changes = {}
            if c.class_teacher == member.email:
                changes["class_teacher"] = None
            if c.year_coordinator == member.email:
                changes["year_coordinator"] = None
            if changes:
                self._classes.update(c.class_id, **changes)

    def _build_divisions(
        self,
        department: str,
        class_name: str,
        division_names: Sequence[str],
        *,
        existing: Optional[SchoolClass] = None,
    ) -> tuple:
        names = [require_non_empty(n, "Division name") for n in division_names]
        if len(set(names)) != len(names):
            raise ValidationError("Division names must be unique within a class")

        # Divisions that survive an update keep their ids; students and slots point at them.
        kept = {d.name: d for d in existing.divisions} if existing else {}
        taken = self._division_ids_in_use(department, exclude_id=existing.class_id if existing else "")
        taken.update(d.division_id for d in kept.values())
        return tuple(
            kept.get(n) or Division(division_id=self._division_id(department, class_name, n, taken), name=n)
            for n in names
        )

    def _require_assignable(self, current: Faculty, email: Optional[str]) -> Optional[str]:
        email = optional_email(email)
        if email is None:
            return None
        member = self._faculty.get_by_email(email)
        if not member or member.role != Role.FACULTY or member.department != current.department:
            raise ValidationError("Faculty member not found in this department")
        return email

    @staticmethod
    def _require_hod(current: Faculty) -> None:
        if not current.is_hod:
            raise AuthorizationError("Only the head of department can manage classes")


class SubjectService:
    """Use case: theory subjects and practicals offered to a class."""

    def __init__(self, subjects: SubjectRepository, classes: ClassService, faculty: FacultyRepository):
        self._subjects = subjects
        self._classes = classes
        self._faculty = faculty

    def add_subject(
        self,
        current: Faculty,
        *,
        name: str,
        code: str,
        class_id: str,
        division_id: Optional[str] = None,
        division_ids: Optional[Sequence[str]] = None,
        faculty_email: Optional[str] = None,
    ) -> str:
        self._require_class_access(current, class_id)
        scope = resolve_division_scope(division_id=division_id, division_ids=division_ids)
        return self._subjects.add_subject(
            name=require_non_empty(name, "Subject name"),
            code=require_non_empty(code, "Subject code"),
            class_id=class_id,
            scope=scope,
            faculty_email=self._require_teacher(current, faculty_email),
        )

    def add_practical(
        self,
        current: Faculty,
        *,
        name: str,
        class_id: str,
        division_id: Optional[str] = None,
        batch_id: Optional[str] = None,
        division_ids: Optional[Sequence[str]] = None,
        teacher_email: Optional[str] = None,
    ) -> str:
        self._require_class_access(current, class_id)
        scope = resolve_division_scope(division_id=division_id, batch_id=batch_id, division_ids=division_ids)
        return self._subjects.add_practical(
            name=require_non_empty(name, "Practical name"),
            class_id=class_id,
            scope=scope,
            teacher_email=self._require_teacher(current, teacher_email),
        )

    def rename(self, current: Faculty, subject_id: str, subject_type: SubjectType, name: str) -> None:
        class_id = self._class_of(subject_id, subject_type)
        self._require_class_access(current, class_id)
        name = require_non_empty(name, "Name")
        if subject_type == SubjectType.THEORY:
            self._subjects.update_subject(subject_id, name=name)
        else:
            self._subjects.update_practical(subject_id, name=name)

    def delete(self, current: Faculty, subject_id: str, subject_type: SubjectType) -> None:
        class_id = self._class_of(subject_id, subject_type)
        self._require_class_access(current, class_id)
        if subject_type == SubjectType.THEORY:
            self._subjects.delete_subject(subject_id)
        else:
            self._subjects.delete_practical(subject_id)

    def assign_teacher(self, current: Faculty, subject_id: str, subject_type: SubjectType, teacher_email: Optional[str]) -> None:
        class_id = self._class_of(subject_id, subject_type)
        self._require_class_access(current, class_id)
        email = self._require_teacher(current, teacher_email)
        if subject_type == SubjectType.THEORY:
            self._subjects.update_subject(subject_id, faculty_email=email)
        else:
            self._subjects.update_practical(subject_id, teacher_email=email)
        logger.info("%s %s assigned to %s", subject_type.value, subject_id, email)

    def teacher_for(self, subject_id: str, subject_type: SubjectType) -> Optional[str]:
        if subject_type == SubjectType.THEORY:
            s = self._subjects.get_subject(subject_id)
            return s.faculty_email if s else None
        p = self._subjects.get_practical(subject_id)
        return p.teacher_email if p else None

    def offering_for(self, subject_id: str, subject_type: SubjectType) -> Optional[OfferedSubject]:
        if subject_type == SubjectType.THEORY:
            s = self._subjects.get_subject(subject_id)
            if not s:
                return None
            return OfferedSubject(s.subject_id, s.name, SubjectType.THEORY, s.faculty_email)
        p = self._subjects.get_practical(subject_id)
        if not p:
            return None
        return OfferedSubject(p.practical_id, p.name, SubjectType.PRACTICAL, p.teacher_email)

    def class_of(self, subject_id: str, subject_type: SubjectType) -> str:
        return self._class_of(subject_id, subject_type)

    def is_offered_to(self, subject_id: str, subject_type: SubjectType, division_id: str) -> bool:
        offering = (
            self._subjects.get_subject(subject_id)
            if subject_type == SubjectType.THEORY
            else self._subjects.get_practical(subject_id)
        )
        return bool(offering and offering.scope.includes(division_id))

    def delete_for_class(self, class_id: str) -> None:
        for s in self._subjects.list_subjects(class_id=class_id):
            self._subjects.delete_subject(s.subject_id)
        for p in self._subjects.list_practicals(class_id=class_id):
            self._subjects.delete_practical(p.practical_id)

    def offered_to_division(self, class_id: str, division_id: str) -> List[OfferedSubject]:
        """Theory subjects first, then practicals, each limited to the division."""
        out = [
            OfferedSubject(s.subject_id, s.name, SubjectType.THEORY, s.faculty_email)
            for s in self._subjects.list_subjects(class_id=class_id)
            if s.scope.includes(division_id)
        ]
        out.extend(
            OfferedSubject(p.practical_id, p.name, SubjectType.PRACTICAL, p.teacher_email)
            for p in self._subjects.list_practicals(class_id=class_id)
            if p.scope.includes(division_id)
        )
        return out

    def subjects_for_faculty(self, teacher_email: str, class_id: str, division_id: str) -> List[OfferedSubject]:
        return [o for o in self.offered_to_division(class_id, division_id) if o.teacher_email == teacher_email]

    def clear_faculty(self, member: Faculty) -> None:
        email = member.email
        for s in self._subjects.list_subjects():
            if s.faculty_email == email:
                self._subjects.update_subject(s.subject_id, faculty_email=None)
        for p in self._subjects.list_practicals():
            if p.teacher_email == email:
                self._subjects.update_practical(p.practical_id, teacher_email=None)

    def _class_of(self, subject_id: str, subject_type: SubjectType) -> str:
        offering = (
            self._subjects.get_subject(subject_id)
            if subject_type == SubjectType.THEORY
            else self._subjects.get_practical(subject_id)
        )
        if not offering:
            raise NotFoundError(f"{SubjectType(subject_type).value.capitalize()} not found")
        return offering.class_id

    def _require_class_access(self, current: Faculty, class_id: str) -> None:
        self._classes.get(class_id)
        if not self._classes.has_class_access(current, class_id):
            raise AuthorizationError("You do not manage this class")

    def _require_teacher(self, current: Faculty, email: Optional[str]) -> Optional[str]:
        email = optional_email(email)
        if email is None:
            return None
        member = self._faculty.get_by_email(email)
        if (
            not member
            or member.role != Role.FACULTY
            or member.department != current.department
            or member.is_blocked
        ):
            raise ValidationError("Teacher must be an active faculty member of this department")
        return email

from __future__ import annotations

import logging
from typing import List, Optional

from ..common.validators import optional_email, require_non_empty
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Faculty
from ..users.repository import FacultyRepository
from .model import Student
from .repository import StudentRepository
from .service import ClassService

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: student roster, mentors and per-student attendance counters."""

    def __init__(self, students: StudentRepository, classes: ClassService, faculty: FacultyRepository):
        self._students = students
        self._classes = classes
        self._faculty = faculty

    def check_duplicates(
        self,
        *,
        email: Optional[str] = None,
        reg_no: Optional[str] = None,
        mobile: Optional[str] = None,
        exclude_id: str = "",
    ) -> Optional[str]:
        """Return a message naming the first clashing field, or None."""
        others = [s for s in self._students.list_students() if s.student_id != exclude_id]
        if email and any(s.email == email for s in others):
            return "A student with this email already exists"
        if reg_no and any(s.reg_no == reg_no for s in others):
            return "A student with this registration number already exists"
        if mobile and any(s.mobile == mobile for s in others):
            return "A student with this mobile number already exists"
        return None

    def add_student(
        self,
        current: Faculty,
        *,
        name: str,
        email: str,
        reg_no: str,
        mobile: str,
        class_id: str,
        division_id: str,
        mentor_email: Optional[str] = None,
    ) -> str:
        self._require_division(current, class_id, division_id)
        name = require_non_empty(name, "Name")
        email = require_non_empty(email, "Email")
        reg_no = require_non_empty(reg_no, "Registration number")
        mobile = require_non_empty(mobile, "Mobile")

        duplicate = self.check_duplicates(email=email, reg_no=reg_no, mobile=mobile)
        if duplicate:
            raise ValidationError(duplicate)

        student_id = self._students.add(
            name=name,
            email=email,
            reg_no=reg_no,
            mobile=mobile,
            class_id=class_id,
            division_id=division_id,
            mentor_email=self._require_mentor(current, mentor_email),
        )
        logger.info("Student %s added to %s/%s", student_id, class_id, division_id)
        return student_id

    def update_student(
        self,
        current: Faculty,
        student_id: str,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        reg_no: Optional[str] = None,
        mobile: Optional[str] = None,
    ) -> None:
        student = self.get(student_id)
        self._require_access(current, student.class_id)

        duplicate = self.check_duplicates(email=email, reg_no=reg_no, mobile=mobile, exclude_id=student_id)
        if duplicate:
            raise ValidationError(duplicate)

        changes = {}
        for field, value in (("name", name), ("email", email), ("reg_no", reg_no), ("mobile", mobile)):
            if value is not None:
                changes[field] = require_non_empty(value, field)
        if changes:
            self._students.update(student_id, **changes)

    def delete_student(self, current: Faculty, student_id: str) -> None:
        student = self.get(student_id)
        self._require_access(current, student.class_id)
        self._students.delete(student_id)

    def get(self, student_id: str) -> Student:
        student = self._students.get(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def students_for_class(self, current: Faculty, class_id: str, division_id: Optional[str] = None) -> List[Student]:
        """Roster sorted by name. Empty when the user has no access to the class."""
        if not self._classes.has_class_access(current, class_id):
            return []
        return self.roster(class_id, division_id)

    def roster(self, class_id: str, division_id: Optional[str] = None) -> List[Student]:
        students = self._students.list_students(class_id=class_id, division_id=division_id)
        return sorted(students, key=lambda s: s.name)

    def assign_mentor(self, current: Faculty, student_id: str, mentor_email: Optional[str]) -> None:
        student = self.get(student_id)
        self._require_access(current, student.class_id)
        self._students.update(student_id, mentor_email=self._require_mentor(current, mentor_email))

    def mentor_of(self, student_id: str) -> Optional[str]:
        student = self._students.get(student_id)
        return student.mentor_email if student else None

    def mentees_for(self, mentor_email: str) -> List[Student]:
        return [s for s in self._students.list_students() if s.mentor_email == mentor_email]

    def record_attendance(self, student_id: str, *, present: bool) -> bool:
        student = self._students.get(student_id)
        if not student:
            return False
        return self._students.update(
            student_id,
            attended_sessions=student.attended_sessions + (1 if present else 0),
            total_sessions=student.total_sessions + 1,
        )

    def clear_faculty(self, member: Faculty) -> None:
        for s in self.mentees_for(member.email):
            self._students.update(s.student_id, mentor_email=None)

    def _require_access(self, current: Faculty, class_id: str) -> None:
        if not self._classes.has_class_access(current, class_id):
            raise AuthorizationError("You do not manage this class")

    def _require_division(self, current: Faculty, class_id: str, division_id: str) -> None:
        cls = self._classes.get(class_id)
        self._require_access(current, class_id)
        if not cls.has_division(division_id):
            raise ValidationError("Division does not belong to this class")

    def _require_mentor(self, current: Faculty, email: Optional[str]) -> Optional[str]:
        email = optional_email(email)
        if email is None:
            return None
        member = self._faculty.get_by_email(email)
        if not member or member.department != current.department:
            raise ValidationError("Mentor must be a faculty member of this department")
        return email

from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Faculty
from .repository import FacultyRepository

logger = logging.getLogger(__name__)


class FacultyService:
    """Use case: manage the department's faculty directory."""

    def __init__(self, faculty: FacultyRepository, *, on_delete=None):
        self._faculty = faculty
        # Called with the removed Faculty so that roster assignments can be cleared.
        self._on_delete = on_delete

    def register(self, *, email: str, name: str, role: Role, department: str) -> Faculty:
        email = require_non_empty(email, "Email")
        name = require_non_empty(name, "Name")
        department = require_non_empty(department, "Department")

        if self._faculty.get_by_email(email):
            raise ValidationError("A user with this email already exists")
        if self._faculty.get_by_name(name):
            raise ValidationError("A user with this name already exists")

        faculty = Faculty(email=email, name=name, role=Role(role), department=department)
        self._faculty.add(faculty)
        logger.info("Registered %s %s in %s", faculty.role.value, email, department)
        return faculty

    def identify(self, email: str) -> Faculty:
        """Look up the identity for an email. Blocked members are refused."""
        faculty = self._faculty.get_by_email((email or "").strip())
        if not faculty or faculty.is_blocked:
            raise AuthorizationError("Unknown or blocked user")
        return faculty

    def departmental_faculty(self, current: Faculty) -> Sequence[Faculty]:
        if not current.is_hod:
            return []
        return list(self._faculty.list_for_department(current.department))

    def block(self, current: Faculty, email: str) -> None:
        self._set_blocked(current, email, True)

    def unblock(self, current: Faculty, email: str) -> None:
        self._set_blocked(current, email, False)

    def is_blocked(self, email: str) -> bool:
        faculty = self._faculty.get_by_email(email)
        return bool(faculty and faculty.is_blocked)

    def delete_faculty(self, current: Faculty, email: str) -> None:
        target = self._require_department_faculty(current, email)
        if target.role != Role.FACULTY:
            raise ValidationError("Only faculty accounts can be deleted")

        self._faculty.delete(email)
        if self._on_delete:
            self._on_delete(target)
        logger.info("Deleted faculty %s", email)

    def _set_blocked(self, current: Faculty, email: str, is_blocked: bool) -> None:
        self._require_department_faculty(current, email)
        self._faculty.set_blocked(email, is_blocked=is_blocked)
        logger.info("Faculty %s blocked=%s by %s", email, is_blocked, current.email)

    def _require_department_faculty(self, current: Faculty, email: str) -> Faculty:
        if not current.is_hod:
            raise AuthorizationError("Only the head of department can manage faculty")

        target = self._faculty.get_by_email(email)
        if not target or target.department != current.department:
            raise NotFoundError("Faculty member not found")
        return target

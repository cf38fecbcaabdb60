from __future__ import annotations

from dataclasses import replace
from typing import Dict, Optional, Sequence

from .model import Faculty
from .repository import FacultyRepository


class InMemoryFacultyRepository(FacultyRepository):
    def __init__(self):
        self._by_email: Dict[str, Faculty] = {}

    def get_by_email(self, email: str) -> Optional[Faculty]:
        return self._by_email.get(email)

    def get_by_name(self, name: str) -> Optional[Faculty]:
        for f in self._by_email.values():
            if f.name == name:
                return f
        return None

    def add(self, faculty: Faculty) -> bool:
        if faculty.email in self._by_email:
            return False
        self._by_email[faculty.email] = faculty
        return True

    def set_blocked(self, email: str, *, is_blocked: bool) -> bool:
        f = self._by_email.get(email)
        if not f:
            return False
        self._by_email[email] = replace(f, is_blocked=is_blocked)
        return True

    def delete(self, email: str) -> bool:
        return self._by_email.pop(email, None) is not None

    def list_for_department(self, department: str) -> Sequence[Faculty]:
        return [f for f in self._by_email.values() if f.department == department]

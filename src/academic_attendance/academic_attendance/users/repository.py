from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Faculty


class FacultyRepository(Protocol):
    """Repository interface for Faculty.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_email(self, email: str) -> Optional[Faculty]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Faculty]:
        raise NotImplementedError

    def add(self, faculty: Faculty) -> bool:
        raise NotImplementedError

    def set_blocked(self, email: str, *, is_blocked: bool) -> bool:
        raise NotImplementedError

    def delete(self, email: str) -> bool:
        raise NotImplementedError

    def list_for_department(self, department: str) -> Sequence[Faculty]:
        raise NotImplementedError

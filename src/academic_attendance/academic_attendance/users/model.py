from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Faculty:
    """Domain entity: a faculty member or head of department.

    Also serves as the identity handed to services. Services trust it and
    never check credentials.
    """

    email: str
    name: str
    role: Role
    department: str
    is_blocked: bool = False

    @property
    def is_hod(self) -> bool:
        return self.role == Role.HOD

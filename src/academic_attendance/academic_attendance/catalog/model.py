from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

from ..core.constants import ALL_DIVISIONS_PLACEHOLDER
from ..core.enums import SubjectType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AllDivisions:
    def includes(self, division_id: str) -> bool:
        return True


@dataclass(frozen=True)
class OneDivision:
    division_id: str

    def includes(self, division_id: str) -> bool:
        return division_id == self.division_id


@dataclass(frozen=True)
class OneBatch:
    """A lab batch inside one division. Attendance is still taken per division."""

    division_id: str
    batch_id: str

    def includes(self, division_id: str) -> bool:
        return division_id == self.division_id


@dataclass(frozen=True)
class SpecificDivisions:
    division_ids: Tuple[str, ...]

    def includes(self, division_id: str) -> bool:
        return division_id in self.division_ids


DivisionScope = Union[AllDivisions, OneDivision, OneBatch, SpecificDivisions]


def resolve_division_scope(
    *,
    division_id: Optional[str] = None,
    batch_id: Optional[str] = None,
    division_ids: Optional[Iterable[str]] = None,
) -> DivisionScope:
    """Turn the loose roster fields into a single DivisionScope.

    Done once when a subject or practical is written, so readers never have to
    guess from optional fields.
    """
    ids = tuple(d for d in (division_ids or ()) if d)
    division_id = (division_id or "").strip() or None
    if division_id == ALL_DIVISIONS_PLACEHOLDER:
        division_id = None

    if batch_id:
        if not division_id:
            raise ValidationError("A batch needs a division")
        return OneBatch(division_id=division_id, batch_id=batch_id)
    if ids:
        if division_id and division_id not in ids:
            ids = (division_id,) + ids
        return OneDivision(ids[0]) if len(ids) == 1 else SpecificDivisions(ids)
    if division_id:
        return OneDivision(division_id)
    return AllDivisions()


@dataclass(frozen=True)
class Division:
    division_id: str
    name: str


@dataclass(frozen=True)
class SchoolClass:
    """A cohort in a department. Several records may share a name, one per division group."""

    class_id: str
    name: str
    department: str
    divisions: Tuple[Division, ...] = ()
    class_teacher: Optional[str] = None
    year_coordinator: Optional[str] = None

    def has_division(self, division_id: str) -> bool:
        return any(d.division_id == division_id for d in self.divisions)

    def division_name(self, division_id: str) -> Optional[str]:
        for d in self.divisions:
            if d.division_id == division_id:
                return d.name
        return None


@dataclass(frozen=True)
class Subject:
    """Theory course offering."""

    subject_id: str
    name: str
    code: str
    class_id: str
    scope: DivisionScope
    faculty_email: Optional[str] = None


@dataclass(frozen=True)
class Practical:
    """Lab course offering."""

    practical_id: str
    name: str
    class_id: str
    scope: DivisionScope
    teacher_email: Optional[str] = None


@dataclass(frozen=True)
class OfferedSubject:
    """Read-model: a subject or practical as offered to one division."""

    subject_id: str
    name: str
    subject_type: SubjectType
    teacher_email: Optional[str]


@dataclass(frozen=True)
class Student:
    student_id: str
    name: str
    email: str
    reg_no: str
    mobile: str
    class_id: str
    division_id: str
    mentor_email: Optional[str] = None
    attended_sessions: int = 0
    total_sessions: int = 0

    @property
    def attendance_percentage(self) -> float:
        if not self.total_sessions:
            return 0.0
        return round(100.0 * self.attended_sessions / self.total_sessions, 2)

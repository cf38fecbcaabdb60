from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

import pytest

from src.academic_attendance.academic_attendance.container import Container, build_container
from src.academic_attendance.academic_attendance.core.enums import Role
from src.academic_attendance.academic_attendance.timetable.store import ScheduleStore
from src.academic_attendance.academic_attendance.users.model import Faculty

DEPARTMENT = "Computer Science"


@pytest.fixture
def monday() -> date:
    return date(2026, 10, 19)


@pytest.fixture
def tuesday() -> date:
    return date(2026, 10, 20)


@pytest.fixture
def sunday() -> date:
    return date(2026, 10, 25)


@pytest.fixture
def store() -> ScheduleStore:
    return ScheduleStore()


class FixedClock:
    """Attendance clock that tests move by assigning ``now``."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FixedClock:
    # Monday 2026-10-19, mid-morning.
    return FixedClock(datetime(2026, 10, 19, 9, 30))


@pytest.fixture
def container(clock: FixedClock) -> Container:
    return build_container(clock=clock)


@dataclass
class Department:
    """A small department: one HOD, two faculty members, one class with divisions A and B."""

    container: Container
    hod: Faculty
    teacher: Faculty
    other_teacher: Faculty
    class_id: str
    division_a: str
    division_b: str
    subject_id: str


@pytest.fixture
def dept(container: Container) -> Department:
    fs = container.faculty_service
    hod = fs.register(email="hod@x.edu", name="Hod", role=Role.HOD, department=DEPARTMENT)
    teacher = fs.register(email="t1@x.edu", name="Teacher One", role=Role.FACULTY, department=DEPARTMENT)
    other = fs.register(email="t2@x.edu", name="Teacher Two", role=Role.FACULTY, department=DEPARTMENT)

    class_id = container.class_service.add_class(hod, name="SE CSE", division_names=["A", "B"])
    divisions = container.class_service.get(class_id).divisions
    subject_id = container.subject_service.add_subject(
        hod, name="DBMS", code="CS301", class_id=class_id, faculty_email=teacher.email
    )
    return Department(
        container=container,
        hod=hod,
        teacher=teacher,
        other_teacher=other,
        class_id=class_id,
        division_a=divisions[0].division_id,
        division_b=divisions[1].division_id,
        subject_id=subject_id,
    )

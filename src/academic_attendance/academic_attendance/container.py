from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.lock import InMemorySessionLockStore
from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.service import AttendanceService
from .catalog.memory_catalog_repository import (
    InMemoryClassRepository,
    InMemoryStudentRepository,
    InMemorySubjectRepository,
)
from .catalog.model import SchoolClass
from .catalog.service import ClassService, SubjectService
from .catalog.student_service import StudentService
from .timetable.service import TimetableService
from .timetable.store import ScheduleStore
from .users.memory_faculty_repository import InMemoryFacultyRepository
from .users.model import Faculty
from .users.service import FacultyService


@dataclass(frozen=True)
class Container:
    faculty_repo: InMemoryFacultyRepository
    classes_repo: InMemoryClassRepository
    subjects_repo: InMemorySubjectRepository
    students_repo: InMemoryStudentRepository
    schedule_store: ScheduleStore
    attendance_repo: InMemoryAttendanceRepository
    session_locks: InMemorySessionLockStore

    faculty_service: FacultyService
    class_service: ClassService
    subject_service: SubjectService
    student_service: StudentService
    timetable_service: TimetableService
    attendance_service: AttendanceService


def build_container(clock: Optional[Callable[[], datetime]] = None) -> Container:
    """Composition root. Every call returns an independent set of stores.

    ``clock`` is the attendance clock; marking is only allowed for its current date.
    """
    faculty_repo = InMemoryFacultyRepository()
    classes_repo = InMemoryClassRepository()
    subjects_repo = InMemorySubjectRepository()
    students_repo = InMemoryStudentRepository()
    schedule_store = ScheduleStore()
    attendance_repo = InMemoryAttendanceRepository()
    session_locks = InMemorySessionLockStore()

    def drop_class(cls: SchoolClass) -> None:
        schedule_store.delete_for_class(cls.class_id)
        subject_service.delete_for_class(cls.class_id)

    class_service = ClassService(classes_repo, faculty_repo, students_repo, on_delete=drop_class)
    subject_service = SubjectService(subjects_repo, class_service, faculty_repo)
    student_service = StudentService(students_repo, class_service, faculty_repo)

    def clear_assignments(member: Faculty) -> None:
        class_service.clear_faculty(member)
        subject_service.clear_faculty(member)
        student_service.clear_faculty(member)

    faculty_service = FacultyService(faculty_repo, on_delete=clear_assignments)
    timetable_service = TimetableService(schedule_store, class_service, subject_service)
    attendance_service = AttendanceService(
        attendance_repo,
        session_locks,
        schedule_store,
        subject_service,
        student_service,
        clock=clock or datetime.now,
    )

    return Container(
        faculty_repo=faculty_repo,
        classes_repo=classes_repo,
        subjects_repo=subjects_repo,
        students_repo=students_repo,
        schedule_store=schedule_store,
        attendance_repo=attendance_repo,
        session_locks=session_locks,
        faculty_service=faculty_service,
        class_service=class_service,
        subject_service=subject_service,
        student_service=student_service,
        timetable_service=timetable_service,
        attendance_service=attendance_service,
    )

"""Demo roster for local development."""

from __future__ import annotations

from .container import Container
from .core.enums import Role, SubjectType, Weekday

DEMO_HOD_EMAIL = "hod@college.edu"
DEMO_FACULTY_EMAIL = "faculty@college.edu"


def seed_demo_data(container: Container, *, department: str) -> None:
    """Populate an empty container. Safe to call once per container."""
    if container.faculty_repo.get_by_email(DEMO_HOD_EMAIL):
        return

    hod = container.faculty_service.register(
        email=DEMO_HOD_EMAIL, name="Head of Department", role=Role.HOD, department=department
    )
    container.faculty_service.register(
        email=DEMO_FACULTY_EMAIL, name="Demo Faculty", role=Role.FACULTY, department=department
    )

    class_id = container.class_service.add_class(
        hod, name="Second Year", division_names=["A", "B"], class_teacher=DEMO_FACULTY_EMAIL
    )
    division_a = container.class_service.get(class_id).divisions[0].division_id

    subject_id = container.subject_service.add_subject(
        hod,
        name="Data Structures",
        code="CS201",
        class_id=class_id,
        faculty_email=DEMO_FACULTY_EMAIL,
    )
    practical_id = container.subject_service.add_practical(
        hod,
        name="Data Structures Lab",
        class_id=class_id,
        division_id=division_a,
        teacher_email=DEMO_FACULTY_EMAIL,
    )

    for i, name in enumerate(["Asha Patil", "Rohan Deshmukh", "Sneha Kulkarni"], start=1):
        container.student_service.add_student(
            hod,
            name=name,
            email=f"student{i}@college.edu",
            reg_no=f"REG{i:04d}",
            mobile=f"98765432{i:02d}",
            class_id=class_id,
            division_id=division_a,
            mentor_email=DEMO_FACULTY_EMAIL,
        )

    for day in (Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY):
        container.timetable_service.add_slot(
            hod,
            class_id=class_id,
            division_id=division_a,
            day=day,
            start_time="09:00",
            end_time="10:00",
            subject_type=SubjectType.THEORY,
            subject_id=subject_id,
        )
    container.timetable_service.add_slot(
        hod,
        class_id=class_id,
        division_id=division_a,
        day=Weekday.TUESDAY,
        start_time="11:00",
        end_time="13:00",
        subject_type=SubjectType.PRACTICAL,
        subject_id=practical_id,
    )

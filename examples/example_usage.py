"""Example: using the service layer directly (no Flask).

Controllers are a thin layer; the rules live in the services.
"""

from src.academic_attendance.academic_attendance.container import build_container
from src.academic_attendance.academic_attendance.core.enums import SubjectType
from src.academic_attendance.academic_attendance.seed import DEMO_FACULTY_EMAIL, seed_demo_data


def main():
    container = build_container()
    seed_demo_data(container, department="Computer Science")

    teacher = container.faculty_service.identify(DEMO_FACULTY_EMAIL)
    for slot in container.timetable_service.schedule_for_teacher(teacher.email):
        print(slot.label(), slot.subject_id, slot.subject_type.value)

    cls = container.class_service.unique_class_names(teacher)[0]
    division_id = cls.divisions[0].division_id
    subject = container.attendance_service.my_subjects(teacher, cls.class_id, division_id)[0]
    sessions = container.attendance_service.my_sessions_today(
        teacher,
        class_id=cls.class_id,
        division_id=division_id,
        subject_id=subject.subject_id,
        subject_type=SubjectType(subject.subject_type),
    )
    print(f"{len(sessions)} session(s) to mark today")


if __name__ == "__main__":
    main()

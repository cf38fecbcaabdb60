from __future__ import annotations

import pytest

from src.academic_attendance.academic_attendance.catalog.model import (
    AllDivisions,
    OneBatch,
    OneDivision,
    SpecificDivisions,
    resolve_division_scope,
)
from src.academic_attendance.academic_attendance.core.enums import Role, SubjectType
from src.academic_attendance.academic_attendance.core.exceptions import AuthorizationError, ValidationError


def test_division_scope_is_resolved_once_from_loose_fields():
    assert resolve_division_scope() == AllDivisions()
    assert resolve_division_scope(division_id="default-division") == AllDivisions()
    assert resolve_division_scope(division_id="D1") == OneDivision("D1")
    assert resolve_division_scope(division_id="D1", batch_id="B2") == OneBatch("D1", "B2")
    assert resolve_division_scope(division_ids=["D1", "D2"]) == SpecificDivisions(("D1", "D2"))
    assert resolve_division_scope(division_ids=["D2"]) == OneDivision("D2")

    with pytest.raises(ValidationError):
        resolve_division_scope(batch_id="B1")


def test_scope_membership():
    assert AllDivisions().includes("anything")
    assert OneBatch("D1", "B1").includes("D1")
    assert not OneDivision("D1").includes("D2")
    assert SpecificDivisions(("D1", "D3")).includes("D3")


def test_duplicate_class_division_is_rejected(dept):
    svc = dept.container.class_service
    with pytest.raises(ValidationError):
        svc.add_class(dept.hod, name="SE CSE", division_names=["B"])

    # Same cohort, new division is fine.
    assert svc.add_class(dept.hod, name="SE CSE", division_names=["C"])


def test_only_hod_manages_classes(dept):
    with pytest.raises(AuthorizationError):
        dept.container.class_service.add_class(dept.teacher, name="BE CSE", division_names=["A"])


def test_year_coordinator_is_shared_by_the_cohort(dept):
    svc = dept.container.class_service
    second = svc.add_class(dept.hod, name="SE CSE", division_names=["C"])

    svc.set_year_coordinator(dept.hod, dept.class_id, dept.other_teacher.email)

    assert svc.get(second).year_coordinator == dept.other_teacher.email
    assert svc.has_class_access(dept.other_teacher, second)

    third = svc.add_class(dept.hod, name="SE CSE", division_names=["D"])
    assert svc.get(third).year_coordinator == dept.other_teacher.email


def test_divisions_are_grouped_by_class_name(dept):
    svc = dept.container.class_service
    second = svc.add_class(dept.hod, name="SE CSE", division_names=["C"])
    division_c = svc.get(second).divisions[0].division_id

    names = [d.name for d in svc.divisions_for_class_name(dept.hod, "SE CSE")]
    assert names == ["A", "B", "C"]
    assert [c.name for c in svc.unique_class_names(dept.hod)] == ["SE CSE"]
    assert svc.class_for_division(dept.hod, "SE CSE", division_c).class_id == second


def test_subjects_for_faculty_respect_division_scope(dept):
    subjects = dept.container.subject_service
    lab = subjects.add_practical(
        dept.hod,
        name="DBMS Lab",
        class_id=dept.class_id,
        division_id=dept.division_b,
        batch_id="B1",
        teacher_email=dept.teacher.email,
    )

    in_a = subjects.subjects_for_faculty(dept.teacher.email, dept.class_id, dept.division_a)
    in_b = subjects.subjects_for_faculty(dept.teacher.email, dept.class_id, dept.division_b)

    assert [(o.subject_id, o.subject_type) for o in in_a] == [(dept.subject_id, SubjectType.THEORY)]
    assert [(o.subject_id, o.subject_type) for o in in_b] == [
        (dept.subject_id, SubjectType.THEORY),
        (lab, SubjectType.PRACTICAL),
    ]
    assert subjects.subjects_for_faculty(dept.other_teacher.email, dept.class_id, dept.division_a) == []


def test_blocked_faculty_cannot_be_assigned(dept):
    dept.container.faculty_service.block(dept.hod, dept.other_teacher.email)
    with pytest.raises(ValidationError):
        dept.container.subject_service.assign_teacher(
            dept.hod, dept.subject_id, SubjectType.THEORY, dept.other_teacher.email
        )


def test_student_uniqueness_messages(dept):
    svc = dept.container.student_service
    base = dict(class_id=dept.class_id, division_id=dept.division_a)
    svc.add_student(dept.hod, name="Anu", email="anu@s.edu", reg_no="R1", mobile="111", **base)

    with pytest.raises(ValidationError, match="email"):
        svc.add_student(dept.hod, name="B", email="anu@s.edu", reg_no="R2", mobile="222", **base)
    with pytest.raises(ValidationError, match="registration number"):
        svc.add_student(dept.hod, name="B", email="b@s.edu", reg_no="R1", mobile="222", **base)
    with pytest.raises(ValidationError, match="mobile"):
        svc.add_student(dept.hod, name="B", email="b@s.edu", reg_no="R2", mobile="111", **base)


def test_roster_requires_class_access(dept):
    svc = dept.container.student_service
    svc.add_student(
        dept.hod, name="Zed", email="z@s.edu", reg_no="R9", mobile="999",
        class_id=dept.class_id, division_id=dept.division_a,
    )
    assert [s.name for s in svc.students_for_class(dept.hod, dept.class_id, dept.division_a)] == ["Zed"]
    assert svc.students_for_class(dept.teacher, dept.class_id, dept.division_a) == []


def test_deleting_faculty_clears_assignments(dept):
    c = dept.container
    c.class_service.set_class_teacher(dept.hod, dept.class_id, dept.teacher.email)
    sid = c.student_service.add_student(
        dept.hod, name="M", email="m@s.edu", reg_no="R5", mobile="555",
        class_id=dept.class_id, division_id=dept.division_a, mentor_email=dept.teacher.email,
    )

    c.faculty_service.delete_faculty(dept.hod, dept.teacher.email)

    assert c.class_service.get(dept.class_id).class_teacher is None
    assert c.subject_service.teacher_for(dept.subject_id, SubjectType.THEORY) is None
    assert c.student_service.mentor_of(sid) is None
    assert c.faculty_repo.get_by_email(dept.teacher.email) is None


def test_faculty_registration_rejects_duplicates(container):
    fs = container.faculty_service
    fs.register(email="a@x.edu", name="A", role=Role.FACULTY, department="Civil")
    with pytest.raises(ValidationError):
        fs.register(email="a@x.edu", name="Other", role=Role.FACULTY, department="Civil")
    with pytest.raises(ValidationError):
        fs.register(email="b@x.edu", name="A", role=Role.FACULTY, department="Civil")


def test_deleting_a_class_frees_its_timetable(dept):
    c = dept.container
    c.timetable_service.add_slot(
        dept.hod,
        class_id=dept.class_id,
        division_id=dept.division_a,
        day="Monday",
        start_time="09:00",
        end_time="10:00",
        subject_id=dept.subject_id,
    )

    c.class_service.delete_class(dept.hod, dept.class_id)

    assert c.schedule_store.slots_for_class_division(dept.class_id) == []
    assert c.subject_service.offered_to_division(dept.class_id, dept.division_a) == []

    new_class = c.class_service.add_class(dept.hod, name="TE CSE", division_names=["A"])
    division = c.class_service.get(new_class).divisions[0].division_id
    subject = c.subject_service.add_subject(
        dept.hod, name="OS", code="CS401", class_id=new_class, faculty_email=dept.teacher.email
    )
    assert c.timetable_service.add_slot(
        dept.hod,
        class_id=new_class,
        division_id=division,
        day="Monday",
        start_time="09:00",
        end_time="10:00",
        subject_id=subject,
    )


def test_rename_cannot_duplicate_an_existing_class_division(dept):
    svc = dept.container.class_service
    other = svc.add_class(dept.hod, name="TE CSE", division_names=["A"])

    with pytest.raises(ValidationError):
        svc.update_class(dept.hod, other, name="SE CSE")
    assert svc.get(other).name == "TE CSE"

    # A division name the cohort does not have yet is fine.
    svc.update_class(dept.hod, other, division_names=["C"])
    svc.update_class(dept.hod, other, name="SE CSE")
    pairs = [(c.name, d.name) for c in svc.classes_for_department(dept.hod) for d in c.divisions]
    assert sorted(pairs) == [("SE CSE", "A"), ("SE CSE", "B"), ("SE CSE", "C")]


def test_division_ids_stay_unique(container):
    fs = container.faculty_service
    svc = container.class_service
    cs = fs.register(email="h1@x.edu", name="H1", role=Role.HOD, department="Computer Science")
    ce = fs.register(email="h2@x.edu", name="H2", role=Role.HOD, department="Computer Engineering")

    a = svc.add_class(cs, name="SE", division_names=["A"])
    b = svc.add_class(ce, name="SE", division_names=["A"])
    assert svc.get(a).divisions[0].division_id != svc.get(b).divisions[0].division_id

    # The old name is free after a rename, but the renamed class keeps its division id.
    svc.update_class(cs, a, name="TE")
    c = svc.add_class(cs, name="SE", division_names=["A"])
    assert svc.get(c).divisions[0].division_id != svc.get(a).divisions[0].division_id

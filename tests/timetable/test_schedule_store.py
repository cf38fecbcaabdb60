from __future__ import annotations

import random
import threading
from itertools import combinations

import pytest

from src.academic_attendance.academic_attendance.core.enums import SubjectType, Weekday
from src.academic_attendance.academic_attendance.core.exceptions import ValidationError
from src.academic_attendance.academic_attendance.timetable.model import ConflictKind, TimeSlot
from src.academic_attendance.academic_attendance.timetable.store import ScheduleStore


def slot(class_id="C1", division_id="D1", day="Monday", start="09:00", end="10:00", teacher=None, subject_id="SUB-1"):
    return TimeSlot(
        class_id=class_id,
        division_id=division_id,
        day=day,
        start_time=start,
        end_time=end,
        subject_type=SubjectType.THEORY,
        subject_id=subject_id,
        teacher_email=teacher,
    )


def test_overlapping_slot_in_same_class_division_is_rejected(store):
    assert store.add_slot(slot(start="09:00", end="10:00"))

    result = store.add_slot(slot(start="09:30", end="10:30"))

    assert not result
    assert result.slot_id is None
    assert result.conflict.kind == ConflictKind.CLASS_DIVISION
    assert "class/division" in result.conflict.message


def test_back_to_back_slots_do_not_conflict(store):
    first = store.add_slot(slot(start="09:00", end="10:00"))
    second = store.add_slot(slot(start="10:00", end="11:00"))

    assert first and second
    assert first.slot_id != second.slot_id
    assert len(store.slots_for_class_division("C1", "D1")) == 2


def test_teacher_double_booking_across_classes_is_rejected(store):
    assert store.add_slot(slot(class_id="C1", division_id="D1", day="Tuesday", start="11:00", end="12:00", teacher="x@x.edu"))

    result = store.add_slot(
        slot(class_id="C2", division_id="D5", day="Tuesday", start="11:30", end="12:30", teacher="x@x.edu")
    )

    assert not result
    assert result.conflict.kind == ConflictKind.TEACHER
    assert "x@x.edu is already booked elsewhere" in result.conflict.message


def test_same_time_on_other_day_or_other_division_is_allowed(store):
    assert store.add_slot(slot(day="Monday", teacher="a@x.edu"))
    assert store.add_slot(slot(day="Tuesday", teacher="a@x.edu"))
    assert store.add_slot(slot(division_id="D2", teacher="b@x.edu"))


def test_slots_without_teacher_never_conflict_on_teacher_axis(store):
    assert store.add_slot(slot(class_id="C1"))
    assert store.add_slot(slot(class_id="C2"))


def test_rejected_add_leaves_store_unchanged(store):
    store.add_slot(slot(start="09:00", end="10:00", teacher="a@x.edu"))
    before = store.all_slots()

    store.add_slot(slot(start="09:15", end="09:45"))
    store.add_slot(slot(class_id="C9", start="09:59", end="11:00", teacher="a@x.edu"))

    assert store.all_slots() == before


def test_update_checks_against_other_slots_only(store):
    sid = store.add_slot(slot(start="09:00", end="10:00")).slot_id

    # Moving within its own interval must not conflict with itself.
    assert store.update_slot(sid, start_time="09:30", end_time="10:30")
    assert store.get(sid).start_time == "09:30"


def test_update_rejected_on_overlap_keeps_old_values(store):
    store.add_slot(slot(start="09:00", end="10:00"))
    sid = store.add_slot(slot(start="10:00", end="11:00")).slot_id

    result = store.update_slot(sid, start_time="09:30")

    assert not result
    assert result.found
    assert result.conflict.kind == ConflictKind.CLASS_DIVISION
    assert store.get(sid).start_time == "10:00"


def test_update_reassigning_teacher_is_checked(store):
    store.add_slot(slot(class_id="C1", teacher="a@x.edu"))
    sid = store.add_slot(slot(class_id="C2", teacher="b@x.edu")).slot_id

    result = store.update_slot(sid, teacher_email="a@x.edu")

    assert not result
    assert result.conflict.kind == ConflictKind.TEACHER


def test_update_of_non_scheduling_field_skips_check(store):
    sid = store.add_slot(slot()).slot_id
    assert store.update_slot(sid, subject_id="SUB-2")
    assert store.get(sid).subject_id == "SUB-2"


def test_update_and_delete_unknown_id(store):
    result = store.update_slot("TS-404", start_time="08:00")
    assert not result
    assert result.found is False
    assert store.delete_slot("TS-404") is False


def test_delete_frees_the_interval(store):
    sid = store.add_slot(slot()).slot_id
    assert store.delete_slot(sid) is True
    assert store.get(sid) is None
    assert store.add_slot(slot())


def test_queries_by_class_division_teacher_and_subject(store):
    store.add_slot(slot(class_id="C1", division_id="D1", teacher="a@x.edu"))
    store.add_slot(slot(class_id="C1", division_id="D2", teacher="b@x.edu"))
    store.add_slot(slot(class_id="C2", division_id="D1", day="Friday", teacher="a@x.edu", subject_id="SUB-9"))

    assert len(store.slots_for_class_division("C1", "D1")) == 1
    assert len(store.slots_for_class_division("C1")) == 2
    assert {s.class_id for s in store.slots_for_teacher("a@x.edu")} == {"C1", "C2"}
    assert len(store.slots_for_subject("SUB-9", SubjectType.THEORY)) == 1
    assert store.slots_for_subject("SUB-9", SubjectType.PRACTICAL) == []


def test_time_slot_validates_and_normalizes_times():
    s = slot(start="9:05", end="10:00")
    assert s.start_time == "09:05"
    assert s.day == Weekday.MONDAY

    with pytest.raises(ValidationError):
        slot(start="10:00", end="10:00")
    with pytest.raises(ValidationError):
        slot(start="25:00", end="26:00")
    with pytest.raises(ValidationError):
        slot(day="Sunday")


def test_no_overlap_invariant_holds_under_random_writes():
    rng = random.Random(7)
    store = ScheduleStore()
    teachers = ["a@x.edu", "b@x.edu", "c@x.edu", None]
    days = [d.value for d in Weekday]

    for _ in range(400):
        start = rng.randrange(8 * 60, 17 * 60, 15)
        length = rng.choice([30, 45, 60, 120])
        store.add_slot(
            slot(
                class_id=rng.choice(["C1", "C2"]),
                division_id=rng.choice(["D1", "D2"]),
                day=rng.choice(days),
                start=f"{start // 60:02d}:{start % 60:02d}",
                end=f"{(start + length) // 60:02d}:{(start + length) % 60:02d}",
                teacher=rng.choice(teachers),
            )
        )

    committed = store.all_slots()
    assert committed
    for a, b in combinations(committed, 2):
        if not a.overlaps(b):
            continue
        assert (a.class_id, a.division_id) != (b.class_id, b.division_id)
        assert not (a.teacher_email and a.teacher_email == b.teacher_email)


def test_class_division_clash_is_reported_ahead_of_an_earlier_teacher_clash(store):
    assert store.add_slot(slot(class_id="C2", division_id="D9", teacher="t@x.edu"))
    assert store.add_slot(slot(teacher="other@x.edu"))

    result = store.add_slot(slot(start="09:30", end="10:30", teacher="t@x.edu"))

    assert result.conflict.kind == ConflictKind.CLASS_DIVISION
    assert result.conflict.existing.teacher_email == "other@x.edu"


def test_delete_for_class_removes_only_that_class(store):
    store.add_slot(slot(class_id="C1", teacher="a@x.edu"))
    store.add_slot(slot(class_id="C1", division_id="D2", teacher="b@x.edu"))
    kept = store.add_slot(slot(class_id="C2", start="11:00", end="12:00", teacher="a@x.edu"))

    assert store.delete_for_class("C1") == 2
    assert [s.slot_id for s in store.all_slots()] == [kept.slot_id]
    # The teacher is free again at 09:00.
    assert store.add_slot(slot(class_id="C3", teacher="a@x.edu"))


def test_concurrent_writers_never_double_book(store):
    barrier = threading.Barrier(8)
    results = []

    def writer(n):
        barrier.wait()
        results.append(store.add_slot(slot(division_id=f"D{n}", teacher="shared@x.edu")))

    threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(1 for r in results if r) == 1
    assert len(store.slots_for_teacher("shared@x.edu")) == 1

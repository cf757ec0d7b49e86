import pytest

from classboard.schemas.class_entity import ClassEntity
from classboard.schemas.room import RoomOut
from classboard.schemas.schedule import ScheduleEntry
from classboard.schemas.teacher import TeacherOut, TeacherUser, TeacherWorkload
from classboard.schemas.time_slot import TimeSlotOut
from classboard.services.conflict_service import ConflictService, detect_conflicts

DAYS = ["Monday", "Tuesday"]
SLOTS = [
    TimeSlotOut(id="slot-9", start_time="09:00", end_time="10:00", label="09:00-10:00"),
    TimeSlotOut(id="slot-10", start_time="10:00", end_time="11:00", label="10:00-11:00"),
]
ROOMS = [RoomOut(id="r1", name="Room 1"), RoomOut(id="r2", name="Room 2")]


def make_class(class_id, name, teacher_id, *schedules) -> ClassEntity:
    return ClassEntity(
        id=class_id,
        name=name,
        subject="Maths",
        teacher_id=teacher_id,
        schedules=[
            ScheduleEntry(id=f"{class_id}-{index}", class_id=class_id, day=day, time_slot_id=slot_id, room_id=room_id)
            for index, (day, slot_id, room_id) in enumerate(schedules)
        ],
    )


@pytest.fixture
def teachers():
    return [
        TeacherOut(id="t1", user=TeacherUser(name="Prof A", email="a@example.com")),
        TeacherOut(id="t2", user=TeacherUser(name="Prof B", email="b@example.com")),
    ]


def test_detect_teacher_conflict_is_order_independent(teachers):
    algebra = make_class("c1", "Algebra I", "t1", ("Monday", "slot-9", "r1"))
    geometry = make_class("c2", "Geometry", "t1", ("Monday", "slot-9", "r2"))

    forward = detect_conflicts([algebra, geometry], DAYS, SLOTS, ROOMS, teachers)
    backward = detect_conflicts([geometry, algebra], DAYS, SLOTS, ROOMS, teachers)

    for report in (forward, backward):
        assert len(report) == 1
        conflict = report[0]
        assert conflict.kind == "teacher"
        assert conflict.id == "teacher-Monday-09:00-10:00-t1"
        assert set(conflict.class_names) == {"Algebra I", "Geometry"}
        assert conflict.day == "Monday"
        assert conflict.time_slot_label == "09:00-10:00"


def test_detect_room_conflict(teachers):
    algebra = make_class("c1", "Algebra I", "t1", ("Tuesday", "slot-10", "r1"))
    biology = make_class("c2", "Biology", "t2", ("Tuesday", "slot-10", "r1"))

    report = ConflictService([algebra, biology], DAYS, SLOTS, ROOMS, teachers).detect_conflicts()

    assert len(report) == 1
    conflict = report[0]
    assert conflict.kind == "room"
    assert conflict.entity_id == "r1"
    assert conflict.message == "Room conflict: Room 1 is assigned to Algebra I, Biology on Tuesday at 10:00-11:00"


def test_both_kinds_reported_for_same_cell(teachers):
    algebra = make_class("c1", "Algebra I", "t1", ("Monday", "slot-9", "r1"))
    geometry = make_class("c2", "Geometry", "t1", ("Monday", "slot-9", "r1"))

    kinds = [conflict.kind for conflict in detect_conflicts([algebra, geometry], DAYS, SLOTS, ROOMS, teachers)]

    assert kinds == ["teacher", "room"]


def test_no_conflict_for_different_slots_or_single_class(teachers):
    algebra = make_class("c1", "Algebra I", "t1", ("Monday", "slot-9", "r1"), ("Monday", "slot-10", "r1"))
    geometry = make_class("c2", "Geometry", "t1", ("Tuesday", "slot-9", "r1"))

    assert detect_conflicts([algebra, geometry], DAYS, SLOTS, ROOMS, teachers) == []


def test_classes_without_teacher_or_room_are_ignored():
    first = make_class("c1", "Art", None, ("Monday", "slot-9", None))
    second = make_class("c2", "Music", None, ("Monday", "slot-9", None))

    assert detect_conflicts([first, second], DAYS, SLOTS) == []


def test_unknown_teacher_and_overloaded_names():
    overloaded = TeacherOut(
        id="t1",
        user=TeacherUser(name="Prof A", email="a@example.com"),
        workload=TeacherWorkload(class_count=6, weekly_hours=22, is_overloaded=True),
    )
    algebra = make_class("c1", "Algebra I", "t1", ("Monday", "slot-9", None))
    geometry = make_class("c2", "Geometry", "t1", ("Monday", "slot-9", None))
    art = make_class("c3", "Art", "t9", ("Monday", "slot-10", None))
    music = make_class("c4", "Music", "t9", ("Monday", "slot-10", None))

    messages = [
        conflict.message
        for conflict in detect_conflicts([algebra, geometry, art, music], DAYS, SLOTS, teachers=[overloaded])
    ]

    assert messages == [
        "Teacher conflict: Prof A (overloaded) is assigned to Algebra I, Geometry on Monday at 09:00-10:00",
        "Teacher conflict: Unknown teacher is assigned to Art, Music on Monday at 10:00-11:00",
    ]


def test_legacy_time_entries_participate_in_detection(teachers):
    legacy = ClassEntity(
        id="c1",
        name="Legacy",
        subject="History",
        teacher_id="t2",
        schedules=[ScheduleEntry(id="old-1", class_id="c1", day="Monday", time="09:00")],
    )
    modern = make_class("c2", "Modern", "t2", ("Monday", "slot-9", None))

    report = detect_conflicts([legacy, modern], DAYS, SLOTS, teachers=teachers)

    assert [conflict.class_names for conflict in report] == [["Legacy", "Modern"]]

import pytest

from classboard.schemas.class_entity import ClassEntity
from classboard.schemas.pending_change import ChangeType
from classboard.schemas.room import RoomOut
from classboard.schemas.schedule import ScheduleEntry
from classboard.schemas.teacher import TeacherOut, TeacherUser
from classboard.schemas.time_slot import TimeSlotOut
from classboard.services.grid_controller import (
    DragPayload,
    DragPhase,
    DragSource,
    GridController,
    GridSession,
    TimetableSnapshot,
)
from classboard.services.pending_changes import is_temporary_id

NINE = TimeSlotOut(id="slot-9", start_time="09:00", end_time="10:00", label="09:00-10:00")
TEN = TimeSlotOut(id="slot-10", start_time="10:00", end_time="11:00", label="10:00-11:00")


@pytest.fixture
def controller():
    geometry = ClassEntity(
        id="geo",
        name="Geometry",
        subject="Maths",
        teacher_id="t1",
        schedules=[ScheduleEntry(id="s-geo", class_id="geo", day="Tuesday", time_slot_id=TEN.id, room_id="r2")],
    )
    algebra = ClassEntity(id="alg", name="Algebra I", subject="Maths", teacher_id="t1")
    controller = GridController(GridSession(days=["Monday", "Tuesday", "Wednesday"]))
    controller.load(TimetableSnapshot(
        classes=[geometry, algebra],
        time_slots=[NINE, TEN],
        rooms=[RoomOut(id="r1", name="R1"), RoomOut(id="r2", name="R2")],
        teachers=[TeacherOut(id="t1", user=TeacherUser(name="T1", email="t1@example.com"))],
    ))
    return controller


def test_load_partitions_scheduled_and_unassigned(controller):
    assert [cls.name for cls in controller.session.scheduled] == ["Geometry"]
    assert [cls.name for cls in controller.session.unassigned] == ["Algebra I"]
    assert controller.session.conflicts == []
    assert not controller.has_changes


def test_drop_unassigned_class_stages_create_with_active_room_filter(controller):
    controller.set_room_filter("r1")
    controller.start_drag("alg")
    assert controller.session.phase is DragPhase.dragging

    result = controller.drop_on_cell("Monday", NINE.label)

    assert result.ok
    assert result.message == "Scheduled Algebra I on Monday at 09:00-10:00"
    [change] = controller.session.ledger.entries()
    assert change.type is ChangeType.create
    assert (change.class_id, change.day, change.time_slot_id, change.room_id) == ("alg", "Monday", "slot-9", "r1")
    assert [cls.name for cls in controller.session.unassigned] == []
    algebra = next(cls for cls in controller.session.scheduled if cls.id == "alg")
    assert is_temporary_id(algebra.schedules[0].id)
    assert controller.session.phase is DragPhase.idle
    assert controller.session.conflicts == []


def test_drop_next_to_same_teacher_reports_conflict(controller):
    controller.start_drag("alg")
    controller.drop_on_cell("Tuesday", TEN.label)

    [conflict] = controller.session.conflicts
    assert conflict.kind == "teacher"
    assert conflict.class_names == ["Geometry", "Algebra I"]
    assert conflict.message == "Teacher conflict: T1 is assigned to Geometry, Algebra I on Tuesday at 10:00-11:00"
    assert controller.cell_conflicts("Tuesday", TEN.label) == [conflict]


def test_move_persisted_schedule_stages_update_and_keeps_room(controller):
    controller.start_drag("geo", schedule_id="s-geo")
    result = controller.drop_on_cell("Wednesday", NINE.label)

    assert result.message == "Moved Geometry to Wednesday at 09:00-10:00"
    [change] = controller.session.ledger.entries()
    assert change.type is ChangeType.update
    assert change.schedule_id == "s-geo"
    assert change.room_id == "r2"
    assert (change.original_day, change.original_time_slot_label) == ("Tuesday", "10:00-11:00")
    [occupant] = controller.classes_for_cell("Wednesday", NINE.label)
    assert occupant.school_class.id == "geo"
    assert controller.classes_for_cell("Tuesday", TEN.label) == []


def test_drop_on_original_cell_is_a_no_op(controller):
    controller.start_drag("geo", schedule_id="s-geo")
    result = controller.drop_on_cell("Tuesday", TEN.label)

    assert result.ok
    assert result.message == "No changes to schedule"
    assert not controller.has_changes


def test_second_schedule_in_same_slot_is_rejected(controller):
    controller.start_drag("geo")
    result = controller.drop_on_cell("Tuesday", TEN.label)

    assert not result.ok
    assert result.message == "Class Geometry is already scheduled for Tuesday at 10:00-11:00"
    assert not controller.has_changes
    assert controller.session.phase is DragPhase.idle


def test_unknown_time_slot_is_rejected(controller):
    controller.start_drag("alg")
    result = controller.drop_on_cell("Monday", "Period 9")

    assert not result.ok
    assert result.message == "Time slot not found: Period 9"
    assert not controller.has_changes


def test_drop_without_drag_state_uses_payload(controller):
    result = controller.drop_on_cell("Monday", NINE.label, payload=DragPayload(class_id="alg"))
    assert result.ok
    assert len(controller.session.ledger) == 1

    failed = controller.drop_on_cell("Monday", TEN.label)
    assert not failed.ok
    assert failed.message == "Unable to move class: drop data not found"


def test_unassign_stages_delete_for_every_schedule(controller):
    controller.start_drag("geo", schedule_id="s-geo")
    result = controller.drop_on_unassign()

    assert result.message == "Geometry marked for unassignment. Save changes to confirm."
    assert result.change_count == 1
    [change] = controller.session.ledger.entries()
    assert (change.type, change.schedule_id) == (ChangeType.delete, "s-geo")
    assert [cls.name for cls in controller.session.unassigned] == ["Algebra I", "Geometry"]


def test_unassign_of_unscheduled_class_is_informational(controller):
    result = controller.drop_on_unassign(DragPayload(class_id="alg"))
    assert result.ok
    assert result.message == "Algebra I is already unassigned"
    assert not controller.has_changes


def test_create_then_unassign_leaves_nothing_pending(controller):
    controller.start_drag("alg")
    controller.drop_on_cell("Monday", NINE.label)
    controller.start_drag("alg")
    controller.drop_on_unassign()

    assert controller.session.ledger.entries() == []
    assert any(cls.id == "alg" for cls in controller.session.unassigned)


def test_moving_an_unsaved_schedule_updates_its_create(controller):
    controller.start_drag("alg")
    controller.drop_on_cell("Monday", NINE.label)
    temp_id = next(cls for cls in controller.session.scheduled if cls.id == "alg").schedules[0].id

    controller.start_drag("alg", schedule_id=temp_id)
    controller.drop_on_cell("Wednesday", TEN.label)

    [change] = controller.session.ledger.entries()
    assert change.type is ChangeType.create
    assert (change.day, change.time_slot_id) == ("Wednesday", "slot-10")


def test_payload_source_carries_room(controller):
    source = DragSource(kind="cell", day="Tuesday", time_slot_label=TEN.label, room_id="r2", schedule_id="s-geo")
    controller.drop_on_cell("Monday", NINE.label, payload=DragPayload(class_id="geo", source=source))

    [change] = controller.session.ledger.entries()
    assert change.type is ChangeType.update
    assert change.room_id == "r2"


def test_filters_and_render(controller):
    controller.set_teacher_filter("t2")
    assert controller.visible_classes() == []

    controller.set_teacher_filter(None)
    controller.set_room_filter("r2")
    assert [cls.name for cls in controller.visible_classes()] == ["Geometry"]

    view = controller.render()
    assert view.days == ["Monday", "Tuesday", "Wednesday"]
    assert [row.time_slot.label for row in view.rows] == [NINE.label, TEN.label]
    tuesday_ten = view.rows[1].cells[1]
    assert [card.name for card in tuesday_ten.cards] == ["Geometry"]
    assert tuesday_ten.cards[0].room_name == "R2"
    assert tuesday_ten.cards[0].teacher_name == "T1"
    assert not tuesday_ten.has_conflict
    assert [card.name for card in view.unassigned] == ["Algebra I"]
    assert view.has_changes is False


def test_cancel_drag_resets_state(controller):
    controller.start_drag("geo", schedule_id="s-geo")
    controller.cancel_drag()

    assert controller.session.phase is DragPhase.idle
    assert controller.session.dragged_class_id is None


def test_conflicts_ignore_active_filters(controller):
    controller.set_room_filter("r1")
    controller.start_drag("alg")
    controller.drop_on_cell("Tuesday", TEN.label)

    assert [cls.name for cls in controller.visible_classes()] == ["Algebra I"]
    [conflict] = controller.session.conflicts
    assert conflict.kind == "teacher"
    assert conflict.class_names == ["Geometry", "Algebra I"]

    controller.set_teacher_filter("t2")
    assert controller.visible_classes() == []
    assert controller.refresh_conflicts() == [conflict]


def test_adopt_schedule_id_renames_unsaved_entry(controller):
    controller.start_drag("alg")
    controller.drop_on_cell("Monday", NINE.label)
    algebra = next(cls for cls in controller.session.scheduled if cls.id == "alg")
    temp_id = algebra.schedules[0].id

    assert controller.adopt_schedule_id(temp_id, "s-alg")
    assert not controller.adopt_schedule_id("temp-missing", "s-other")

    algebra = next(cls for cls in controller.session.scheduled if cls.id == "alg")
    assert [entry.id for entry in algebra.schedules] == ["s-alg"]
    controller.start_drag("alg", schedule_id="s-alg")
    controller.drop_on_unassign()
    deletes = [change for change in controller.session.ledger.entries() if change.type is ChangeType.delete]
    assert [change.schedule_id for change in deletes] == ["s-alg"]

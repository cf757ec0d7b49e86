from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from classboard.core.config import get_settings
from classboard.schemas.class_entity import ClassEntity
from classboard.schemas.conflict import ConflictRecord
from classboard.schemas.pending_change import ChangeType, PendingChange
from classboard.schemas.room import RoomOut
from classboard.schemas.schedule import ScheduleEntry
from classboard.schemas.teacher import TeacherOut
from classboard.schemas.time_slot import TimeSlotOut
from classboard.services.conflict_service import SlotOccupant, detect_conflicts, occupants_for_slot
from classboard.services.pending_changes import PendingChangeLedger, new_temporary_id
from classboard.services.slot_matching import entry_matches_slot, find_time_slot

logger = logging.getLogger(__name__)


class DragPhase(str, Enum):
    idle = "idle"
    dragging = "dragging"


@dataclass(frozen=True)
class DragSource:
    kind: Literal["unassigned", "cell"]
    day: str | None = None
    time_slot_label: str | None = None
    room_id: str | None = None
    schedule_id: str | None = None


UNASSIGNED_SOURCE = DragSource(kind="unassigned")


@dataclass(frozen=True)
class DragPayload:
    """What travels over the drag-transfer channel; only used when session state is lost."""

    class_id: str
    source: DragSource = UNASSIGNED_SOURCE


@dataclass(frozen=True)
class GestureResult:
    ok: bool
    level: Literal["success", "info", "error"]
    message: str
    change_count: int = 0
    payload: DragPayload | None = None


@dataclass(frozen=True)
class TimetableSnapshot:
    classes: list[ClassEntity]
    time_slots: list[TimeSlotOut]
    rooms: list[RoomOut] = field(default_factory=list)
    teachers: list[TeacherOut] = field(default_factory=list)


@dataclass
class GridSession:
    """All mutable state of one editing session, owned by a GridController."""

    days: list[str]
    time_slots: list[TimeSlotOut] = field(default_factory=list)
    rooms: list[RoomOut] = field(default_factory=list)
    teachers: list[TeacherOut] = field(default_factory=list)
    scheduled: list[ClassEntity] = field(default_factory=list)
    unassigned: list[ClassEntity] = field(default_factory=list)
    ledger: PendingChangeLedger = field(default_factory=PendingChangeLedger)
    conflicts: list[ConflictRecord] = field(default_factory=list)
    selected_teacher_id: str | None = None
    selected_room_id: str | None = None
    phase: DragPhase = DragPhase.idle
    dragged_class_id: str | None = None
    drag_source: DragSource | None = None


@dataclass(frozen=True)
class ClassCard:
    class_id: str
    name: str
    subject: str
    teacher_name: str | None = None
    room_name: str | None = None
    schedule_id: str | None = None
    schedule_count: int = 1
    pending: bool = False


@dataclass(frozen=True)
class CellView:
    day: str
    time_slot: TimeSlotOut
    cards: list[ClassCard]
    conflict_kinds: list[str]

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflict_kinds)


@dataclass(frozen=True)
class GridRow:
    time_slot: TimeSlotOut
    cells: list[CellView]


@dataclass(frozen=True)
class GridView:
    days: list[str]
    rows: list[GridRow]
    unassigned: list[ClassCard]
    conflicts: list[ConflictRecord]
    has_changes: bool


class GridController:
    def __init__(self, session: GridSession | None = None):
        self.session = session or GridSession(days=list(get_settings().scheduling_days))

    # -- loading ---------------------------------------------------------

    def load(self, snapshot: TimetableSnapshot) -> None:
        session = self.session
        session.time_slots = list(snapshot.time_slots)
        session.rooms = list(snapshot.rooms)
        session.teachers = list(snapshot.teachers)
        session.scheduled = [cls for cls in snapshot.classes if not cls.is_unassigned]
        session.unassigned = [cls for cls in snapshot.classes if cls.is_unassigned]
        self._reset_drag()
        self.refresh_conflicts()
        logger.info(
            "Loaded timetable: %d scheduled, %d unassigned, %d time slots",
            len(session.scheduled),
            len(session.unassigned),
            len(session.time_slots),
        )

    def refresh_conflicts(self) -> list[ConflictRecord]:
        session = self.session
        session.conflicts = detect_conflicts(
            session.scheduled,
            session.days,
            session.time_slots,
            session.rooms,
            session.teachers,
        )
        return session.conflicts

    def adopt_schedule_id(self, temp_id: str, schedule_id: str) -> bool:
        """Rename an optimistic entry once the backend has stored it.

        Later gestures on the entry then target the persisted row instead
        of a schedule the ledger believes was never saved.
        """
        session = self.session
        for cls in session.scheduled:
            if not any(entry.id == temp_id for entry in cls.schedules):
                continue
            schedules = [
                entry.model_copy(update={"id": schedule_id}) if entry.id == temp_id else entry
                for entry in cls.schedules
            ]
            self._replace_scheduled(cls.model_copy(update={"schedules": schedules}))
            logger.debug("Schedule %s of %s saved as %s", temp_id, cls.name, schedule_id)
            return True
        return False

    @property
    def has_changes(self) -> bool:
        return bool(self.session.ledger)

    # -- filters ---------------------------------------------------------

    def set_teacher_filter(self, teacher_id: str | None) -> None:
        self.session.selected_teacher_id = teacher_id or None

    def set_room_filter(self, room_id: str | None) -> None:
        self.session.selected_room_id = room_id or None

    def visible_classes(self) -> list[ClassEntity]:
        session = self.session
        visible = []
        for cls in session.scheduled:
            if session.selected_teacher_id and cls.teacher_id != session.selected_teacher_id:
                continue
            if session.selected_room_id and not any(
                entry.room_id == session.selected_room_id for entry in cls.schedules
            ):
                continue
            visible.append(cls)
        return visible

    # -- drag session ----------------------------------------------------

    def start_drag(self, class_id: str, schedule_id: str | None = None) -> GestureResult:
        cls = self._find_class(class_id)
        if cls is None:
            return self._fail("Unable to drag class: class not found")

        source = UNASSIGNED_SOURCE
        if schedule_id is not None:
            entry = next((item for item in cls.schedules if item.id == schedule_id), None)
            if entry is None:
                return self._fail(f"Unable to drag class: schedule {schedule_id} not found")
            source = DragSource(
                kind="cell",
                day=entry.day,
                time_slot_label=self._entry_label(entry),
                room_id=entry.room_id,
                schedule_id=entry.id,
            )

        session = self.session
        session.phase = DragPhase.dragging
        session.dragged_class_id = cls.id
        session.drag_source = source
        logger.debug("Drag started for %s from %s", cls.name, source.kind)
        payload = DragPayload(class_id=cls.id, source=source)
        return GestureResult(ok=True, level="info", message=f"Dragging {cls.name}", payload=payload)

    def cancel_drag(self) -> None:
        self._reset_drag()

    def drop_on_cell(self, day: str, time_slot_label: str, payload: DragPayload | None = None) -> GestureResult:
        cls, source = self._resolve_dragged(payload)
        if cls is None:
            return self._fail("Unable to move class: drop data not found")

        slot = find_time_slot(self.session.time_slots, label=time_slot_label)
        if slot is None:
            return self._fail(f"Time slot not found: {time_slot_label}")
        if not slot.id:
            return self._fail("Cannot schedule class: time slot ID is missing")

        original: ScheduleEntry | None = None
        if source.schedule_id:
            original = next((entry for entry in cls.schedules if entry.id == source.schedule_id), None)
            if original is None:
                return self._fail(f"Original schedule for {cls.name} not found")
            if entry_matches_slot(original, day, slot):
                self._reset_drag()
                return GestureResult(ok=True, level="info", message="No changes to schedule")

        if any(entry_matches_slot(entry, day, slot) for entry in cls.schedules):
            return self._fail(f"Class {cls.name} is already scheduled for {day} at {slot.label}")

        room_id = source.room_id or self.session.selected_room_id
        if original is not None:
            result = self._stage_move(cls, original, day, slot, room_id)
        else:
            result = self._stage_create(cls, day, slot, room_id)
        self._reset_drag()
        self.refresh_conflicts()
        return result

    def drop_on_unassign(self, payload: DragPayload | None = None) -> GestureResult:
        cls, _ = self._resolve_dragged(payload)
        if cls is None:
            return self._fail("Unable to unassign class: drop data not found")

        if not cls.schedules:
            self._reset_drag()
            return GestureResult(ok=True, level="info", message=f"{cls.name} is already unassigned")

        session = self.session
        for entry in cls.schedules:
            session.ledger.append(PendingChange(
                type=ChangeType.delete,
                class_id=cls.id,
                class_name=cls.name,
                day=entry.day,
                time_slot_id=entry.time_slot_id,
                time_slot_label=self._entry_label(entry),
                room_id=entry.room_id,
                schedule_id=entry.id,
            ))

        stripped = cls.model_copy(update={"schedules": []})
        session.scheduled = [item for item in session.scheduled if item.id != cls.id]
        session.unassigned = [item for item in session.unassigned if item.id != cls.id] + [stripped]
        count = len(cls.schedules)
        self._reset_drag()
        self.refresh_conflicts()
        logger.info("Staged unassignment of %s (%d schedule(s))", cls.name, count)
        return GestureResult(
            ok=True,
            level="success",
            message=f"{cls.name} marked for unassignment. Save changes to confirm.",
            change_count=count,
        )

    # -- rendering -------------------------------------------------------

    def classes_for_cell(self, day: str, time_slot_label: str) -> list[SlotOccupant]:
        slot = find_time_slot(self.session.time_slots, label=time_slot_label)
        if slot is None:
            logger.warning("Time slot not found for label: %s", time_slot_label)
            return []
        return occupants_for_slot(self.visible_classes(), day, slot)

    def cell_conflicts(self, day: str, time_slot_label: str) -> list[ConflictRecord]:
        return [
            conflict
            for conflict in self.session.conflicts
            if conflict.day == day and conflict.time_slot_label == time_slot_label
        ]

    def render(self) -> GridView:
        session = self.session
        rows = []
        for slot in session.time_slots:
            cells = []
            for day in session.days:
                cards = [self._card(occupant.school_class, occupant.entries) for occupant in self.classes_for_cell(day, slot.label)]
                kinds = []
                for conflict in self.cell_conflicts(day, slot.label):
                    if conflict.kind not in kinds:
                        kinds.append(conflict.kind)
                cells.append(CellView(day=day, time_slot=slot, cards=cards, conflict_kinds=kinds))
            rows.append(GridRow(time_slot=slot, cells=cells))
        return GridView(
            days=list(session.days),
            rows=rows,
            unassigned=[self._card(cls, ()) for cls in session.unassigned],
            conflicts=list(session.conflicts),
            has_changes=self.has_changes,
        )

    # -- internals -------------------------------------------------------

    def _stage_move(
        self,
        cls: ClassEntity,
        original: ScheduleEntry,
        day: str,
        slot: TimeSlotOut,
        room_id: str | None,
    ) -> GestureResult:
        self.session.ledger.append(PendingChange(
            type=ChangeType.update,
            class_id=cls.id,
            class_name=cls.name,
            day=day,
            time_slot_id=slot.id,
            time_slot_label=slot.label,
            room_id=room_id,
            schedule_id=original.id,
            original_day=original.day,
            original_time_slot_id=original.time_slot_id,
            original_time_slot_label=self._entry_label(original),
        ))
        moved = original.model_copy(update={
            "day": day,
            "time_slot_id": slot.id,
            "time_slot": slot,
            "time": slot.start_time,
            "room_id": room_id,
            "room": self._find_room(room_id),
        })
        updated = cls.model_copy(update={
            "schedules": [moved if entry.id == original.id else entry for entry in cls.schedules],
        })
        self._replace_scheduled(updated)
        logger.info("Staged move of %s to %s at %s", cls.name, day, slot.label)
        return GestureResult(ok=True, level="success", message=f"Moved {cls.name} to {day} at {slot.label}", change_count=1)

    def _stage_create(self, cls: ClassEntity, day: str, slot: TimeSlotOut, room_id: str | None) -> GestureResult:
        temp_id = new_temporary_id()
        self.session.ledger.append(PendingChange(
            type=ChangeType.create,
            class_id=cls.id,
            class_name=cls.name,
            day=day,
            time_slot_id=slot.id,
            time_slot_label=slot.label,
            room_id=room_id,
            temp_id=temp_id,
        ))
        entry = ScheduleEntry(
            id=temp_id,
            class_id=cls.id,
            day=day,
            time_slot_id=slot.id,
            time_slot=slot,
            time=slot.start_time,
            room_id=room_id,
            room=self._find_room(room_id),
        )
        updated = cls.model_copy(update={"schedules": [*cls.schedules, entry]})
        session = self.session
        if any(item.id == cls.id for item in session.unassigned):
            session.unassigned = [item for item in session.unassigned if item.id != cls.id]
            session.scheduled = [item for item in session.scheduled if item.id != cls.id] + [updated]
        else:
            self._replace_scheduled(updated)
        logger.info("Staged new schedule for %s on %s at %s", cls.name, day, slot.label)
        return GestureResult(ok=True, level="success", message=f"Scheduled {cls.name} on {day} at {slot.label}", change_count=1)

    def _resolve_dragged(self, payload: DragPayload | None) -> tuple[ClassEntity | None, DragSource]:
        session = self.session
        if session.dragged_class_id:
            cls = self._find_class(session.dragged_class_id)
            if cls is not None:
                return cls, session.drag_source or UNASSIGNED_SOURCE
        if payload is not None:
            cls = self._find_class(payload.class_id)
            if cls is not None:
                logger.debug("Recovered dragged class %s from transfer payload", cls.name)
                return cls, payload.source
        return None, UNASSIGNED_SOURCE

    def _find_class(self, class_id: str) -> ClassEntity | None:
        for cls in self.session.scheduled:
            if cls.id == class_id:
                return cls
        for cls in self.session.unassigned:
            if cls.id == class_id:
                return cls
        return None

    def _find_room(self, room_id: str | None) -> RoomOut | None:
        if not room_id:
            return None
        return next((room for room in self.session.rooms if room.id == room_id), None)

    def _replace_scheduled(self, updated: ClassEntity) -> None:
        self.session.scheduled = [updated if item.id == updated.id else item for item in self.session.scheduled]

    def _entry_label(self, entry: ScheduleEntry) -> str | None:
        if entry.time_slot is not None:
            return entry.time_slot.label
        if entry.time_slot_id:
            slot = find_time_slot(self.session.time_slots, slot_id=entry.time_slot_id)
            if slot is not None:
                return slot.label
        return entry.time

    def _card(self, cls: ClassEntity, entries) -> ClassCard:
        teacher = next((item for item in self.session.teachers if item.id == cls.teacher_id), None)
        entry = entries[0] if len(entries) == 1 else None
        room = None
        if entry is not None:
            room = entry.room or self._find_room(entry.room_id)
        return ClassCard(
            class_id=cls.id,
            name=cls.name,
            subject=cls.subject,
            teacher_name=teacher.display_name if teacher is not None else None,
            room_name=room.name if room is not None else None,
            schedule_id=entry.id if entry is not None else None,
            schedule_count=len(entries),
            pending=entry is not None and self.session.ledger.has_pending(entry.id),
        )

    def _reset_drag(self) -> None:
        session = self.session
        session.phase = DragPhase.idle
        session.dragged_class_id = None
        session.drag_source = None

    def _fail(self, message: str) -> GestureResult:
        logger.warning("Gesture rejected: %s", message)
        self._reset_drag()
        return GestureResult(ok=False, level="error", message=message)

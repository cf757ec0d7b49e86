from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from classboard.schemas.class_entity import ClassEntity
from classboard.schemas.conflict import ConflictRecord
from classboard.schemas.room import RoomOut
from classboard.schemas.schedule import ScheduleEntry
from classboard.schemas.teacher import TeacherOut
from classboard.schemas.time_slot import TimeSlotOut
from classboard.services.slot_matching import entry_matches_slot


@dataclass(frozen=True)
class SlotOccupant:
    school_class: ClassEntity
    entries: tuple[ScheduleEntry, ...]


def conflict_id(kind: str, day: str, slot_label: str, entity_id: str) -> str:
    return f"{kind}-{day}-{slot_label}-{entity_id}"


def occupants_for_slot(classes: Sequence[ClassEntity], day: str, slot: TimeSlotOut) -> list[SlotOccupant]:
    occupants: list[SlotOccupant] = []
    for cls in classes:
        matching = tuple(entry for entry in cls.schedules if entry_matches_slot(entry, day, slot))
        if matching:
            occupants.append(SlotOccupant(school_class=cls, entries=matching))
    return occupants


class ConflictService:
    """Teacher and room double-booking detection over loaded timetable data.

    Pure: the same inputs always give the same records in the same order
    (days, then time slots, then teachers/rooms in first-seen order).
    """

    def __init__(
        self,
        classes: Sequence[ClassEntity],
        days: Sequence[str],
        time_slots: Sequence[TimeSlotOut],
        rooms: Sequence[RoomOut] = (),
        teachers: Sequence[TeacherOut] = (),
    ):
        self.classes = list(classes)
        self.days = list(days)
        self.time_slots = list(time_slots)
        self.room_map: Dict[str, RoomOut] = {room.id: room for room in rooms}
        self.teacher_map: Dict[str, TeacherOut] = {teacher.id: teacher for teacher in teachers}

    def detect_conflicts(self) -> List[ConflictRecord]:
        conflicts: List[ConflictRecord] = []
        for day in self.days:
            for slot in self.time_slots:
                occupants = occupants_for_slot(self.classes, day, slot)
                if len(occupants) < 2:
                    continue
                conflicts.extend(self._teacher_conflicts(day, slot, occupants))
                conflicts.extend(self._room_conflicts(day, slot, occupants))
        return conflicts

    def _teacher_conflicts(self, day: str, slot: TimeSlotOut, occupants: list[SlotOccupant]) -> List[ConflictRecord]:
        by_teacher: Dict[str, List[str]] = {}
        for occupant in occupants:
            teacher_id = occupant.school_class.teacher_id
            if not teacher_id:
                continue
            by_teacher.setdefault(teacher_id, []).append(occupant.school_class.name)

        records = []
        for teacher_id, class_names in by_teacher.items():
            if len(class_names) < 2:
                continue
            records.append(ConflictRecord(
                id=conflict_id("teacher", day, slot.label, teacher_id),
                kind="teacher",
                message=(
                    f"Teacher conflict: {self._teacher_name(teacher_id)} is assigned to "
                    f"{', '.join(class_names)} on {day} at {slot.label}"
                ),
                day=day,
                time_slot_label=slot.label,
                entity_id=teacher_id,
                class_names=class_names,
            ))
        return records

    def _room_conflicts(self, day: str, slot: TimeSlotOut, occupants: list[SlotOccupant]) -> List[ConflictRecord]:
        by_room: Dict[str, Dict[str, str]] = {}
        for occupant in occupants:
            for entry in occupant.entries:
                if not entry.room_id:
                    continue
                # Keyed by class id: one class never conflicts with itself.
                by_room.setdefault(entry.room_id, {})[occupant.school_class.id] = occupant.school_class.name

        records = []
        for room_id, classes_in_room in by_room.items():
            if len(classes_in_room) < 2:
                continue
            class_names = list(classes_in_room.values())
            room = self.room_map.get(room_id)
            room_name = room.name if room is not None else "Unknown room"
            records.append(ConflictRecord(
                id=conflict_id("room", day, slot.label, room_id),
                kind="room",
                message=(
                    f"Room conflict: {room_name} is assigned to "
                    f"{', '.join(class_names)} on {day} at {slot.label}"
                ),
                day=day,
                time_slot_label=slot.label,
                entity_id=room_id,
                class_names=class_names,
            ))
        return records

    def _teacher_name(self, teacher_id: str) -> str:
        teacher = self.teacher_map.get(teacher_id)
        if teacher is None:
            return "Unknown teacher"
        if teacher.workload is not None and teacher.workload.is_overloaded:
            return f"{teacher.display_name} (overloaded)"
        return teacher.display_name


def detect_conflicts(
    classes: Sequence[ClassEntity],
    days: Sequence[str],
    time_slots: Sequence[TimeSlotOut],
    rooms: Sequence[RoomOut] = (),
    teachers: Sequence[TeacherOut] = (),
) -> List[ConflictRecord]:
    return ConflictService(classes, days, time_slots, rooms, teachers).detect_conflicts()

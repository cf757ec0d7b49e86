from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from classboard.core.exceptions import ResourceNotFoundError, ScheduleConflictError, ScheduleValidationError
from classboard.models.room import Room
from classboard.models.school_class import ClassSchedule, SchoolClass
from classboard.models.time_slot import TimeSlot
from classboard.schemas.class_entity import ClassEntity
from classboard.schemas.conflict import ConflictCheckRequest, ConflictCheckResponse, PreflightConflict
from classboard.schemas.schedule import ScheduleWrite

logger = logging.getLogger(__name__)


def _require_time_slot(db: Session, time_slot_id: str) -> TimeSlot:
    time_slot = db.get(TimeSlot, time_slot_id)
    if time_slot is None:
        raise ScheduleValidationError("Invalid time slot ID", details={"time_slot_id": time_slot_id})
    return time_slot


def _require_room(db: Session, room_id: str | None) -> None:
    if room_id and db.get(Room, room_id) is None:
        raise ScheduleValidationError("Invalid room ID", details={"room_id": room_id})


def _validated_fields(payload: ScheduleWrite) -> tuple[str, str]:
    if not payload.day or not payload.time_slot_id:
        raise ScheduleValidationError("Day and time_slot_id are required")
    return payload.day, payload.time_slot_id


def ensure_slot_available(
    db: Session,
    *,
    class_id: str,
    day: str,
    time_slot: TimeSlot,
    room_id: str | None,
    exclude_schedule_id: str | None = None,
) -> None:
    duplicate_query = select(ClassSchedule).where(
        ClassSchedule.class_id == class_id,
        ClassSchedule.day == day,
        ClassSchedule.time_slot_id == time_slot.id,
    )
    if exclude_schedule_id is not None:
        duplicate_query = duplicate_query.where(ClassSchedule.id != exclude_schedule_id)
    if db.execute(duplicate_query).scalars().first() is not None:
        raise ScheduleConflictError(f"Class is already scheduled for {day} at {time_slot.label}")

    if room_id:
        room_clash = db.execute(
            select(ClassSchedule).where(
                ClassSchedule.room_id == room_id,
                ClassSchedule.day == day,
                ClassSchedule.time_slot_id == time_slot.id,
                ClassSchedule.class_id != class_id,
            )
        ).scalars().first()
        if room_clash is not None:
            raise ScheduleConflictError(
                "The room is already scheduled for this time",
                details={"room_id": room_id, "day": day, "time_slot_id": time_slot.id},
            )


def create_schedule(db: Session, class_id: str, payload: ScheduleWrite) -> ClassSchedule:
    day, time_slot_id = _validated_fields(payload)
    if db.get(SchoolClass, class_id) is None:
        raise ResourceNotFoundError("Class", class_id)
    time_slot = _require_time_slot(db, time_slot_id)
    _require_room(db, payload.room_id)
    ensure_slot_available(db, class_id=class_id, day=day, time_slot=time_slot, room_id=payload.room_id)

    schedule = ClassSchedule(
        class_id=class_id,
        day=day,
        time=time_slot.start_time,
        time_slot_id=time_slot.id,
        room_id=payload.room_id,
    )
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    logger.info("Created schedule %s for class %s on %s at %s", schedule.id, class_id, day, time_slot.label)
    return schedule


def update_schedule(db: Session, schedule_id: str, payload: ScheduleWrite) -> ClassSchedule:
    schedule = db.get(ClassSchedule, schedule_id)
    if schedule is None:
        raise ResourceNotFoundError("Schedule", schedule_id)
    day, time_slot_id = _validated_fields(payload)
    time_slot = _require_time_slot(db, time_slot_id)
    _require_room(db, payload.room_id)
    # Moves into a booked room are accepted; the grid reports them as room conflicts.
    ensure_slot_available(
        db,
        class_id=schedule.class_id,
        day=day,
        time_slot=time_slot,
        room_id=None,
        exclude_schedule_id=schedule.id,
    )

    schedule.day = day
    schedule.time_slot_id = time_slot.id
    schedule.time = time_slot.start_time
    schedule.room_id = payload.room_id
    db.commit()
    db.refresh(schedule)
    logger.info("Updated schedule %s to %s at %s", schedule.id, day, time_slot.label)
    return schedule


def delete_schedule(db: Session, schedule_id: str) -> None:
    schedule = db.get(ClassSchedule, schedule_id)
    if schedule is None:
        raise ResourceNotFoundError("Schedule", schedule_id)
    db.delete(schedule)
    db.commit()
    logger.info("Deleted schedule %s", schedule_id)


def _matches_requested_time(schedule: ClassSchedule, time: str) -> bool:
    if schedule.time == time:
        return True
    slot = schedule.time_slot
    return slot is not None and time in (slot.id, slot.start_time, slot.label)


def check_schedule_conflicts(db: Session, request: ConflictCheckRequest) -> ConflictCheckResponse:
    if not request.schedules:
        raise ScheduleValidationError("Valid schedules are required")

    conflicts: list[PreflightConflict] = []
    for item in request.schedules:
        if not item.day or not item.time:
            raise ScheduleValidationError("Each schedule must have a day and time")
        day = item.day.strip().capitalize()
        query = (
            select(ClassSchedule)
            .join(ClassSchedule.school_class)
            .options(selectinload(ClassSchedule.school_class))
            .where(ClassSchedule.day == day)
        )
        if request.class_id:
            query = query.where(ClassSchedule.class_id != request.class_id)
        same_time = [
            schedule for schedule in db.execute(query).scalars().unique()
            if _matches_requested_time(schedule, item.time)
        ]

        if item.room_id:
            clash = next((schedule for schedule in same_time if schedule.room_id == item.room_id), None)
            if clash is not None:
                conflicts.append(PreflightConflict(
                    type="room",
                    day=day,
                    time=item.time,
                    room=item.room_name or (clash.room.name if clash.room else "Unknown Room"),
                    room_id=item.room_id,
                    conflicting_class=clash.school_class.name,
                ))

        if request.teacher_id:
            clash = next(
                (schedule for schedule in same_time if schedule.school_class.teacher_id == request.teacher_id),
                None,
            )
            if clash is not None:
                conflicts.append(PreflightConflict(
                    type="teacher",
                    day=day,
                    time=item.time,
                    teacher_id=request.teacher_id,
                    conflicting_class=clash.school_class.name,
                ))

    return ConflictCheckResponse(has_conflicts=bool(conflicts), conflicts=conflicts)


def load_class_entities(db: Session) -> list[ClassEntity]:
    classes = db.execute(
        select(SchoolClass).options(selectinload(SchoolClass.schedules)).order_by(SchoolClass.name)
    ).scalars().all()
    return [ClassEntity.model_validate(cls) for cls in classes]

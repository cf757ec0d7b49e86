import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from classboard.api.deps import get_db
from classboard.models.room import Room
from classboard.models.school_class import ClassSchedule, SchoolClass
from classboard.models.teacher import Teacher
from classboard.models.time_slot import TimeSlot
from classboard.schemas.class_entity import ClassCreate, ClassEntity
from classboard.schemas.conflict import ConflictCheckRequest, ScheduleCheckItem
from classboard.schemas.schedule import ScheduleEntry, ScheduleWrite
from classboard.services.schedule_service import check_schedule_conflicts, create_schedule, load_class_entities

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=list[ClassEntity])
def list_classes(db: Session = Depends(get_db)) -> list[ClassEntity]:
    return load_class_entities(db)


@router.post("/", response_model=ClassEntity, status_code=status.HTTP_201_CREATED)
def create_class(payload: ClassCreate, db: Session = Depends(get_db)) -> ClassEntity:
    if payload.teacher_id and db.get(Teacher, payload.teacher_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid teacher ID")

    slots: dict[str, TimeSlot] = {}
    seen: set[tuple[str, str]] = set()
    for item in payload.schedules:
        slot = db.get(TimeSlot, item.time_slot_id)
        if slot is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid time slot ID")
        if item.room_id and db.get(Room, item.room_id) is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid room ID")
        key = (item.day, slot.id)
        if key in seen:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Duplicate schedule for {item.day} at {slot.label}",
            )
        seen.add(key)
        slots[slot.id] = slot

    if payload.schedules:
        report = check_schedule_conflicts(
            db,
            ConflictCheckRequest(
                schedules=[
                    ScheduleCheckItem(day=item.day, time=slots[item.time_slot_id].start_time, room_id=item.room_id)
                    for item in payload.schedules
                ],
                teacher_id=payload.teacher_id,
            ),
        )
        if report.has_conflicts:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={
                    "message": "Schedule conflicts detected",
                    "conflicts": [conflict.model_dump() for conflict in report.conflicts],
                },
            )

    school_class = SchoolClass(
        name=payload.name,
        subject=payload.subject,
        teacher_id=payload.teacher_id,
        capacity=payload.capacity,
    )
    school_class.schedules = [
        ClassSchedule(
            day=item.day,
            time=slots[item.time_slot_id].start_time,
            time_slot_id=item.time_slot_id,
            room_id=item.room_id,
        )
        for item in payload.schedules
    ]
    db.add(school_class)
    db.commit()
    db.refresh(school_class)
    logger.info("Created class %s with %d schedule(s)", school_class.name, len(payload.schedules))
    return ClassEntity.model_validate(school_class)


@router.get("/{class_id}", response_model=ClassEntity)
def get_class(class_id: str, db: Session = Depends(get_db)) -> ClassEntity:
    school_class = db.execute(
        select(SchoolClass).options(selectinload(SchoolClass.schedules)).where(SchoolClass.id == class_id)
    ).scalar_one_or_none()
    if school_class is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    return ClassEntity.model_validate(school_class)


@router.delete("/{class_id}")
def delete_class(class_id: str, db: Session = Depends(get_db)) -> dict:
    school_class = db.get(SchoolClass, class_id)
    if school_class is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    db.delete(school_class)
    db.commit()
    logger.info("Deleted class %s", class_id)
    return {"success": True}


@router.post("/{class_id}/schedules", response_model=ScheduleEntry, status_code=status.HTTP_201_CREATED)
def add_schedule(class_id: str, payload: ScheduleWrite, db: Session = Depends(get_db)) -> ScheduleEntry:
    return ScheduleEntry.model_validate(create_schedule(db, class_id, payload))

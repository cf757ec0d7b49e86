from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from classboard.api.deps import get_db
from classboard.core.config import get_settings
from classboard.models.room import Room
from classboard.models.teacher import Teacher
from classboard.models.time_slot import TimeSlot
from classboard.schemas.conflict import ConflictCheckRequest, ConflictCheckResponse, ConflictRecord
from classboard.schemas.room import RoomOut
from classboard.schemas.teacher import TeacherOut
from classboard.schemas.time_slot import TimeSlotOut
from classboard.services.conflict_service import ConflictService
from classboard.services.schedule_service import check_schedule_conflicts, load_class_entities

router = APIRouter()


@router.post("/schedule/conflicts", response_model=ConflictCheckResponse)
def check_conflicts(payload: ConflictCheckRequest, db: Session = Depends(get_db)) -> ConflictCheckResponse:
    return check_schedule_conflicts(db, payload)


@router.get("/conflicts", response_model=list[ConflictRecord])
def list_conflicts(db: Session = Depends(get_db)) -> list[ConflictRecord]:
    time_slots = db.execute(select(TimeSlot).order_by(TimeSlot.start_time)).scalars()
    rooms = db.execute(select(Room)).scalars()
    teachers = db.execute(select(Teacher)).scalars()
    service = ConflictService(
        load_class_entities(db),
        get_settings().scheduling_days,
        [TimeSlotOut.model_validate(slot) for slot in time_slots],
        rooms=[RoomOut.model_validate(room) for room in rooms],
        teachers=[TeacherOut.model_validate(teacher) for teacher in teachers],
    )
    return service.detect_conflicts()

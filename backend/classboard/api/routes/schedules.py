from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from classboard.api.deps import get_db
from classboard.models.school_class import ClassSchedule
from classboard.schemas.schedule import ScheduleEntry, ScheduleWrite
from classboard.services.schedule_service import delete_schedule, update_schedule

router = APIRouter()


@router.get("/", response_model=list[ScheduleEntry])
def list_schedules(class_id: str | None = None, db: Session = Depends(get_db)) -> list[ScheduleEntry]:
    query = select(ClassSchedule).order_by(ClassSchedule.day, ClassSchedule.time)
    if class_id:
        query = query.where(ClassSchedule.class_id == class_id)
    return list(db.execute(query).scalars().unique())


@router.put("/{schedule_id}", response_model=ScheduleEntry)
def edit_schedule(schedule_id: str, payload: ScheduleWrite, db: Session = Depends(get_db)) -> ScheduleEntry:
    return ScheduleEntry.model_validate(update_schedule(db, schedule_id, payload))


@router.delete("/{schedule_id}")
def remove_schedule(schedule_id: str, db: Session = Depends(get_db)) -> dict:
    delete_schedule(db, schedule_id)
    return {"success": True}

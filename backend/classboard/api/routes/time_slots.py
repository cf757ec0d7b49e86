from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from classboard.api.deps import get_db
from classboard.models.time_slot import TimeSlot
from classboard.schemas.time_slot import TimeSlotCreate, TimeSlotOut, parse_time_to_minutes

router = APIRouter()


@router.get("/", response_model=list[TimeSlotOut])
def list_time_slots(db: Session = Depends(get_db)) -> list[TimeSlotOut]:
    return list(db.execute(select(TimeSlot).order_by(TimeSlot.start_time)).scalars())


@router.post("/", response_model=TimeSlotOut, status_code=status.HTTP_201_CREATED)
def create_time_slot(payload: TimeSlotCreate, db: Session = Depends(get_db)) -> TimeSlotOut:
    existing = db.execute(
        select(TimeSlot).where(func.lower(TimeSlot.label) == payload.label.lower())
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A time slot with this label already exists")

    start = parse_time_to_minutes(payload.start_time)
    end = parse_time_to_minutes(payload.end_time)
    for slot in db.execute(select(TimeSlot)).scalars():
        # Touching boundaries are allowed.
        if start < parse_time_to_minutes(slot.end_time) and end > parse_time_to_minutes(slot.start_time):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Time slot overlaps with existing slot {slot.label}",
            )

    time_slot = TimeSlot(start_time=payload.start_time, end_time=payload.end_time, label=payload.label)
    db.add(time_slot)
    db.commit()
    db.refresh(time_slot)
    return time_slot


@router.delete("/{time_slot_id}")
def delete_time_slot(time_slot_id: str, db: Session = Depends(get_db)) -> dict:
    time_slot = db.get(TimeSlot, time_slot_id)
    if time_slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")
    db.delete(time_slot)
    db.commit()
    return {"success": True}

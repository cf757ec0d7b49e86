from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from classboard.schemas.room import RoomOut
from classboard.schemas.time_slot import TimeSlotOut

DAY_VALUES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def normalize_day(value: str) -> str:
    day = value.strip().capitalize()
    if day not in DAY_VALUES:
        raise ValueError("Day must be one of Monday to Saturday")
    return day


class ScheduleEntry(BaseModel):
    id: str
    class_id: str
    day: str
    time_slot_id: str | None = None
    time_slot: TimeSlotOut | None = None
    time: str | None = None
    room_id: str | None = None
    room: RoomOut | None = None

    model_config = {"from_attributes": True}


class ScheduleWrite(BaseModel):
    # Optional so a missing day/time slot surfaces as a 400 from the route, not a 422.
    day: str | None = None
    time_slot_id: str | None = None
    room_id: str | None = None

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return normalize_day(value)


class InitialSchedule(BaseModel):
    day: str
    time_slot_id: str = Field(min_length=1)
    room_id: str | None = None

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        return normalize_day(value)

from typing import Literal, Optional, List

from pydantic import BaseModel, Field


class ConflictRecord(BaseModel):
    id: str
    kind: Literal["teacher", "room"]
    message: str
    day: str
    time_slot_label: str
    entity_id: str
    class_names: List[str]


class ScheduleCheckItem(BaseModel):
    day: Optional[str] = None
    time: Optional[str] = None
    room_id: Optional[str] = None
    room_name: Optional[str] = None


class ConflictCheckRequest(BaseModel):
    schedules: List[ScheduleCheckItem] = Field(default_factory=list)
    class_id: Optional[str] = None
    teacher_id: Optional[str] = None


class PreflightConflict(BaseModel):
    type: Literal["teacher", "room"]
    day: str
    time: str
    room: Optional[str] = None
    room_id: Optional[str] = None
    teacher_id: Optional[str] = None
    conflicting_class: str


class ConflictCheckResponse(BaseModel):
    has_conflicts: bool
    conflicts: List[PreflightConflict]

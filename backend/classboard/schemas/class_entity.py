from pydantic import BaseModel, Field

from classboard.schemas.schedule import InitialSchedule, ScheduleEntry


class ClassEntity(BaseModel):
    id: str
    name: str
    subject: str
    teacher_id: str | None = None
    capacity: int | None = None
    schedules: list[ScheduleEntry] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @property
    def is_unassigned(self) -> bool:
        return not self.schedules


class ClassCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    subject: str = Field(min_length=1, max_length=200)
    teacher_id: str | None = None
    capacity: int = Field(default=30, ge=1, le=1000)
    schedules: list[InitialSchedule] = Field(default_factory=list, max_length=42)

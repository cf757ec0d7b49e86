from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class TimeSlotCreate(BaseModel):
    start_time: str
    end_time: str
    label: str | None = Field(default=None, max_length=100)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        value = value.strip()
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "TimeSlotCreate":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("End time must be after start time")
        if self.label is not None:
            self.label = self.label.strip() or None
        if self.label is None:
            self.label = f"{self.start_time} - {self.end_time}"
        return self


class TimeSlotOut(BaseModel):
    id: str
    start_time: str
    end_time: str
    label: str

    model_config = {"from_attributes": True}

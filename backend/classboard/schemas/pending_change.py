from enum import Enum

from pydantic import BaseModel


class ChangeType(str, Enum):
    create = "CREATE"
    update = "UPDATE"
    delete = "DELETE"


class PendingChange(BaseModel):
    type: ChangeType
    class_id: str
    class_name: str
    day: str | None = None
    time_slot_id: str | None = None
    time_slot_label: str | None = None
    room_id: str | None = None
    # Persisted schedule id; None for CREATE.
    schedule_id: str | None = None
    # Client-generated id of the optimistic entry a CREATE produced.
    temp_id: str | None = None
    original_day: str | None = None
    original_time_slot_id: str | None = None
    original_time_slot_label: str | None = None

    def describe(self) -> str:
        if self.type is ChangeType.delete:
            return f"Unassign {self.class_name} ({self.schedule_id or self.temp_id})"
        target = f"{self.day} at {self.time_slot_label or self.time_slot_id}"
        if self.type is ChangeType.update and self.original_day:
            origin = self.original_time_slot_label or self.original_time_slot_id
            return f"Move {self.class_name} from {self.original_day} at {origin} to {target}"
        return f"Schedule {self.class_name} on {target}"

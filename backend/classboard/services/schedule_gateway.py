from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

import httpx
from pydantic import TypeAdapter

from classboard.core.config import get_settings
from classboard.core.exceptions import (
    BackendError,
    ResourceNotFoundError,
    ScheduleConflictError,
    ScheduleValidationError,
)
from classboard.schemas.class_entity import ClassEntity
from classboard.schemas.conflict import ConflictCheckRequest, ConflictCheckResponse, ScheduleCheckItem
from classboard.schemas.room import RoomOut
from classboard.schemas.schedule import ScheduleEntry
from classboard.schemas.teacher import TeacherOut
from classboard.schemas.time_slot import TimeSlotOut

logger = logging.getLogger(__name__)


class ScheduleGateway(Protocol):
    def list_classes(self) -> list[ClassEntity]: ...

    def list_schedules(self) -> list[ScheduleEntry]: ...

    def list_rooms(self) -> list[RoomOut]: ...

    def list_time_slots(self) -> list[TimeSlotOut]: ...

    def list_teachers(self, include_workload: bool = False) -> list[TeacherOut]: ...

    def create_schedule(
        self, class_id: str, day: str | None, time_slot_id: str | None, room_id: str | None = None
    ) -> ScheduleEntry: ...

    def update_schedule(
        self, schedule_id: str, day: str | None, time_slot_id: str | None, room_id: str | None = None
    ) -> ScheduleEntry: ...

    def delete_schedule(self, schedule_id: str) -> None: ...

    def check_schedule_conflicts(
        self,
        schedules: Sequence[ScheduleCheckItem],
        teacher_id: str | None = None,
        class_id: str | None = None,
    ) -> ConflictCheckResponse: ...


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message") or body.get("error")
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return str(detail)
    return response.reason_phrase


class HttpScheduleGateway:
    """REST client for the schedule endpoints.

    Maps HTTP failures onto the application error taxonomy so callers
    never handle raw status codes.
    """

    def __init__(self, client: httpx.Client | None = None, *, api_prefix: str | None = None):
        settings = get_settings()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=settings.backend_base_url,
            timeout=settings.http_timeout_seconds,
        )
        self._prefix = (api_prefix if api_prefix is not None else settings.api_prefix).rstrip("/")

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpScheduleGateway":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        resource: tuple[str, str] | None = None,
        **kwargs: Any,
    ) -> Any:
        url = f"{self._prefix}{path}"
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Request %s %s failed: %s", method, url, exc)
            raise BackendError(f"Could not reach the schedule service: {exc}") from exc

        if response.is_success:
            if response.status_code == 204 or not response.content:
                return None
            return response.json()

        message = _error_message(response)
        status_code = response.status_code
        if status_code == 404:
            resource_type, resource_id = resource or ("Resource", url)
            raise ResourceNotFoundError(resource_type, resource_id)
        if status_code in (400, 422):
            raise ScheduleValidationError(message, details={"status_code": status_code})
        if status_code == 409:
            raise ScheduleConflictError(message)
        raise BackendError(message, status_code=status_code)

    def list_classes(self) -> list[ClassEntity]:
        return TypeAdapter(list[ClassEntity]).validate_python(self._request("GET", "/classes/"))

    def list_schedules(self) -> list[ScheduleEntry]:
        return TypeAdapter(list[ScheduleEntry]).validate_python(self._request("GET", "/schedules/"))

    def list_rooms(self) -> list[RoomOut]:
        return TypeAdapter(list[RoomOut]).validate_python(self._request("GET", "/rooms/"))

    def list_time_slots(self) -> list[TimeSlotOut]:
        return TypeAdapter(list[TimeSlotOut]).validate_python(self._request("GET", "/timeslots/"))

    def list_teachers(self, include_workload: bool = False) -> list[TeacherOut]:
        data = self._request(
            "GET",
            "/teachers/",
            params={"include_workload": "true" if include_workload else "false"},
        )
        return TypeAdapter(list[TeacherOut]).validate_python(data)

    def create_schedule(
        self, class_id: str, day: str | None, time_slot_id: str | None, room_id: str | None = None
    ) -> ScheduleEntry:
        if not day or not time_slot_id:
            raise ScheduleValidationError("Day and time_slot_id are required")
        data = self._request(
            "POST",
            f"/classes/{class_id}/schedules",
            resource=("Class", class_id),
            json={"day": day, "time_slot_id": time_slot_id, "room_id": room_id},
        )
        return ScheduleEntry.model_validate(data)

    def update_schedule(
        self, schedule_id: str, day: str | None, time_slot_id: str | None, room_id: str | None = None
    ) -> ScheduleEntry:
        data = self._request(
            "PUT",
            f"/schedules/{schedule_id}",
            resource=("Schedule", schedule_id),
            json={"day": day, "time_slot_id": time_slot_id, "room_id": room_id},
        )
        return ScheduleEntry.model_validate(data)

    def delete_schedule(self, schedule_id: str) -> None:
        self._request("DELETE", f"/schedules/{schedule_id}", resource=("Schedule", schedule_id))

    def check_schedule_conflicts(
        self,
        schedules: Sequence[ScheduleCheckItem],
        teacher_id: str | None = None,
        class_id: str | None = None,
    ) -> ConflictCheckResponse:
        payload = ConflictCheckRequest(schedules=list(schedules), teacher_id=teacher_id, class_id=class_id)
        data = self._request("POST", "/schedule/conflicts", json=payload.model_dump())
        return ConflictCheckResponse.model_validate(data)

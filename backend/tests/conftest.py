import os

# Point the app at an in-memory database before anything builds the engine.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from classboard.api.deps import get_db
from classboard.db.base import Base
from classboard.main import app
from classboard.services.commit_orchestrator import CommitOrchestrator
from classboard.services.grid_controller import GridController
from classboard.services.schedule_gateway import HttpScheduleGateway

import classboard.models  # noqa: F401


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def gateway(client):
    return HttpScheduleGateway(client)


@pytest.fixture()
def orchestrator(gateway):
    return CommitOrchestrator(gateway)


@pytest.fixture()
def controller(timetable, orchestrator):
    controller = GridController()
    orchestrator.refresh(controller)
    return controller


def create_time_slot(client, start: str, end: str, label: str | None = None) -> dict:
    payload = {"start_time": start, "end_time": end}
    if label is not None:
        payload["label"] = label
    response = client.post("/api/timeslots/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def create_room(client, name: str) -> dict:
    response = client.post("/api/rooms/", json={"name": name, "capacity": 30})
    assert response.status_code == 201, response.text
    return response.json()


def create_teacher(client, name: str, email: str) -> dict:
    response = client.post("/api/teachers/", json={"name": name, "email": email, "department": "Mathematics"})
    assert response.status_code == 201, response.text
    return response.json()


def create_class(client, name: str, teacher_id: str | None = None, schedules: list[dict] | None = None) -> dict:
    response = client.post(
        "/api/classes/",
        json={"name": name, "subject": "Mathematics", "teacher_id": teacher_id, "schedules": schedules or []},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture()
def timetable(client):
    """Two slots, two rooms, one teacher; Geometry scheduled Tuesday 10:00, Algebra I unassigned."""
    first = create_time_slot(client, "09:00", "10:00", "Period 1")
    second = create_time_slot(client, "10:00", "11:00", "Period 2")
    room_a = create_room(client, "R1")
    room_b = create_room(client, "R2")
    teacher = create_teacher(client, "Ada Lovelace", "ada@example.com")
    geometry = create_class(
        client,
        "Geometry",
        teacher_id=teacher["id"],
        schedules=[{"day": "Tuesday", "time_slot_id": second["id"], "room_id": room_b["id"]}],
    )
    algebra = create_class(client, "Algebra I", teacher_id=teacher["id"])
    return {
        "slots": [first, second],
        "rooms": [room_a, room_b],
        "teacher": teacher,
        "geometry": geometry,
        "algebra": algebra,
    }

import pytest
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.pool import StaticPool

from classboard.db import bootstrap


def _raise_error(message: str):
    raise RuntimeError(message)


def test_runtime_schema_bootstrap_raises_on_validation_failure(monkeypatch):
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: None)
    monkeypatch.setattr(bootstrap, "_ensure_schedule_time_column", lambda engine: None)
    monkeypatch.setattr(bootstrap, "_backfill_schedule_times", lambda engine: None)
    monkeypatch.setattr(
        bootstrap,
        "_assert_required_columns",
        lambda engine: _raise_error("missing required schema"),
    )

    with pytest.raises(RuntimeError, match="Runtime schema compatibility bootstrap failed"):
        bootstrap.ensure_runtime_schema_compatibility()


def test_bootstrap_adds_and_backfills_legacy_time_column():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.begin() as connection:
        connection.execute(text(
            "CREATE TABLE time_slots (id VARCHAR(36) PRIMARY KEY, start_time VARCHAR(5) NOT NULL, "
            "end_time VARCHAR(5) NOT NULL, label VARCHAR(100) NOT NULL, created_at DATETIME, updated_at DATETIME)"
        ))
        connection.execute(text(
            "CREATE TABLE class_schedules (id VARCHAR(36) PRIMARY KEY, class_id VARCHAR(36) NOT NULL, "
            "day VARCHAR(20) NOT NULL, time_slot_id VARCHAR(36), room_id VARCHAR(36), "
            "created_at DATETIME, updated_at DATETIME)"
        ))
        connection.execute(text("INSERT INTO time_slots (id, start_time, end_time, label) VALUES ('p1', '09:00', '10:00', 'Period 1')"))
        connection.execute(text("INSERT INTO class_schedules (id, class_id, day, time_slot_id) VALUES ('s1', 'c1', 'Monday', 'p1')"))

    bootstrap.ensure_runtime_schema_compatibility(engine)

    columns = {item["name"] for item in inspect(engine).get_columns("class_schedules")}
    assert "time" in columns
    with engine.connect() as connection:
        assert connection.execute(text("SELECT time FROM class_schedules WHERE id = 's1'")).scalar_one() == "09:00"

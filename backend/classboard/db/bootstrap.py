from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from classboard.core.config import get_settings
from classboard.db.base import Base
from classboard.db.session import engine as default_engine
import classboard.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "users": {"id", "name", "email", "role"},
    "teachers": {"id", "user_id", "department"},
    "time_slots": {"id", "start_time", "end_time", "label"},
    "rooms": {"id", "name", "capacity"},
    "classes": {"id", "name", "subject", "teacher_id", "capacity"},
    "class_schedules": {"id", "class_id", "day", "time", "time_slot_id", "room_id"},
}


def _ensure_schedule_time_column(engine: Engine) -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "class_schedules" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("class_schedules")}
        if "time" in column_names:
            return
        connection.execute(text("ALTER TABLE class_schedules ADD COLUMN time VARCHAR(50)"))
        logger.info("Added legacy class_schedules.time column")


def _backfill_schedule_times(engine: Engine) -> None:
    with engine.begin() as connection:
        result = connection.execute(
            text(
                "UPDATE class_schedules "
                "SET time = (SELECT start_time FROM time_slots WHERE time_slots.id = class_schedules.time_slot_id) "
                "WHERE time IS NULL AND time_slot_id IS NOT NULL"
            )
        )
        if result.rowcount:
            logger.info("Backfilled time on %d schedule row(s)", result.rowcount)


def _assert_required_columns(engine: Engine) -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        missing_tables = [name for name in REQUIRED_COLUMNS if name not in table_names]
        if missing_tables:
            raise RuntimeError(f"Missing required tables: {', '.join(sorted(missing_tables))}")

        missing_columns: list[str] = []
        for table_name, required in REQUIRED_COLUMNS.items():
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            for column_name in sorted(required - existing):
                missing_columns.append(f"{table_name}.{column_name}")
        if missing_columns:
            raise RuntimeError(f"Missing required columns: {', '.join(missing_columns)}")


def ensure_runtime_schema_compatibility(engine: Engine | None = None) -> None:
    engine = engine or default_engine
    try:
        if get_settings().auto_create_schema:
            Base.metadata.create_all(bind=engine)
        _ensure_schedule_time_column(engine)
        _backfill_schedule_times(engine)
        _assert_required_columns(engine)
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc

from functools import lru_cache
import json
from typing import Annotated
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"

DEFAULT_SCHEDULING_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def _split_list(value: str | list[str]) -> list[str]:
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith("["):
            try:
                parsed = json.loads(stripped)
                if isinstance(parsed, list):
                    return [str(item).strip() for item in parsed if str(item).strip()]
            except json.JSONDecodeError:
                pass
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class Settings(BaseSettings):
    # Resolve to backend/.env so `uvicorn --app-dir backend` works from any cwd.
    model_config = SettingsConfigDict(env_file=str(BACKEND_ENV_FILE), env_file_encoding="utf-8")

    project_name: str = "Classboard API"
    api_prefix: str = "/api"

    database_url: str = "sqlite+pysqlite:///./classboard.db"
    auto_create_schema: bool = True

    log_level: str = "INFO"
    max_request_size_bytes: int = 1_000_000

    scheduling_days: Annotated[list[str], NoDecode] = DEFAULT_SCHEDULING_DAYS
    temp_schedule_prefix: str = "temp-"

    backend_base_url: str = "http://localhost:8000"
    http_timeout_seconds: float = 10.0

    teacher_max_weekly_hours: int = 20
    teacher_max_classes: int = 5

    cors_origins: Annotated[list[str], NoDecode] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("cors_origins", "scheduling_days", mode="before")
    @classmethod
    def split_list_values(cls, value: str | list[str]) -> list[str]:
        return _split_list(value)

    @field_validator("scheduling_days")
    @classmethod
    def validate_scheduling_days(cls, value: list[str]) -> list[str]:
        unknown = [day for day in value if day not in DEFAULT_SCHEDULING_DAYS]
        if unknown:
            raise ValueError(f"Unsupported scheduling day(s): {', '.join(unknown)}")
        if len(set(value)) != len(value):
            raise ValueError("Scheduling days must be unique")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()

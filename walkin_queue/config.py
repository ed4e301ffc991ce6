# walkin_queue/config.py

"""Application configuration and settings management."""

import json
from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="QUEUE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Walk-in Queue API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./queue.db"
    sqlite_busy_timeout_seconds: float = Field(default=30.0, ge=0.0)

    timezone: str = Field(
        default="America/New_York",
        description="Reference timezone used to compute day-keys.",
    )
    default_daily_limit: int = Field(default=50, ge=1)
    minutes_per_customer: int = Field(
        default=15,
        ge=1,
        description="Flat wait estimate per waiting customer (not the service duration).",
    )
    default_retention_days: int = Field(default=30, ge=0)

    secret_key: str = "change-me-later"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=24 * 60, ge=1)
    admin_username: str = "admin"
    admin_password: str = "password123"

    seed_services: bool = True
    sms_sender: str = "QueueMe"

    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=("http://localhost:3000",),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse a string tuple from a comma-separated or JSON array value."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            return tuple(item.strip() for item in value.split(",") if item.strip())
        return tuple()


@lru_cache
def get_settings() -> Settings:
    return Settings()

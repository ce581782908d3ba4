"""Application configuration."""

import os
from uuid import UUID
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_PROFILE_ID = UUID("00000000-0000-0000-0000-000000000001")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    profile_id: UUID = DEFAULT_PROFILE_ID
    timezone: str = "UTC"
    weekly_cache_ttl_seconds: int = 3600
    reject_non_positive_goals: bool = False
    daily_water_goal_ml: float | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_timezone(name: str | None) -> ZoneInfo:
    """Return a ZoneInfo for the configured name, falling back to UTC."""
    cleaned = (name or "").strip()
    if not cleaned:
        return ZoneInfo("UTC")
    return ZoneInfo(cleaned)

"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./neighborly.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to compute calendar days for activity grouping",
    )
    refresh_debounce_ms: int = Field(
        default=300,
        description="Delay used to coalesce bursts of refresh events",
        ge=0,
    )
    notification_poll_seconds: float = Field(
        default=30,
        description="Polling interval for notification consumers",
        gt=0,
    )
    activity_poll_seconds: float = Field(
        default=60,
        description="Polling interval for activity feed consumers",
        gt=0,
    )
    activity_feed_limit: int = Field(
        default=20,
        description="Default number of activities returned by the feed",
        gt=0,
    )
    notification_list_limit: int = Field(
        default=50,
        description="Maximum number of notifications returned per listing",
        gt=0,
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Origins allowed to call the API from a browser",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]

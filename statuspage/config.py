from functools import lru_cache
from typing import ClassVar

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # SQLite database (empty string means not configured)
    db_path: str = ""

    app_name: str = "Status"
    app_timezone: str = "UTC"

    # Number of days shown on the incident timeline, anchor day included
    app_incident_days: int = 7

    # Bearer token for authenticated callers (empty = nobody is authenticated)
    api_token: str = ""

    # Badge colour overrides (empty = built-in default for the category)
    style_reds: str = ""
    style_blues: str = ""
    style_greens: str = ""
    style_yellows: str = ""

    # Timed-action rollover job interval (0 = scheduler disabled)
    action_rollover_seconds: int = 0

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Lazily load and cache settings. Fails at first call, not at import time."""
    return Settings()

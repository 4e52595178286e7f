"""Client configuration using pydantic-settings."""
from functools import lru_cache
from pathlib import Path
from urllib.parse import urlparse

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Task API - the server exposes everything under /api
    api_url: str = Field(
        default="http://localhost:8080",
        validation_alias="TASKBOARD_API_URL",
    )
    api_timeout: float = Field(default=30.0, validation_alias="TASKBOARD_API_TIMEOUT")

    # Durable key-value storage mirroring the session (token + user profile)
    session_file: Path = Field(
        default=Path.home() / ".taskboard" / "session.json",
        validation_alias="TASKBOARD_SESSION_FILE",
    )

    # Notices disappear on their own after this many seconds
    notice_ttl_seconds: float = Field(default=5.0, validation_alias="TASKBOARD_NOTICE_TTL")

    log_level: str = Field(default="WARNING", validation_alias="TASKBOARD_LOG_LEVEL")

    @model_validator(mode="after")
    def validate_api_settings(self) -> "Settings":
        """Reject API URLs that httpx cannot reach and non-positive timeouts."""
        scheme = urlparse(self.api_url).scheme.lower()
        if scheme not in {"http", "https"}:
            raise ValueError(
                f"TASKBOARD_API_URL must be an http(s) URL, got '{self.api_url}'",
            )
        if self.api_timeout <= 0:
            raise ValueError("TASKBOARD_API_TIMEOUT must be greater than zero")
        return self

    @property
    def api_base_url(self) -> str:
        """Base URL for task API requests (paths are relative to /api)."""
        return self.api_url.rstrip("/") + "/api"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Application settings and configuration.

Settings are loaded from environment variables (or an `.env` file) with
defaults suitable for a single-device installation backed by SQLite.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed settings for the sync engine."""

    # Local persistence
    database_url: str = Field(default="sqlite:///./exam_sync.db", alias="EXAM_SYNC_DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="EXAM_SYNC_SQL_DEBUG")

    # Remote submission endpoint
    api_url: str = Field(default="http://localhost:3000", alias="EXAM_SYNC_API_URL")
    http_timeout_seconds: float = Field(default=10.0, alias="EXAM_SYNC_HTTP_TIMEOUT_SECONDS")
    access_token: str | None = Field(default=None, alias="EXAM_SYNC_ACCESS_TOKEN")

    # Retry pacing
    backoff_base_ms: int = Field(default=5000, alias="EXAM_SYNC_BACKOFF_BASE_MS")

    log_level: str = Field(default="INFO", alias="EXAM_SYNC_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )


settings = Settings()

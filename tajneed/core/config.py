"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # Database
    DATABASE_URL: str

    # Logging
    LOG_LEVEL: str = "INFO"

    # External directory (Tajneed) fetches
    DIRECTORY_FETCH_TIMEOUT_SECONDS: float = 120.0

    # Max per-item errors written to the log at ERROR level per sync run;
    # the rest are still returned in the sync result.
    SYNC_ERROR_LOG_LIMIT: int = 50

    # Recurring sync schedules (cron expressions, scheduler local time)
    MEMBER_SYNC_SCHEDULE: str = "0 2 * * *"  # Daily at 2 AM
    JAMAAT_SYNC_SCHEDULE: str = "0 3 * * *"  # Daily at 3 AM


settings = Settings()

"""Configuration for the temporary schedule core.

All settings can be overridden via TEMP_SCHED_* environment variables or a .env file.
"""

from datetime import timedelta
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENV_FILE: Path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    """Settings for default windows, advisories and logging.

    Attributes:
        PAST_START_GRACE_MINUTES: How far in the past a start may be before the advisory shows
        DEFAULT_START_WEEKDAY: ISO weekday (1=Mon, 7=Sun) a new temporary schedule starts on
        DEFAULT_DURATION_DAYS: Length of the default window
        LOG_LEVEL: Level used by the example runner
    """

    PAST_START_GRACE_MINUTES: int = 60
    DEFAULT_START_WEEKDAY: int = 7
    DEFAULT_DURATION_DAYS: int = 7
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TEMP_SCHED_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
    )

    @property
    def past_start_grace(self) -> timedelta:
        return timedelta(minutes=self.PAST_START_GRACE_MINUTES)

    @property
    def default_duration(self) -> timedelta:
        return timedelta(days=self.DEFAULT_DURATION_DAYS)


settings: Settings = Settings()

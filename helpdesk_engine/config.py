"""
Helpdesk Engine Configuration

Settings are read from the environment (prefix HELPDESK_) or a .env file.
Window lengths and the custom-range granularity thresholds live here so the
presets stay fixed per deployment rather than per request.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SUPPORTED_LOCALES = ("fr", "en")


class Settings(BaseSettings):
    """Engine settings with production defaults"""

    model_config = SettingsConfigDict(
        env_prefix="HELPDESK_",
        env_file=".env",
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Helpdesk Engine"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")

    # Calendar
    TIMEZONE: str = Field(
        default="Europe/Paris",
        description="IANA zone used for day/week/month boundaries"
    )
    LOCALE: str = Field(
        default="fr",
        description="Locale for first weekday and period labels"
    )

    # Preset windows
    DAY_WINDOW_DAYS: int = 7
    WEEK_WINDOW_WEEKS: int = 4
    MONTH_WINDOW_MONTHS: int = 12

    # Custom range granularity thresholds (inclusive, in calendar days)
    DAILY_MAX_SPAN_DAYS: int = 31
    WEEKLY_MAX_SPAN_DAYS: int = 120

    # Notification feed
    NOTIFICATION_STORE_CACHE_SIZE: int = Field(
        default=1024, ge=1,
        description="Per-user stores kept in memory by the API"
    )

    @field_validator("LOCALE")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        normalized = v.lower().split("-")[0].split("_")[0]
        if normalized not in SUPPORTED_LOCALES:
            raise ValueError(
                f"Unsupported locale {v!r}. Use one of {SUPPORTED_LOCALES}."
            )
        return normalized

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Configure root logging for the service process."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

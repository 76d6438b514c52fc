"""Configuration management for encodable.

All configuration values can be overridden via environment variables or .env file.

Environment Variables:
    ENCODABLE_PREFIX_SEPARATOR: String placed between a declaration prefix and
                                the exposed name (default: "_")
    ENCODABLE_DATETIME_ISOFORMAT: Render date/time values with isoformat()
                                  (default: true)
    ENCODABLE_LOG_LEVEL: Logging level (default: INFO)
    ENCODABLE_DEBUG: Enable debug mode (default: false)
"""

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class Settings(BaseSettings):
    """Settings for encodable.

    All configuration values can be set via environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ENCODABLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Declarations
    prefix_separator: str = "_"

    # Serializer
    datetime_isoformat: bool = True

    # Logging configuration
    log_level: str = "INFO"
    debug: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize the log level to an upper-case logging level name."""
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    def get_log_level(self) -> int:
        """Get the numeric logging level, forced to DEBUG in debug mode."""
        if self.debug:
            return logging.DEBUG
        return logging.getLevelName(self.log_level)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging from settings."""
    settings = settings or get_settings()
    logging.basicConfig(level=settings.get_log_level())

"""
Configuration management for the Folder Organizer.

Uses pydantic-settings to load configuration from environment variables
and .env files. Every default reproduces the organizer's fixed behaviour,
so a bare environment needs no configuration at all.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Logging
    log_level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Organizer behaviour
    move_folders: bool = True

    # Move policy timing
    max_retries: int = Field(default=3, ge=1)
    retry_delay_ms: int = Field(default=1000, ge=0)
    move_delay_ms: int = Field(default=500, ge=0)

    # Worker Configuration
    pass_queue_size: int = Field(default=16, ge=1)
    event_buffer_size: int = Field(default=256, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="ORGANIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, value):
        """Accept loguru level names in any case."""
        return value.upper() if isinstance(value, str) else value

    @property
    def retry_delay(self) -> float:
        """Retry delay in seconds."""
        return self.retry_delay_ms / 1000.0

    @property
    def move_delay(self) -> float:
        """Pre-move delay in seconds."""
        return self.move_delay_ms / 1000.0


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

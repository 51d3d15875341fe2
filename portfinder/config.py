"""Configuration for portfinder using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import (
    DEFAULT_DELAY_MS,
    DEFAULT_END_PORT,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_RETRIES,
    DEFAULT_START_PORT,
)


class Settings(BaseSettings):
    """Settings loaded from PORTFINDER_* environment variables."""

    # ==================== Range ====================
    start_port: int = DEFAULT_START_PORT
    end_port: int = DEFAULT_END_PORT

    # ==================== Retry ====================
    retries: int = DEFAULT_RETRIES
    delay_ms: float = DEFAULT_DELAY_MS

    # ==================== Probing ====================
    # None binds the wildcard address
    host: Optional[str] = None
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    strict: bool = False

    # ==================== Logging ====================
    log_level: str = "WARNING"

    # Handle empty strings for optional string fields
    @field_validator("host", mode="before")
    @classmethod
    def parse_optional_str(cls, v):
        if v == "":
            return None
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper()

    model_config = SettingsConfigDict(
        env_prefix="PORTFINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

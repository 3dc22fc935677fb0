"""
Configuration settings for the miaaula report engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MIAAULA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".miaaula" / "data",
        description="Directory holding one JSON file per key-value store key",
    )
    export_dir: Path = Field(
        default=Path.home() / ".miaaula" / "exports",
        description="Default destination for exported report files",
    )
    reports_key: str = Field(
        default="revApp_attempt_reports_v1",
        description="Store key for the attempt report history",
    )
    invalid_items_key: str = Field(
        default="revApp_invalid_items_v1",
        description="Store key for the invalid item audit log",
    )
    report_capacity: int = Field(
        default=200,
        ge=1,
        description="Maximum number of attempt reports kept (newest first)",
    )

    # ========================================
    # Sessions
    # ========================================
    default_lesson_id: str = Field(
        default="GERAL",
        description="Lesson id used when a session is not bound to a lesson",
    )
    locale: str = Field(
        default="pt-BR",
        description="Preferred locale for localized diagnosis text",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

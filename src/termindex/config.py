"""Centralized configuration for termindex using Pydantic Settings."""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class Settings(BaseSettings):
    """Typed configuration loaded from ``TERMINDEX_*`` environment variables.

    Only the CLI reads settings; library classes take explicit arguments.
    """

    model_config = SettingsConfigDict(
        env_prefix="TERMINDEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    index_dir: Path = Field(default=Path("./index"), description="Directory holding indexFile.properties")

    # Analysis
    stopwords: str = Field(
        default="",
        description="Comma-separated stopword list overriding the built-in one (empty keeps the default)",
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=False, description="Emit structured JSON logs")
    logger_levels: dict[str, str] = Field(
        default_factory=dict,
        description="Per-logger level overrides (JSON object mapping logger name to level)",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in _LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}"
            raise ValueError(msg)
        return normalized

    @field_validator("logger_levels")
    @classmethod
    def _check_logger_levels(cls, value: dict[str, str]) -> dict[str, str]:
        normalized = {name: level.strip().lower() for name, level in value.items()}
        unknown = sorted(level for level in normalized.values() if level not in _LOG_LEVELS)
        if unknown:
            msg = f"logger_levels values must be one of {', '.join(_LOG_LEVELS)}, got {', '.join(unknown)}"
            raise ValueError(msg)
        return normalized

    def get_stopwords(self) -> list[str] | None:
        """Return the configured stopwords, or None to use the built-in list."""
        words = [word.strip() for word in self.stopwords.split(",") if word.strip()]
        return words or None

    def get_log_level(self) -> int:
        return getattr(logging, self.log_level.upper())

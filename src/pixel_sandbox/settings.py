"""Application settings loaded from .env via pydantic-settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class SandboxSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PIXEL_SANDBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    config_path: Optional[Path] = Field(
        default=None, description="Session file used when a command gets no explicit config"
    )
    log_level: str = Field(default="INFO", description="Logging level used by the CLI")

    @field_validator("config_path", mode="before")
    @classmethod
    def _expand_config_path(cls, value: Optional[str]) -> Optional[Path]:
        if value in (None, ""):
            return None
        return Path(value).expanduser().resolve()

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level


_settings: Optional[SandboxSettings] = None


def get_settings() -> SandboxSettings:
    global _settings
    if _settings is None:
        _settings = SandboxSettings()
        if _settings.config_path is not None and not _settings.config_path.exists():
            logger.warning("Configured session file does not exist: %s", _settings.config_path)
    return _settings


def default_config_path() -> Optional[Path]:
    return get_settings().config_path


def reset_settings_cache() -> None:
    global _settings
    _settings = None

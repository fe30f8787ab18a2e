"""
Configuration management.

Settings are loaded from environment variables (and an optional ``.env``
file) with pydantic-settings. They are only read by the composition root;
the client facade itself takes explicit arguments.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageType(str, Enum):
    """Token storage scope: persistent or process-lifetime session."""

    LOCAL = "localStorage"
    SESSION = "session"


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    format: str = Field(default="json", description="json or console")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of {valid_levels}")
        return v

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError("Invalid log format. Must be 'json' or 'console'")
        return v

    model_config = SettingsConfigDict(env_prefix="LOG_")


class ClientSettings(BaseSettings):
    """HTTP client defaults for the application's shared facade."""

    base_url: str = Field(default="", description="Base URL for all requests")
    timeout: float = Field(default=7.0, gt=0, description="Request timeout in seconds")
    storage_path: Path = Field(
        default=Path.home() / ".fetchkit" / "storage.json",
        description="File backing the persistent token storage",
    )
    token_storage_key: str = Field(default="accessToken")
    token_storage_type: StorageType = Field(default=StorageType.LOCAL)
    raise_for_status: bool = Field(
        default=True, description="Raise httpx.HTTPStatusError on non-2xx responses"
    )

    @field_validator("base_url")
    @classmethod
    def strip_base_url(cls, v: str) -> str:
        return v.strip()

    model_config = SettingsConfigDict(
        env_prefix="FETCHKIT_", env_file=".env", extra="ignore"
    )


@lru_cache
def get_settings() -> ClientSettings:
    return ClientSettings()

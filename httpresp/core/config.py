"""Centralized response writer configuration."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Writer settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HTTPRESP_", env_file=".env", extra="ignore"
    )

    # Default CORS toggle for writers created without an explicit value
    cors_enabled: bool = False

    # Body streaming
    copy_chunk_size: int = Field(default=64 * 1024, gt=0)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()

"""Tests for writer configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from httpresp.core.config import Settings, get_settings


class TestSettings:
    """Test Settings class."""

    def test_default_values(self) -> None:
        """Test that defaults are sensible."""
        settings = Settings()
        assert settings.cors_enabled is False
        assert settings.copy_chunk_size == 64 * 1024

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that env vars override defaults."""
        monkeypatch.setenv("HTTPRESP_CORS_ENABLED", "true")
        monkeypatch.setenv("HTTPRESP_COPY_CHUNK_SIZE", "1024")

        get_settings.cache_clear()

        settings = get_settings()
        assert settings.cors_enabled is True
        assert settings.copy_chunk_size == 1024

        get_settings.cache_clear()

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that HTTPRESP_ prefix is required."""
        monkeypatch.setenv("CORS_ENABLED", "true")

        get_settings.cache_clear()

        settings = get_settings()
        assert settings.cors_enabled is False

        get_settings.cache_clear()

    def test_chunk_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(copy_chunk_size=0)

    def test_cached_singleton(self) -> None:
        assert get_settings() is get_settings()

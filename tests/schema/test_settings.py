"""Tests for settings loaded from environment variables."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from pydantic import ValidationError

from config.settings import Settings, get_settings
from models.schemas import EvaluationOptions


@pytest.fixture
def fresh_settings() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self) -> None:
        """Test: Settings default to the documented values."""
        settings = Settings()
        assert settings.decisions_dir == "decisions"
        assert settings.keep_decisions_in_memory is False
        assert settings.max_execution_time_ms == 30000
        assert settings.include_trace is False
        assert settings.log_level == "WARNING"

    def test_reads_environment(
        self, monkeypatch: pytest.MonkeyPatch, fresh_settings: None
    ) -> None:
        """Test: Environment variables override the defaults."""
        monkeypatch.setenv("DECISIONS_DIR", "/srv/decisions")
        monkeypatch.setenv("KEEP_DECISIONS_IN_MEMORY", "true")
        monkeypatch.setenv("MAX_EXECUTION_TIME_MS", "250")
        monkeypatch.setenv("INCLUDE_TRACE", "1")

        settings = get_settings()

        assert settings.decisions_dir == "/srv/decisions"
        assert settings.keep_decisions_in_memory is True
        assert settings.max_execution_time_ms == 250
        assert settings.include_trace is True

    def test_settings_are_cached(self, fresh_settings: None) -> None:
        """Test: get_settings returns the same instance until cleared."""
        assert get_settings() is get_settings()

    def test_rejects_non_positive_deadline(self) -> None:
        """Test: The deadline must be positive."""
        with pytest.raises(ValidationError):
            Settings(max_execution_time_ms=0)

    def test_options_from_settings(self) -> None:
        """Test: Evaluation options take their defaults from settings."""
        settings = Settings(include_trace=True, include_performance=True, max_execution_time_ms=99)
        options = EvaluationOptions.from_settings(settings)
        assert options.include_trace is True
        assert options.include_performance is True
        assert options.max_execution_time_ms == 99

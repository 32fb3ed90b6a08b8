"""Unit tests for Settings class and get_settings function."""

from collections.abc import Generator
from pathlib import Path

import pytest
from pydantic import ValidationError

from herald.config import get_settings, reload_settings
from herald.config.models import StreamConfig
from herald.config.settings import Settings, set_toml_config


@pytest.fixture(autouse=True)
def empty_toml_config() -> Generator[None, None, None]:
    set_toml_config({})
    yield
    set_toml_config({})


class TestSettings:
    """Tests for Settings model."""

    def test_default_values(self) -> None:
        """Settings has sensible defaults."""
        settings = Settings()
        assert settings.app_name == "herald"
        assert settings.debug is False

    def test_stream_defaults(self) -> None:
        """Stream configuration has defaults."""
        settings = Settings()
        assert settings.stream.flush_interval_ms == 50
        assert settings.stream.frame_prefix == "data: "
        assert settings.stream.read_timeout is None

    def test_observability_defaults(self) -> None:
        """Observability configuration has defaults."""
        settings = Settings()
        assert settings.observability.logging.level == "INFO"
        assert settings.observability.logging.format == "json"
        assert settings.observability.logging.redact_pii is True


class TestStreamConfig:
    """Tests for StreamConfig."""

    def test_flush_interval_in_seconds(self) -> None:
        """Should expose the flush interval in seconds."""
        assert StreamConfig(flush_interval_ms=20).flush_interval == pytest.approx(0.02)

    def test_rejects_non_positive_interval(self) -> None:
        """Should reject a zero flush interval."""
        with pytest.raises(ValidationError):
            StreamConfig(flush_interval_ms=0)

    def test_rejects_empty_frame_prefix(self) -> None:
        """Should reject an empty frame prefix."""
        with pytest.raises(ValidationError):
            StreamConfig(frame_prefix="")


class TestGetSettings:
    """Tests for get_settings function."""

    def test_returns_settings_instance(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """get_settings returns a Settings instance built from TOML."""
        mock_toml_files({"default.toml": "app_name = 'test'"})
        monkeypatch.setenv("HERALD_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("HERALD_ENV", "nonexistent")

        settings = get_settings()
        assert isinstance(settings, Settings)
        assert settings.app_name == "test"

    def test_settings_cached(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """get_settings returns cached instance."""
        mock_toml_files({"default.toml": "app_name = 'cached'"})
        monkeypatch.setenv("HERALD_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("HERALD_ENV", "nonexistent")

        assert get_settings() is get_settings()

    def test_reload_settings_clears_cache(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """reload_settings returns fresh instance."""
        mock_toml_files({"default.toml": "app_name = 'original'"})
        monkeypatch.setenv("HERALD_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("HERALD_ENV", "nonexistent")
        assert get_settings().app_name == "original"

        mock_toml_files({"default.toml": "app_name = 'updated'"})
        assert reload_settings().app_name == "updated"

    def test_nested_toml_section(
        self, test_config_dir: Path, mock_toml_files, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Nested TOML tables populate nested models."""
        mock_toml_files({
            "default.toml": "[stream]\nflush_interval_ms = 16\nframe_prefix = 'event: '",
        })
        monkeypatch.setenv("HERALD_CONFIG_DIR", str(test_config_dir))
        monkeypatch.setenv("HERALD_ENV", "nonexistent")

        settings = get_settings()
        assert settings.stream.flush_interval_ms == 16
        assert settings.stream.frame_prefix == "event: "


class TestEnvironmentVariableOverrides:
    """Tests for environment variable configuration overrides."""

    def test_top_level_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """HERALD_DEBUG overrides debug."""
        monkeypatch.setenv("HERALD_DEBUG", "true")
        assert Settings().debug is True

    def test_nested_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Double underscore reaches nested fields."""
        monkeypatch.setenv("HERALD_STREAM__FLUSH_INTERVAL_MS", "25")
        monkeypatch.setenv("HERALD_OBSERVABILITY__LOGGING__LEVEL", "DEBUG")

        settings = Settings()
        assert settings.stream.flush_interval_ms == 25
        assert settings.observability.logging.level == "DEBUG"

    def test_env_takes_priority_over_toml(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables beat TOML values."""
        set_toml_config({"debug": False, "app_name": "from-toml"})
        monkeypatch.setenv("HERALD_DEBUG", "true")

        settings = Settings()
        assert settings.debug is True
        assert settings.app_name == "from-toml"

"""Shared test fixtures for the Herald test suite."""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from herald.conversation.dispatchers import InMemoryDispatcher
from herald.conversation.models import TurnRef
from herald.interpreter.clock import ManualScheduler


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test.

    This ensures test isolation for configuration tests.
    """
    from herald.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def turn_ref() -> TurnRef:
    return TurnRef(session_id="session-1", message_id="msg-1")


@pytest.fixture
def dispatcher(turn_ref: TurnRef) -> InMemoryDispatcher:
    """Dispatcher holding an empty placeholder message for ``turn_ref``."""
    sink = InMemoryDispatcher()
    sink.add_message(turn_ref)
    return sink


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler(start=1000.0)

"""TOML configuration loader with deep merge support."""

import os
import tomllib
from pathlib import Path
from typing import Any

from herald.errors import ConfigurationError


def get_config_dir() -> Path:
    """Get the configuration directory path.

    The config directory can be overridden with HERALD_CONFIG_DIR env var.
    Defaults to 'config/' relative to the project root.
    """
    config_dir_env = os.environ.get("HERALD_CONFIG_DIR")
    if config_dir_env:
        path = Path(config_dir_env)
        if not path.exists():
            raise ConfigurationError(f"Config directory not found: {config_dir_env}")
        return path

    # Look for config/ in current directory or parent directories
    current = Path.cwd()
    for _ in range(5):
        config_path = current / "config"
        if config_path.exists():
            return config_path
        current = current.parent

    return Path("config")


def get_environment() -> str:
    """Get the current environment from HERALD_ENV.

    Defaults to 'development' if not set.
    """
    return os.environ.get("HERALD_ENV", "development")


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary.

    Raises:
        ConfigurationError: If the file doesn't exist or is not valid TOML
    """
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file not found: {file_path}")

    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {file_path}: {e}") from e


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    For nested dictionaries, values are merged recursively.
    For other values, override replaces base.
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config() -> dict[str, Any]:
    """Load configuration from TOML files.

    Loading order:
    1. config/default.toml (optional, model defaults apply when absent)
    2. config/{HERALD_ENV}.toml (optional)

    Returns:
        Merged configuration dictionary
    """
    config_dir = get_config_dir()
    env = get_environment()

    config: dict[str, Any] = {}
    default_path = config_dir / "default.toml"
    if default_path.exists():
        config = load_toml(default_path)

    env_path = config_dir / f"{env}.toml"
    if env_path.exists():
        config = deep_merge(config, load_toml(env_path))

    return config

"""TOML configuration files for the messaging client.

A client library is embedded in someone else's application, so files are
looked up in exactly one directory: the one the caller passes, else
MIAW_CONFIG_DIR, else ./config. Every file is optional.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

DEFAULT_FILE = "default.toml"


def get_config_dir(config_dir: str | Path | None = None) -> Path:
    """Resolve the configuration directory.

    Args:
        config_dir: Explicit directory, takes precedence over MIAW_CONFIG_DIR

    Raises:
        FileNotFoundError: If an explicitly requested directory is missing
    """
    requested = config_dir or os.environ.get("MIAW_CONFIG_DIR")
    if requested:
        path = Path(requested)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {requested}")
        return path

    return Path.cwd() / "config"


def get_environment() -> str:
    """Get the current environment from MIAW_ENV, 'development' if unset."""
    return os.environ.get("MIAW_ENV", "development")


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base; nested tables merge recursively."""
    result = base.copy()

    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config(
    config_dir: str | Path | None = None,
    env: str | None = None,
) -> dict[str, Any]:
    """Read default.toml and {env}.toml from the config directory.

    Args:
        config_dir: Directory to read, see get_config_dir
        env: Environment file to overlay, MIAW_ENV if omitted

    Returns:
        Merged configuration, empty when neither file exists
    """
    directory = get_config_dir(config_dir)
    layers = [DEFAULT_FILE, f"{env or get_environment()}.toml"]

    config: dict[str, Any] = {}
    for name in dict.fromkeys(layers):
        path = directory / name
        if path.is_file():
            config = deep_merge(config, load_toml(path))

    return config

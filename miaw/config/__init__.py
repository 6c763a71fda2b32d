"""Configuration loading for the messaging client.

Configuration is loaded from optional TOML files with MIAW_* environment
variable overrides.

Usage:
    from miaw.config import get_settings

    settings = get_settings()
    client = MessagingClient.from_settings(settings)
"""

from functools import lru_cache

from pydantic import ValidationError

from miaw.config.loader import load_config
from miaw.config.settings import LoggingConfig, MessagingSettings, set_toml_config
from miaw.transport.exceptions import ConfigurationError


@lru_cache(maxsize=1)
def get_settings(config_dir: str | None = None) -> MessagingSettings:
    """Get the cached settings instance.

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.

    Args:
        config_dir: Directory holding the TOML files, see load_config

    Raises:
        ConfigurationError: If a required value is missing or invalid
    """
    set_toml_config(load_config(config_dir))

    try:
        return MessagingSettings()  # type: ignore[call-arg]
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Invalid messaging configuration: {', '.join(missing)}",
            parameter=missing[0] if missing else None,
        ) from e


def reload_settings() -> MessagingSettings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["LoggingConfig", "MessagingSettings", "get_settings", "reload_settings"]

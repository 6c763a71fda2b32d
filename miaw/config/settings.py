"""Root settings model for client configuration."""

from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Module-level variable to store TOML config for settings source
_toml_config: dict[str, Any] = {}


def set_toml_config(config: dict[str, Any]) -> None:
    """Set the TOML configuration to be used by MessagingSettings."""
    global _toml_config
    _toml_config = config


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that reads from TOML configuration."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = _toml_config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return _toml_config.copy()


class LoggingConfig(BaseModel):
    """Logging output configuration."""

    level: LogLevel = Field(default="INFO", description="Minimum log level")
    format: Literal["json", "console"] = Field(default="json", description="Renderer")
    redact_pii: bool = Field(default=True, description="Mask tokens and PII in logs")


class MessagingSettings(BaseSettings):
    """Connection and logging configuration for MessagingClient.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml and config/{MIAW_ENV}.toml
    3. MIAW_* environment variables
    4. Constructor arguments
    """

    model_config = SettingsConfigDict(
        env_prefix="MIAW_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: str = Field(..., min_length=1, description="Messaging API base URL")
    org_id: str = Field(..., min_length=1, description="Salesforce organization id")
    developer_name: str = Field(
        ..., min_length=1, description="Embedded service deployment developer name"
    )
    request_timeout: float | None = Field(
        default=30.0, gt=0, description="Per-request deadline in seconds, None to disable"
    )
    stream_connect_timeout: float | None = Field(
        default=10.0, gt=0, description="Event stream connect deadline in seconds"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Constructor args win over MIAW_* env vars, which win over TOML."""
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )

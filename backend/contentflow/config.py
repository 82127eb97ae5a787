"""Configuration management with YAML and environment variable support."""

from pathlib import Path
from typing import ClassVar, Optional

import yaml
from pydantic import BaseModel, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads configuration from YAML file."""

    def get_field_value(self, field, field_name: str):
        # Not used with prepare method
        pass

    def prepare_field_value(self, field_name: str, field, value, value_is_complex: bool):
        return value

    def __call__(self):
        yaml_path = Path("config.yaml")
        if not yaml_path.exists():
            return {}

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return data


class StorageConfig(BaseModel):
    """Job store database configuration."""

    database_url: str = "sqlite+aiosqlite:///./contentflow.db"


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 4000


class WebhookConfig(BaseModel):
    """Webhook admission and transition policy.

    secret is optional. When it is unset every webhook call is admitted,
    which matches the behaviour of the upstream deployment; the API logs a
    warning at startup in that case.
    """

    secret: Optional[str] = None
    strict_transitions: bool = False

    @field_validator("secret", mode="before")
    @classmethod
    def blank_secret_is_unset(cls, v):
        """Treat an empty string (e.g. ``CONTENTFLOW_WEBHOOK__SECRET=``) as no secret."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class LoggingConfig(BaseModel):
    """Logging configuration for the API and CLI entry points."""

    level: str = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


class Settings(BaseSettings):
    """Main application settings with YAML and environment variable support.

    Configuration sources (in priority order):
    1. Environment variables (prefix: CONTENTFLOW_, delimiter: __)
    2. .env file
    3. YAML file (config.yaml)
    4. Field defaults
    """

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="CONTENTFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    storage: StorageConfig = StorageConfig()
    server: ServerConfig = ServerConfig()
    webhook: WebhookConfig = WebhookConfig()
    logging: LoggingConfig = LoggingConfig()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ):
        """Customize settings sources to include YAML configuration.

        Priority order (highest to lowest):
        1. Environment variables
        2. .env file
        3. YAML file
        4. Init settings (programmatic defaults)
        """
        return (
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            init_settings,
        )


# Singleton instance
settings = Settings()

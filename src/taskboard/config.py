"""Configuration for the taskboard service.

Settings are read from environment variables without a prefix so the
service keeps the variable names it has always used (TASKS_FILE, PORT,
ALLOWED_ORIGIN, APP_ENV, ...).

Settings Loading Priority (highest to lowest):
    1. Constructor arguments
    2. Environment variables
    3. .env file (/etc/taskboard/.env when APP_ENV=production, ./.env otherwise)
    4. Default values

Settings Management:
    settings = load_settings()      # fresh instance, dotenv picked by APP_ENV
    set_settings(settings)          # install as process-wide instance
    settings = get_settings()       # process-wide instance (loaded lazily)
"""

import os
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

from taskboard.settings_mixins import (
    DEFAULT_CORS_ORIGINS,
    DEFAULT_TASKS_FILE,
    LoggingSettingsMixin,
    ServerSettingsMixin,
    StorageSettingsMixin,
)

__all__ = [
    "Settings",
    "DEFAULT_CORS_ORIGINS",
    "DEFAULT_TASKS_FILE",
    "PRODUCTION_ENV_FILE",
    "get_settings",
    "set_settings",
    "load_settings",
    "reload_settings",
    "resolve_env_file",
]

PRODUCTION_ENV_FILE = Path("/etc/taskboard/.env")
DEVELOPMENT_ENV_FILE = Path(".env")


class Settings(StorageSettingsMixin, ServerSettingsMixin, LoggingSettingsMixin, PydanticBaseSettings):
    """Settings for the taskboard service.

    Mixins provide organized settings:
    - StorageSettingsMixin: Snapshot file location and write policy
    - ServerSettingsMixin: Listener address, environment and CORS
    - LoggingSettingsMixin: Log level and format
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def resolve_env_file(app_env: str | None = None) -> Path:
    """Pick the dotenv file for the given environment name.

    Args:
        app_env: Environment name; defaults to the APP_ENV variable.

    Returns:
        Path of the dotenv file to read (it may not exist).
    """
    if app_env is None:
        app_env = os.environ.get("APP_ENV", "")
    if app_env.lower() == "production":
        return PRODUCTION_ENV_FILE
    return DEVELOPMENT_ENV_FILE


def load_settings(env_file: Path | None = None, **overrides: Any) -> Settings:
    """Build a Settings instance from the environment and dotenv file.

    Args:
        env_file: Dotenv file to read. Chosen by resolve_env_file() if None.
        **overrides: Explicit field values, taking precedence over everything.

    Returns:
        Fresh Settings instance.
    """
    if env_file is None:
        env_file = resolve_env_file()
    return Settings(_env_file=env_file, **overrides)


# Global settings instance holder
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first access."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = load_settings()
    return _settings_instance


def set_settings(settings: Settings) -> None:
    """Set the process-wide settings instance.

    Args:
        settings: Settings instance to use globally
    """
    global _settings_instance
    _settings_instance = settings


def reload_settings() -> Settings:
    """Discard the cached instance and load settings again.

    Returns:
        Fresh Settings instance
    """
    global _settings_instance
    _settings_instance = None
    return get_settings()

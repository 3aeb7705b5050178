"""Settings mixins for storage, HTTP server and logging configuration.

StorageSettingsMixin: Where and how the task snapshot is written.
ServerSettingsMixin: Listening address and CORS allow-list.
LoggingSettingsMixin: Log verbosity and output format.

These are composed into Settings in config.py.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator

DEFAULT_TASKS_FILE = "tasks.json"

DEFAULT_CORS_ORIGINS = [
    "https://todo.lucidiusss.lol",
    "http://todo.lucidiusss.lol",
    "http://localhost:5173",
]


class StorageSettingsMixin:
    """Settings for the task snapshot file.

    Should be composed with BaseSettings via multiple inheritance.
    """

    tasks_file: Path = Field(
        default=Path(DEFAULT_TASKS_FILE),
        title="Tasks File",
        description="JSON file holding the persisted task collection",
    )
    atomic_writes: bool = Field(
        default=False,
        title="Atomic Writes",
        description="Write snapshots to a temp file and rename instead of overwriting in place",
    )
    strict_persistence: bool = Field(
        default=False,
        title="Strict Persistence",
        description="Report failed saves to the caller instead of only logging them",
    )

    @field_validator("tasks_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path | None) -> Path:
        """Expand ~ in paths; an empty value falls back to the default file."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return Path(DEFAULT_TASKS_FILE)
        if isinstance(v, str):
            return Path(v).expanduser()
        return v.expanduser()


class ServerSettingsMixin:
    """Settings for the HTTP listener and CORS policy."""

    app_env: str = Field(
        default="development",
        title="Environment",
        description="Deployment environment; 'production' reads /etc/taskboard/.env",
    )
    host: str = Field(
        default="0.0.0.0",
        title="Host",
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        title="Port",
        description="TCP port the HTTP server listens on",
    )
    allowed_origin: str | None = Field(
        default=None,
        title="Allowed Origin",
        description="Extra CORS origin, usually the deployed frontend",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),
        title="CORS Origins",
        description="Origins always allowed by the CORS policy",
    )

    @property
    def allowed_origins(self) -> list[str]:
        """allowed_origin followed by cors_origins, without duplicates."""
        origins: list[str] = []
        if self.allowed_origin:
            origins.append(self.allowed_origin)
        for origin in self.cors_origins:
            if origin and origin not in origins:
                origins.append(origin)
        return origins


class LoggingSettingsMixin:
    """Settings for log output.

    Note: This is a mixin, not a BaseSettings subclass, to avoid
    MRO issues when composed with other settings classes.
    """

    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        title="Log Level",
        description="Logging verbosity level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        title="Log Format",
        description="Log output format (console for dev, json for production)",
    )

    @field_validator("log_level", "log_format", mode="before")
    @classmethod
    def lowercase(cls, v: str) -> str:
        return v.lower() if isinstance(v, str) else v

"""Shared test fixtures and utilities for taskboard tests.

Provides:
- MockContext for isolating tests from global settings
- Temporary workspace and snapshot file fixtures
- Store and HTTP client fixtures
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from taskboard.api import create_app
from taskboard.config import Settings, reload_settings, set_settings
from taskboard.tasks import TaskStore

# Environment variables read by Settings; cleared so the host shell cannot leak in
SETTINGS_ENV_VARS = [
    "TASKS_FILE",
    "ATOMIC_WRITES",
    "STRICT_PERSISTENCE",
    "APP_ENV",
    "HOST",
    "PORT",
    "ALLOWED_ORIGIN",
    "CORS_ORIGINS",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


class MockContext:
    """Context manager for isolating tests from global state.

    Handles:
    - Providing a temporary workspace with a snapshot file path
    - Installing matching settings as the process-wide instance
    - Resetting global settings afterwards

    Usage:
        with MockContext() as ctx:
            settings = ctx.settings
            tasks_file = ctx.tasks_file
    """

    def __init__(self, **settings_kwargs):
        self._settings_kwargs = settings_kwargs
        self._temp_dir: tempfile.TemporaryDirectory | None = None
        self._settings: Settings | None = None

    def __enter__(self) -> "MockContext":
        self._temp_dir = tempfile.TemporaryDirectory()
        kwargs = {"tasks_file": self.workspace_dir / "tasks.json", **self._settings_kwargs}
        self._settings = Settings(_env_file=None, **kwargs)
        set_settings(self._settings)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        reload_settings()
        if self._temp_dir:
            self._temp_dir.cleanup()

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            raise RuntimeError("MockContext not entered")
        return self._settings

    @property
    def workspace_dir(self) -> Path:
        if self._temp_dir is None:
            raise RuntimeError("MockContext not entered")
        return Path(self._temp_dir.name)

    @property
    def tasks_file(self) -> Path:
        return self.settings.tasks_file


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove settings-related environment variables for every test."""
    for var in SETTINGS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def mock_context() -> Generator[MockContext, None, None]:
    """Fixture providing an isolated settings context."""
    with MockContext() as ctx:
        yield ctx


@pytest.fixture
def tasks_file(tmp_path: Path) -> Path:
    """Snapshot file path inside a temporary directory (not created)."""
    return tmp_path / "tasks.json"


@pytest.fixture
def store(tasks_file: Path) -> TaskStore:
    """Fresh, loaded store backed by a temporary snapshot file."""
    store = TaskStore(tasks_file)
    store.load()
    return store


@pytest.fixture
def unwritable_path(tmp_path: Path) -> Path:
    """A snapshot path whose parent is a regular file, so saves always fail."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    return blocker / "tasks.json"


@pytest.fixture
def client(mock_context: MockContext) -> Generator[TestClient, None, None]:
    """HTTP client for an app serving a store in the mock workspace."""
    with TestClient(create_app(mock_context.settings)) as test_client:
        yield test_client

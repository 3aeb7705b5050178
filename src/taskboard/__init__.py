"""taskboard - a small task-management HTTP service.

Tasks are kept in memory by a thread-safe TaskStore and written to a
JSON file after every change. The HTTP layer is a FastAPI application
built by ``taskboard.api.create_app``.
"""

__version__ = "0.1.0"

from taskboard.config import Settings, get_settings, load_settings, reload_settings, set_settings
from taskboard.tasks import Task, TaskStore

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "load_settings",
    "reload_settings",
    "set_settings",
    "Task",
    "TaskStore",
]

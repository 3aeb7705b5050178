"""Task storage for the taskboard service.

Provides the Task entity, the thread-safe TaskStore and the JSON
snapshot codec it persists through.

Example:
    >>> store = TaskStore(Path("tasks.json"))
    >>> store.load()
    >>> task = store.create("buy milk")
    >>> store.toggle(task.id)
"""

from taskboard.tasks.codec import load_tasks, save_tasks
from taskboard.tasks.errors import (
    DecodeError,
    DuplicateTitleError,
    EmptyTitleError,
    EncodeError,
    NotPersistedError,
    PersistenceError,
    StorageIOError,
    TaskboardError,
    TaskNotFoundError,
    TaskValidationError,
)
from taskboard.tasks.models import Task
from taskboard.tasks.store import TaskStore

__all__ = [
    "Task",
    "TaskStore",
    "load_tasks",
    "save_tasks",
    "TaskboardError",
    "TaskValidationError",
    "EmptyTitleError",
    "DuplicateTitleError",
    "TaskNotFoundError",
    "PersistenceError",
    "StorageIOError",
    "EncodeError",
    "DecodeError",
    "NotPersistedError",
]

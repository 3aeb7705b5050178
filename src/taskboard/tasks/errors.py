"""Errors raised by the task store and the snapshot codec."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from taskboard.tasks.models import Task


class TaskboardError(Exception):
    """Base class for all taskboard errors."""


class TaskValidationError(TaskboardError):
    """A title was rejected before any mutation took place."""


class EmptyTitleError(TaskValidationError):
    def __init__(self) -> None:
        super().__init__("Title cannot be empty")


class DuplicateTitleError(TaskValidationError):
    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__("Task already exists")


class TaskNotFoundError(TaskboardError):
    """No task with the given id exists."""

    def __init__(self, task_id: int) -> None:
        self.task_id = task_id
        super().__init__(f"task with id {task_id} not found")


class PersistenceError(TaskboardError):
    """Reading or writing the snapshot file failed."""


class StorageIOError(PersistenceError):
    """The snapshot file could not be created, read or written."""


class EncodeError(PersistenceError):
    """The task collection could not be serialized."""


class DecodeError(PersistenceError):
    """The snapshot file is not a valid task collection."""


class NotPersistedError(PersistenceError):
    """A mutation was applied in memory but its snapshot was not saved.

    Only raised by stores running with strict persistence. The applied
    result is available as ``task``.
    """

    def __init__(self, operation: str, task: "Task", cause: PersistenceError) -> None:
        self.operation = operation
        self.task = task
        self.cause = cause
        super().__init__(f"{operation} of task {task.id} was not persisted: {cause}")

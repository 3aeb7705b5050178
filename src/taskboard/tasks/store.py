"""Thread-safe, file-backed task store.

Tasks live in memory in insertion order. Every mutation rewrites the
whole collection to a JSON snapshot file before it returns, while still
holding the write lock, so snapshots on disk follow the exact order in
which mutations were applied.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from taskboard.logging import Loggers
from taskboard.tasks.codec import load_tasks, save_tasks
from taskboard.tasks.errors import (
    DuplicateTitleError,
    EmptyTitleError,
    NotPersistedError,
    PersistenceError,
    TaskNotFoundError,
)
from taskboard.tasks.locks import ReadWriteLock
from taskboard.tasks.models import Task

if TYPE_CHECKING:
    from taskboard.config import Settings

logger = Loggers.store()


class TaskStore:
    """Persistent task store.

    Ids are assigned from a counter that only grows, so an id is never
    handed out twice, even after its task was deleted. Titles are unique
    among stored tasks. Callers always receive copies of tasks.

    A failed save is logged and the in-memory change is kept. With
    ``strict_persistence`` the failure is also raised as
    NotPersistedError, carrying the applied result.

    Example:
        >>> store = TaskStore(Path("tasks.json"))
        >>> store.load()
        >>> task = store.create("buy milk")
        >>> store.toggle(task.id).completed
        True
    """

    def __init__(
        self,
        path: Path | str,
        *,
        atomic_writes: bool = False,
        strict_persistence: bool = False,
    ) -> None:
        self._path = Path(path)
        self._atomic_writes = atomic_writes
        self._strict_persistence = strict_persistence
        self._lock = ReadWriteLock()
        self._tasks: list[Task] = []
        self._last_id = 0

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TaskStore":
        return cls(
            settings.tasks_file,
            atomic_writes=settings.atomic_writes,
            strict_persistence=settings.strict_persistence,
        )

    @property
    def path(self) -> Path:
        return self._path

    @property
    def last_id(self) -> int:
        """Highest id assigned so far (0 for a fresh, empty store)."""
        with self._lock.read_locked():
            return self._last_id

    def load(self) -> None:
        """Replace the collection with the snapshot on disk.

        A missing file gives an empty store. The id counter restarts from
        the highest loaded id.

        Raises:
            DecodeError: If the snapshot is malformed.
            StorageIOError: If the snapshot cannot be read.
        """
        tasks = load_tasks(self._path)
        with self._lock.write_locked():
            self._tasks = tasks
            self._last_id = max((task.id for task in tasks), default=0)
            last_id = self._last_id
        logger.info("tasks_loaded", path=str(self._path), count=len(tasks), last_id=last_id)

    def list_tasks(self) -> list[Task]:
        """Return copies of all tasks in insertion order."""
        with self._lock.read_locked():
            return [task.copy() for task in self._tasks]

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._tasks)

    def get(self, task_id: int) -> Task:
        """Get a copy of a task by id.

        Raises:
            TaskNotFoundError: If no task has this id.
        """
        with self._lock.read_locked():
            return self._tasks[self._index_of(task_id)].copy()

    def create(self, title: str) -> Task:
        """Create a new, not yet completed task.

        Args:
            title: Non-empty title not used by any stored task.

        Returns:
            The created task.

        Raises:
            EmptyTitleError: If the title is empty.
            DuplicateTitleError: If another task already has this title.
        """
        with self._lock.write_locked():
            self._check_title(title)
            self._last_id += 1
            task = Task(id=self._last_id, title=title)
            self._tasks.append(task)
            result = task.copy()
            self._persist("create", result)
        logger.debug("task_created", task_id=result.id)
        return result

    def delete(self, task_id: int) -> Task:
        """Delete a task, keeping the order of the remaining ones.

        Returns:
            The removed task.

        Raises:
            TaskNotFoundError: If no task has this id.
        """
        with self._lock.write_locked():
            removed = self._tasks.pop(self._index_of(task_id))
            self._persist("delete", removed)
        logger.debug("task_deleted", task_id=task_id)
        return removed

    def rename(self, task_id: int, title: str) -> Task:
        """Replace the title of a task.

        The title is validated before anything changes, so a rejected
        rename leaves the task untouched.

        Returns:
            The updated task.

        Raises:
            EmptyTitleError: If the title is empty.
            DuplicateTitleError: If any stored task already has this title.
            TaskNotFoundError: If no task has this id.
        """
        with self._lock.write_locked():
            self._check_title(title)
            task = self._tasks[self._index_of(task_id)]
            task.title = title
            result = task.copy()
            self._persist("rename", result)
        logger.debug("task_renamed", task_id=task_id)
        return result

    def toggle(self, task_id: int) -> Task:
        """Flip the completed flag of a task.

        Returns:
            The updated task.

        Raises:
            TaskNotFoundError: If no task has this id.
        """
        with self._lock.write_locked():
            task = self._tasks[self._index_of(task_id)]
            task.completed = not task.completed
            result = task.copy()
            self._persist("toggle", result)
        logger.debug("task_toggled", task_id=task_id, completed=result.completed)
        return result

    # Callers must hold the lock for everything below.

    def _index_of(self, task_id: int) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise TaskNotFoundError(task_id)

    def _check_title(self, title: str) -> None:
        if not title:
            raise EmptyTitleError()
        if any(task.title == title for task in self._tasks):
            raise DuplicateTitleError(title)

    def _persist(self, operation: str, result: Task) -> None:
        try:
            save_tasks(self._path, self._tasks, atomic=self._atomic_writes)
        except PersistenceError as e:
            logger.warning(
                "save_failed",
                operation=operation,
                task_id=result.id,
                path=str(self._path),
                error=str(e),
            )
            if self._strict_persistence:
                raise NotPersistedError(operation, result, e) from e

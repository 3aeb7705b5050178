"""Snapshot codec for the task collection.

The whole collection is stored as a single JSON array::

    [
      {"id": 1, "title": "buy milk", "completed": false, "createdAt": "2024-01-01T00:00:00Z"}
    ]

Every save rewrites the file from scratch. A missing or blank file loads
as an empty collection.
"""

import json
from pathlib import Path
from typing import Iterable

from taskboard.logging import Loggers
from taskboard.persistence import atomic_write_bytes, write_bytes
from taskboard.tasks.errors import DecodeError, EncodeError, StorageIOError
from taskboard.tasks.models import Task

logger = Loggers.persistence()


def encode_tasks(tasks: Iterable[Task]) -> bytes:
    """Serialize tasks to the UTF-8 snapshot bytes.

    Raises:
        EncodeError: If a task cannot be represented as JSON.
    """
    try:
        text = json.dumps([task.to_dict() for task in tasks], indent=2, ensure_ascii=False)
        # Lone surrogates only fail here, before any file is opened
        return (text + "\n").encode("utf-8")
    except (TypeError, ValueError, AttributeError) as e:
        raise EncodeError(f"failed to encode tasks: {e}") from e


def decode_tasks(text: str) -> list[Task]:
    """Parse snapshot JSON text into tasks.

    Blank text and the JSON literal ``null`` decode to an empty list.

    Raises:
        DecodeError: If the text is not a JSON array of task objects.
    """
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"invalid JSON: {e}") from e
    if data is None:
        return []
    if not isinstance(data, list):
        raise DecodeError(f"expected a JSON array of tasks, got {type(data).__name__}")
    return [Task.from_dict(item) for item in data]


def save_tasks(path: Path, tasks: Iterable[Task], *, atomic: bool = False) -> None:
    """Write the full task collection to ``path``, replacing previous content.

    Args:
        path: Snapshot file.
        tasks: Complete task collection, in order.
        atomic: Write a temp file and rename it over ``path`` instead of
            overwriting in place.

    Raises:
        EncodeError: If serialization fails. The file is left untouched.
        StorageIOError: If the file cannot be created or written.
    """
    content = encode_tasks(tasks)
    try:
        if atomic:
            atomic_write_bytes(path, content)
        else:
            write_bytes(path, content)
    except OSError as e:
        raise StorageIOError(f"failed to save to file {path}: {e}") from e


def load_tasks(path: Path) -> list[Task]:
    """Read the task collection from ``path``.

    Returns:
        Tasks in file order; an empty list if the file does not exist.

    Raises:
        StorageIOError: If the file exists but cannot be read.
        DecodeError: If the content is not a valid task collection.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("snapshot_missing", path=str(path))
        return []
    except UnicodeDecodeError as e:
        raise DecodeError(f"{path} is not UTF-8 text: {e}") from e
    except OSError as e:
        raise StorageIOError(f"failed to read {path}: {e}") from e
    return decode_tasks(text)

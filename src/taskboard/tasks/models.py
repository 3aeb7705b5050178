"""Task entity and its JSON representation."""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from taskboard.tasks.errors import DecodeError

_RFC3339_RE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt ](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?(?P<offset>[Zz]|[+-]\d{2}:\d{2})$",
    re.ASCII,
)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as an RFC 3339 UTC string with a ``Z`` suffix.

    Naive datetimes are taken to be UTC already. The fraction is omitted
    for whole seconds and printed with microsecond precision otherwise.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    if value.microsecond:
        return value.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC datetime.

    Accepts any number of fractional digits (truncated to microseconds)
    and either ``Z`` or a numeric offset.

    Raises:
        ValueError: If ``text`` is not an RFC 3339 timestamp.
    """
    match = _RFC3339_RE.match(text)
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp: {text!r}")
    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    offset = match.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"
    parsed = datetime.fromisoformat(
        f"{match.group('date')}T{match.group('time')}.{fraction}{offset}"
    )
    return parsed.astimezone(timezone.utc)


@dataclass
class Task:
    """A single task entry."""

    id: int
    title: str
    completed: bool = False
    created_at: datetime = field(default_factory=utc_now)

    def copy(self) -> "Task":
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Task":
        """Build a Task from its decoded JSON object.

        Raises:
            DecodeError: If a field is missing or has the wrong JSON type.
        """
        if not isinstance(data, dict):
            raise DecodeError(f"task entry must be an object, got {type(data).__name__}")

        task_id = data.get("id")
        if not isinstance(task_id, int) or isinstance(task_id, bool):
            raise DecodeError(f"task id must be an integer, got {task_id!r}")

        title = data.get("title")
        if not isinstance(title, str):
            raise DecodeError(f"task {task_id}: title must be a string")

        completed = data.get("completed")
        if not isinstance(completed, bool):
            raise DecodeError(f"task {task_id}: completed must be a boolean")

        created_at = data.get("createdAt")
        if not isinstance(created_at, str):
            raise DecodeError(f"task {task_id}: createdAt must be a timestamp string")
        try:
            parsed = parse_timestamp(created_at)
        except ValueError as e:
            raise DecodeError(f"task {task_id}: {e}") from e

        return cls(id=task_id, title=title, completed=completed, created_at=parsed)

"""File helpers used to persist task snapshots."""

from taskboard.persistence._utils import atomic_write_bytes, write_bytes

__all__ = ["atomic_write_bytes", "write_bytes"]

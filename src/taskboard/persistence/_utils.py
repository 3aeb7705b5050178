"""Shared persistence utilities."""

from pathlib import Path


def write_bytes(path: Path, content: bytes) -> None:
    """Write bytes to a file, truncating any previous content in place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(content)


def atomic_write_bytes(path: Path, content: bytes) -> None:
    """Write bytes to a file atomically.

    Writes to a temporary file first, then renames to the target path.
    This prevents data corruption if the process crashes mid-write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_bytes(content)
    tmp_path.replace(path)

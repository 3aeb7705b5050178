"""Tests for the task snapshot codec."""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from taskboard.tasks import DecodeError, EncodeError, StorageIOError, Task, load_tasks, save_tasks
from taskboard.tasks.codec import decode_tasks, encode_tasks


def _sample_tasks() -> list[Task]:
    return [
        Task(id=1, title="buy milk", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
        Task(
            id=4,
            title="walk the dog",
            completed=True,
            created_at=datetime(2024, 2, 3, 4, 5, 6, 789000, tzinfo=timezone.utc),
        ),
    ]


class TestSaveTasks:
    """Tests for writing snapshots."""

    def test_wire_format(self, tasks_file: Path):
        save_tasks(tasks_file, _sample_tasks())

        data = json.loads(tasks_file.read_text())
        assert data == [
            {"id": 1, "title": "buy milk", "completed": False, "createdAt": "2024-01-01T00:00:00Z"},
            {
                "id": 4,
                "title": "walk the dog",
                "completed": True,
                "createdAt": "2024-02-03T04:05:06.789000Z",
            },
        ]

    def test_empty_collection_is_empty_array(self, tasks_file: Path):
        save_tasks(tasks_file, [])
        assert json.loads(tasks_file.read_text()) == []

    def test_overwrites_previous_content(self, tasks_file: Path):
        tasks_file.write_text("x" * 10_000)
        save_tasks(tasks_file, _sample_tasks()[:1])
        assert len(json.loads(tasks_file.read_text())) == 1

    def test_creates_parent_directories(self, tmp_path: Path):
        path = tmp_path / "nested" / "dir" / "tasks.json"
        save_tasks(path, _sample_tasks())
        assert path.exists()

    def test_atomic_write_leaves_no_temp_file(self, tasks_file: Path):
        save_tasks(tasks_file, _sample_tasks(), atomic=True)

        assert len(load_tasks(tasks_file)) == 2
        assert list(tasks_file.parent.iterdir()) == [tasks_file]

    def test_unwritable_path_raises_io_error(self, unwritable_path: Path):
        with pytest.raises(StorageIOError):
            save_tasks(unwritable_path, _sample_tasks())

    def test_unserializable_task_raises_encode_error(self, tasks_file: Path):
        bad = Task(id=1, title="x", created_at="not a datetime")  # type: ignore[arg-type]
        with pytest.raises(EncodeError):
            save_tasks(tasks_file, [bad])
        assert not tasks_file.exists()

    def test_unencodable_title_leaves_file_untouched(self, tasks_file: Path):
        save_tasks(tasks_file, _sample_tasks())
        before = tasks_file.read_bytes()

        with pytest.raises(EncodeError):
            save_tasks(tasks_file, [Task(id=1, title="\ud800")])

        assert tasks_file.read_bytes() == before

    def test_unencodable_title_atomic_leaves_no_temp_file(self, tasks_file: Path):
        save_tasks(tasks_file, _sample_tasks(), atomic=True)

        with pytest.raises(EncodeError):
            save_tasks(tasks_file, [Task(id=1, title="\ud800")], atomic=True)

        assert len(load_tasks(tasks_file)) == 2
        assert list(tasks_file.parent.iterdir()) == [tasks_file]

    def test_non_ascii_titles_are_kept(self, tasks_file: Path):
        save_tasks(tasks_file, [Task(id=1, title="купить молоко")])
        assert "купить молоко" in tasks_file.read_text(encoding="utf-8")
        assert load_tasks(tasks_file)[0].title == "купить молоко"


class TestLoadTasks:
    """Tests for reading snapshots."""

    def test_roundtrip(self, tasks_file: Path):
        tasks = _sample_tasks()
        save_tasks(tasks_file, tasks)
        assert load_tasks(tasks_file) == tasks

    def test_roundtrip_keeps_order(self, tasks_file: Path):
        tasks = [Task(id=i, title=f"t{i}") for i in (5, 2, 9)]
        save_tasks(tasks_file, tasks)
        assert [t.id for t in load_tasks(tasks_file)] == [5, 2, 9]

    def test_missing_file_is_empty(self, tasks_file: Path):
        assert load_tasks(tasks_file) == []

    @pytest.mark.parametrize("content", ["", "   \n", "null", "[]"])
    def test_blank_or_empty_file_is_empty(self, tasks_file: Path, content: str):
        tasks_file.write_text(content)
        assert load_tasks(tasks_file) == []

    def test_compact_file_from_other_writers(self, tasks_file: Path):
        tasks_file.write_text(
            '[{"id":1,"title":"a","completed":false,'
            '"createdAt":"2025-03-14T09:26:53.589793238+03:00"}]\n'
        )
        [task] = load_tasks(tasks_file)
        assert task.created_at == datetime(2025, 3, 14, 6, 26, 53, 589793, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            '{"items": []}',
            "42",
            '[{"id": 1}]',
            '[{"id": 1, "title": "a", "completed": false, "createdAt": 5}]',
        ],
    )
    def test_malformed_file_raises_decode_error(self, tasks_file: Path, content: str):
        tasks_file.write_text(content)
        with pytest.raises(DecodeError):
            load_tasks(tasks_file)

    def test_unreadable_path_raises_io_error(self, unwritable_path: Path):
        with pytest.raises(StorageIOError):
            load_tasks(unwritable_path)


class TestTextCodec:
    """Tests for the in-memory encode/decode helpers."""

    def test_encode_ends_with_newline(self):
        assert encode_tasks([]).endswith(b"\n")

    def test_decode_invalid_json_message(self):
        with pytest.raises(DecodeError, match="invalid JSON"):
            decode_tasks("[")

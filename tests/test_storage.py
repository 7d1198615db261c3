"""Tests for JSON persistence of the task store."""
import json
import os
import stat
from pathlib import Path

import pytest

from errors import StorageError
from manager import TaskManager
from models import TaskStatus
from storage import Storage


class TestLoad:
    def test_missing_file_gives_empty_store(self, store_path: Path) -> None:
        manager = Storage(store_path).load()
        assert manager.list() == []
        assert manager.next_id == 1
        assert not store_path.exists()

    def test_exists_reflects_file(self, store_path: Path) -> None:
        storage = Storage(store_path)
        assert not storage.exists()
        storage.save(TaskManager())
        assert storage.exists()

    def test_invalid_json_raises(self, store_path: Path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError) as excinfo:
            Storage(store_path).load()
        assert "not valid JSON" in str(excinfo.value)
        assert excinfo.value.exit_code == 1

    @pytest.mark.parametrize("document", [
        "[]",
        '{"tasks": {}}',
        '{"tasks": [], "next_id": 1}',
        '{"tasks": {"1": {"id": 1}}, "next_id": 2}',
        '{"tasks": {}, "next_id": "one"}',
    ])
    def test_malformed_document_raises(self, store_path: Path, document: str) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text(document, encoding="utf-8")
        with pytest.raises(StorageError):
            Storage(store_path).load()

    def test_reads_hand_written_document(self, store_path: Path) -> None:
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps({
            "tasks": {
                "4": {
                    "id": 4,
                    "description": "water plants",
                    "status": "Completed",
                    "created_at": "2024-01-01 08:00:00 UTC",
                    "updated_at": "2024-01-02 08:00:00 UTC",
                },
            },
            "next_id": 6,
        }), encoding="utf-8")
        manager = Storage(store_path).load()
        task = manager.get(4)
        assert task.status is TaskStatus.COMPLETED
        assert task.description == "water plants"
        assert manager.next_id == 6


class TestSave:
    def test_round_trip(self, store_path: Path, clock) -> None:
        manager = TaskManager(clock)
        manager.add("buy milk")
        manager.add("call mom")
        manager.add("ship release")
        manager.set_status(1, TaskStatus.COMPLETED)
        manager.remove(2)
        manager.update_description(3, "ship the release")

        storage = Storage(store_path)
        storage.save(manager)
        loaded = storage.load()

        assert loaded.tasks == manager.tasks
        assert loaded.next_id == manager.next_id == 4

    def test_document_layout(self, store_path: Path, clock) -> None:
        manager = TaskManager(clock)
        manager.add("buy milk")
        Storage(store_path).save(manager)
        data = json.loads(store_path.read_text(encoding="utf-8"))
        assert data == {
            "tasks": {
                "1": {
                    "id": 1,
                    "description": "buy milk",
                    "status": "Pending",
                    "created_at": "2024-05-01 09:30:00 UTC",
                    "updated_at": "2024-05-01 09:30:00 UTC",
                },
            },
            "next_id": 2,
        }

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "tasks.json"
        Storage(path).save(TaskManager())
        assert path.exists()

    def test_no_temporary_files_left_behind(self, store_path: Path) -> None:
        Storage(store_path).save(TaskManager())
        assert os.listdir(store_path.parent) == ["tasks.json"]

    def test_overwrites_existing_file(self, store_path: Path, clock) -> None:
        storage = Storage(store_path)
        first = TaskManager(clock)
        first.add("one")
        storage.save(first)
        storage.save(TaskManager(clock))
        assert storage.load().list() == []

    def test_unwritable_target_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        with pytest.raises(StorageError) as excinfo:
            Storage(blocker / "tasks.json").save(TaskManager())
        assert "Could not write" in str(excinfo.value)


class TestFileMode:
    """Saving replaces the file's contents, not its permissions."""

    @pytest.mark.parametrize("mode", [0o644, 0o640, 0o600])
    def test_existing_mode_is_kept(self, store_path: Path, clock, mode: int) -> None:
        storage = Storage(store_path)
        storage.save(TaskManager(clock))
        os.chmod(store_path, mode)
        manager = storage.load(clock)
        manager.add("keep my mode")
        storage.save(manager)
        assert stat.S_IMODE(os.stat(store_path).st_mode) == mode

    def test_new_file_follows_umask(self, store_path: Path) -> None:
        old = os.umask(0o022)
        try:
            Storage(store_path).save(TaskManager())
        finally:
            os.umask(old)
        assert stat.S_IMODE(os.stat(store_path).st_mode) == 0o644


class TestMalformedFields:
    @pytest.mark.parametrize("field,value", [
        ("description", None),
        ("description", 42),
        ("created_at", 1714555800),
    ])
    def test_non_string_field_is_rejected(self, store_path: Path, field: str, value) -> None:
        raw = {
            "id": 1,
            "description": "buy milk",
            "status": "Pending",
            "created_at": "2024-05-01 09:30:00 UTC",
            "updated_at": "2024-05-01 09:30:00 UTC",
        }
        raw[field] = value
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps({"tasks": {"1": raw}, "next_id": 2}), encoding="utf-8")
        with pytest.raises(StorageError) as excinfo:
            Storage(store_path).load()
        assert "malformed" in str(excinfo.value)

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tmslocation.exceptions import StorageUnavailableError
from tmslocation.state.sharing import LocationSharingState
from tmslocation.storage import JsonFileStorage, MemoryStorage


def test_memory_storage_basic_operations() -> None:
    storage = MemoryStorage({"a": "1"})
    assert storage.get_item("a") == "1"
    assert storage.get_item("missing") is None

    storage.set_item("b", "2")
    storage.remove_item("a")
    storage.remove_item("never-there")

    assert storage.get_item("a") is None
    assert storage.get_item("b") == "2"


def test_json_file_storage_missing_file_reads_empty(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "state.json")
    assert storage.get_item("tms-location-sharing") is None


def test_json_file_storage_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "state.json"
    JsonFileStorage(path).set_item("tms-location-sharing", "true")

    assert JsonFileStorage(path).get_item("tms-location-sharing") == "true"
    assert json.loads(path.read_text(encoding="utf-8")) == {"tms-location-sharing": "true"}


def test_json_file_storage_keeps_other_keys(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
    storage = JsonFileStorage(path)

    storage.set_item("tms-location-sharing", "false")
    storage.remove_item("theme")

    assert json.loads(path.read_text(encoding="utf-8")) == {"tms-location-sharing": "false"}


def test_json_file_storage_corrupt_file_is_unavailable(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StorageUnavailableError):
        JsonFileStorage(path).get_item("tms-location-sharing")


def test_json_file_storage_non_object_is_unavailable(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(StorageUnavailableError):
        JsonFileStorage(path).get_item("tms-location-sharing")


def test_json_file_storage_write_replaces_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("garbage", encoding="utf-8")
    storage = JsonFileStorage(path)

    storage.set_item("tms-location-sharing", "true")

    assert storage.get_item("tms-location-sharing") == "true"


def test_corrupt_file_initializes_not_sharing_then_recovers(tmp_path: Path) -> None:
    path = tmp_path / "state.json"
    path.write_text("garbage", encoding="utf-8")

    state = LocationSharingState(JsonFileStorage(path))
    assert state.initialize().is_sharing is False

    state.set_sharing(True)
    restarted = LocationSharingState(JsonFileStorage(path))
    assert restarted.initialize().is_sharing is True


def test_json_file_storage_directory_path_is_unavailable(tmp_path: Path) -> None:
    with pytest.raises(StorageUnavailableError):
        JsonFileStorage(tmp_path).get_item("tms-location-sharing")

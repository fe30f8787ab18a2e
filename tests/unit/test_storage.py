"""Tests for token storage backends."""

import json

import pytest
from fetchkit import storage
from fetchkit.core import config
from fetchkit.core import logging as core_logging
from fetchkit.storage import (
    FileStorage,
    KeyValueStorage,
    MemoryStorage,
    StorageType,
    default_storages,
)


class TestMemoryStorage:
    def test_get_missing_returns_none(self):
        assert MemoryStorage().get_item("accessToken") is None

    def test_set_get_remove(self):
        store = MemoryStorage()
        store.set_item("accessToken", "abc")
        assert store.get_item("accessToken") == "abc"
        store.remove_item("accessToken")
        assert store.get_item("accessToken") is None

    def test_initial_items_are_copied(self):
        initial = {"accessToken": "abc"}
        store = MemoryStorage(initial)
        initial["accessToken"] = "changed"
        assert store.get_item("accessToken") == "abc"

    def test_satisfies_protocol(self):
        assert isinstance(MemoryStorage(), KeyValueStorage)


class TestFileStorage:
    def test_missing_file_reads_empty(self, tmp_path):
        store = FileStorage(tmp_path / "nope.json")
        assert store.get_item("accessToken") is None

    def test_set_item_creates_file(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        store = FileStorage(path)
        store.set_item("accessToken", "abc")

        assert json.loads(path.read_text()) == {"accessToken": "abc"}
        assert FileStorage(path).get_item("accessToken") == "abc"

    def test_remove_item(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text(json.dumps({"accessToken": "abc", "other": "x"}))
        store = FileStorage(path)
        store.remove_item("accessToken")
        assert json.loads(path.read_text()) == {"other": "x"}

    def test_no_temp_files_left_behind(self, tmp_path):
        store = FileStorage(tmp_path / "storage.json")
        store.set_item("a", "1")
        store.set_item("b", "2")
        assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            FileStorage(path).get_item("accessToken")

    def test_non_object_file_raises(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            FileStorage(path).get_item("accessToken")


def test_default_storages(tmp_path):
    storages = default_storages(tmp_path / "storage.json")
    assert isinstance(storages[StorageType.LOCAL], FileStorage)
    assert isinstance(storages[StorageType.SESSION], MemoryStorage)


def test_storage_type_shared_with_settings():
    assert storage.StorageType is config.StorageType
    assert storage.get_logger is core_logging.get_logger

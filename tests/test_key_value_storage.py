from __future__ import annotations

import pytest

from backend.errors import StorageWriteError
from backend.utils.key_value_storage import FileKeyValueStorage


def test_missing_key_is_none(tmp_path):
    assert FileKeyValueStorage(tmp_path).get_item("absent") is None


def test_set_get_remove(tmp_path):
    storage = FileKeyValueStorage(tmp_path / "vault")
    storage.set_item("k", "value")
    assert storage.get_item("k") == "value"
    assert not list((tmp_path / "vault").glob(".*.tmp"))
    storage.remove_item("k")
    storage.remove_item("k")
    assert storage.get_item("k") is None


def test_rejects_path_like_keys(tmp_path):
    with pytest.raises(ValueError):
        FileKeyValueStorage(tmp_path).set_item("../escape", "x")


def test_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(StorageWriteError):
        FileKeyValueStorage(blocker).set_item("k", "v")

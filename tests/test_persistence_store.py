from __future__ import annotations

import json

import pytest

from backend.errors import ImportInvalidError
from backend.models.template_collection import initial_collection
from backend.services.persistence_store import PersistenceStore, migrate_items
from backend.utils.key_value_storage import FileKeyValueStorage, MemoryKeyValueStorage

COLLECTION_KEY = "groovevault_collection"
VERSION_KEY = "groovevault_version"


def _template():
    return [{"id": "t1", "a": 1, "b": 2, "c": 3}]


def _store(storage, **kwargs):
    kwargs.setdefault("template_factory", _template)
    return PersistenceStore(storage, **kwargs)


def test_first_run_seeds_template():
    storage = MemoryKeyValueStorage()
    items, version = _store(storage).load()
    assert items == _template()
    assert version == 2
    assert json.loads(storage.data[COLLECTION_KEY]) == _template()
    assert storage.data[VERSION_KEY] == "2"


def test_empty_blob_is_treated_as_missing():
    storage = MemoryKeyValueStorage({COLLECTION_KEY: ""})
    items, _ = _store(storage).load()
    assert items == _template()


@pytest.mark.parametrize("blob", ["{not json", '{"id": "1"}', "42", "[1, 2]", '[{"id": "t1"}, null]'])
def test_corrupt_or_non_list_blob_reseeds(blob):
    storage = MemoryKeyValueStorage({COLLECTION_KEY: blob, VERSION_KEY: "2"})
    items, version = _store(storage).load()
    assert items == _template()
    assert version == 2
    assert json.loads(storage.data[COLLECTION_KEY]) == _template()


def test_old_version_is_merged_onto_template():
    stored = [{"id": "t1", "a": 9}]
    storage = MemoryKeyValueStorage({COLLECTION_KEY: json.dumps(stored), VERSION_KEY: "1"})
    items, version = _store(storage).load()
    assert items == [{"id": "t1", "a": 9, "b": 2, "c": 3}]
    assert version == 2
    assert storage.data[VERSION_KEY] == "2"
    assert json.loads(storage.data[COLLECTION_KEY]) == items


def test_missing_version_key_counts_as_oldest():
    stored = [{"id": "t1", "a": 5}]
    storage = MemoryKeyValueStorage({COLLECTION_KEY: json.dumps(stored)})
    items, _ = _store(storage).load()
    assert items[0]["b"] == 2


def test_current_version_loads_unchanged():
    stored = [{"id": "mine", "title": "X", "extraKey": [1, 2]}]
    blob = json.dumps(stored)
    storage = MemoryKeyValueStorage({COLLECTION_KEY: blob, VERSION_KEY: "2"})
    items, _ = _store(storage).load()
    assert items == stored
    assert storage.data[COLLECTION_KEY] == blob


def test_migration_is_idempotent():
    stored = [{"id": "t1", "a": 9}, {"id": "other", "z": 1}]
    once = migrate_items(stored, _template())
    assert migrate_items(once, _template()) == once
    assert once[1] == {"id": "other", "z": 1}


def test_migration_drops_non_object_entries():
    stored = ["junk", None, {"id": "t1", "a": 9}]
    assert migrate_items(stored, _template()) == [{"id": "t1", "a": 9, "b": 2, "c": 3}]


def test_save_failure_is_reported_not_raised():
    storage = MemoryKeyValueStorage()
    store = _store(storage)
    store.load()
    storage.fail_writes = True
    assert store.save([{"id": "x"}]) is False
    assert json.loads(storage.data[COLLECTION_KEY]) == _template()


def test_seed_survives_write_failure():
    storage = MemoryKeyValueStorage()
    storage.fail_writes = True
    items, _ = _store(storage).load()
    assert items == _template()


def test_save_round_trip_with_file_storage(tmp_path):
    store = _store(FileKeyValueStorage(tmp_path))
    items = [{"id": "1", "title": "Ünïcode"}]
    assert store.save(items) is True
    loaded, _ = _store(FileKeyValueStorage(tmp_path)).load()
    assert loaded == items
    assert (tmp_path / VERSION_KEY).read_text(encoding="utf-8") == "2"


def test_default_template_is_three_records():
    items, _ = PersistenceStore(MemoryKeyValueStorage()).load()
    assert [item["id"] for item in items] == ["1", "2", "3"]
    assert items == initial_collection(now=items[-1]["addedAt"])


def test_export_is_pretty_bare_list():
    items = [{"id": "1", "title": "A"}]
    raw = PersistenceStore.export_items(items)
    assert raw.decode("utf-8").startswith("[\n  {")
    assert PersistenceStore.import_items(raw) == items


@pytest.mark.parametrize(
    "raw, message",
    [
        (b"not json at all", "Failed to parse file."),
        (b'{"items": []}', "Invalid backup file."),
        (b'"hello"', "Invalid backup file."),
        (b"[1, 2]", "Invalid backup file."),
        (b'[{"id": "a"}, null]', "Invalid backup file."),
    ],
)
def test_import_rejections(raw, message):
    with pytest.raises(ImportInvalidError, match=message):
        PersistenceStore.import_items(raw)


def test_import_accepts_empty_list():
    assert PersistenceStore.import_items(b"[]") == []

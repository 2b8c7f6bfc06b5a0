from __future__ import annotations

import json
from datetime import date

import pytest

from backend.services.collection_controller import STORAGE_WARNING_TEXT, CollectionController
from backend.services.persistence_store import PersistenceStore
from backend.utils.key_value_storage import MemoryKeyValueStorage
from conftest import make_record, make_records


@pytest.fixture
def storage():
    return MemoryKeyValueStorage()


@pytest.fixture
def controller(qapp, storage):
    store = PersistenceStore(storage, template_factory=lambda: make_records(3))
    ctrl = CollectionController(store)
    ctrl.load()
    return ctrl


def _stored_ids(storage):
    return [item["id"] for item in json.loads(storage.data["groovevault_collection"])]


def test_load_seeds_and_emits(qapp, storage):
    ctrl = CollectionController(PersistenceStore(storage, template_factory=lambda: make_records(2)))
    seen = []
    ctrl.collectionChanged.connect(seen.append)
    ctrl.load()
    assert len(ctrl) == 2
    assert seen and len(seen[0]) == 2


def test_add_prepends_with_fresh_identity(controller, storage):
    record = controller.add({"title": "New", "artist": "Someone", "rating": 9, "id": "spoof"})
    assert controller.items[0] is record
    assert record["id"] != "spoof"
    assert record["rating"] == 5
    assert isinstance(record["addedAt"], int)
    assert _stored_ids(storage)[0] == record["id"]


def test_update_keeps_identity_and_timestamp(controller):
    before = dict(controller.get("1"))
    updated = controller.update("1", {"title": "Renamed", "id": "x", "addedAt": 0})
    assert updated["title"] == "Renamed"
    assert updated["id"] == "1"
    assert updated["addedAt"] == before["addedAt"]
    assert controller.index_of("1") == 1


def test_update_unknown(controller):
    assert controller.update("missing", {"title": "x"}) is None


def test_delete(controller, storage):
    assert controller.delete("0") is True
    assert controller.delete("0") is False
    assert _stored_ids(storage) == ["1", "2"]


def test_reorder_appends_unlisted(controller):
    controller.reorder(["2", "0", "ghost", "2"])
    assert [item["id"] for item in controller.items] == ["2", "0", "1"]


def test_import_replaces_collection(controller):
    accepted = []
    controller.importAccepted.connect(accepted.append)
    raw = json.dumps([make_record("z")]).encode("utf-8")
    assert controller.import_bytes(raw) is True
    assert [item["id"] for item in controller.items] == ["z"]
    assert accepted == [1]


def test_import_rejection_leaves_collection(controller):
    rejected = []
    controller.importRejected.connect(rejected.append)
    assert controller.import_bytes(b'{"not": "a list"}') is False
    assert len(controller) == 3
    assert rejected == ["Invalid backup file."]


def test_export_round_trips(controller):
    assert json.loads(controller.export_bytes()) == controller.items


def test_write_failure_warns_but_keeps_change(controller, storage):
    warnings = []
    controller.storageWarning.connect(warnings.append)
    storage.fail_writes = True
    controller.delete("1")
    assert [item["id"] for item in controller.items] == ["0", "2"]
    assert warnings == [STORAGE_WARNING_TEXT]


def test_export_filename():
    assert CollectionController.export_filename(date(2024, 3, 9)) == "groove_vault_backup_2024-03-09.json"


def test_machine_follows_collection(controller, make_machine):
    machine = make_machine(controller.items)
    controller.collectionChanged.connect(machine.set_collection)
    machine.set_active_index(2)
    controller.add({"title": "Fresh", "artist": "New"})
    assert machine.active_item["id"] == "2"
    assert machine.active_index == 3


def test_import_of_non_object_entries_is_rejected(controller, make_machine):
    machine = make_machine(controller.items)
    controller.collectionChanged.connect(machine.set_collection)
    rejected = []
    controller.importRejected.connect(rejected.append)
    assert controller.import_bytes(b"[1, 2]") is False
    assert rejected == ["Invalid backup file."]
    assert [item["id"] for item in controller.items] == ["0", "1", "2"]
    assert machine.collection_length == 3

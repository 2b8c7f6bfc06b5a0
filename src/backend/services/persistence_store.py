"""Versioned load/migrate/save of the vinyl collection.

Two storage keys are used: one holds the JSON array of records, the other the
integer schema version. The version never appears inside the record list, and
exported backups contain the bare list only.
"""
from __future__ import annotations

import json
from copy import deepcopy
from typing import Any, Callable, List, Optional, Protocol, Tuple

from backend.errors import ImportInvalidError, StorageCorruptError, StorageWriteError
from backend.models.template_collection import initial_collection
from backend.models.vinyl import FIELD_ID, VinylData
from common.log_utils import is_debug_enabled, log_debug, log_info, log_warning
from common.timing import timed
from config import get_config


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


def migrate_items(stored: List[VinylData], template: List[VinylData]) -> List[VinylData]:
    """Merge stored records onto their template counterparts by id.

    Template fields fill what older schemas lacked; every field present on the
    stored record wins. Records without a template counterpart are kept as-is;
    entries that are not objects are dropped.
    """
    template_by_id = {
        str(item.get(FIELD_ID)): item for item in template if isinstance(item, dict)
    }
    migrated: List[VinylData] = []
    for stored_item in stored:
        if not isinstance(stored_item, dict):
            continue
        fresh = template_by_id.get(str(stored_item.get(FIELD_ID)))
        if fresh is None:
            migrated.append(stored_item)
            continue
        merged = deepcopy(fresh)
        merged.update(deepcopy(stored_item))
        migrated.append(merged)
    return migrated


def _parse_version(raw: Optional[str]) -> int:
    try:
        return int((raw or "0").strip())
    except ValueError:
        return 0


def _parse_items(raw: str) -> List[Any]:
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise StorageCorruptError(str(exc)) from exc
    if not isinstance(data, list):
        raise StorageCorruptError(f"Expected a JSON array, got {type(data).__name__}")
    if not all(isinstance(item, dict) for item in data):
        raise StorageCorruptError("Stored collection contains non-object entries")
    return data


class PersistenceStore:
    """Loads, migrates, saves, exports and imports the collection."""

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        schema_version: Optional[int] = None,
        template_factory: Callable[[], List[VinylData]] = initial_collection,
    ) -> None:
        config = get_config()
        self.storage = storage
        self.current_version = config.schema_version if schema_version is None else schema_version
        self.collection_key = config.collection_key
        self.version_key = config.version_key
        self._template_factory = template_factory

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    @timed
    def load(self) -> Tuple[List[VinylData], int]:
        """Return ``(items, current_version)``, seeding or migrating as needed."""
        stored_raw = self.storage.get_item(self.collection_key)
        if not stored_raw:
            log_info("No stored collection, seeding template dataset", "STORE")
            return self._reseed(), self.current_version

        stored_version = _parse_version(self.storage.get_item(self.version_key))
        try:
            items = _parse_items(stored_raw)
        except StorageCorruptError as exc:
            log_warning(f"Stored collection is corrupt ({exc}), resetting to template", "STORE")
            return self._reseed(), self.current_version

        if stored_version < self.current_version:
            log_info(
                f"Migrating data from version {stored_version} to {self.current_version}",
                "STORE",
            )
            items = migrate_items(items, self._template_factory())
            self._write(items)
            return items, self.current_version

        if is_debug_enabled("storage"):
            log_debug(f"Loaded {len(items)} records at version {stored_version}", "STORE")
        return items, self.current_version

    def save(self, items: List[VinylData]) -> bool:
        """Overwrite the stored collection. Returns False if storage refused the write."""
        try:
            self._write(items)
        except StorageWriteError as exc:
            log_warning(f"Save failed, keeping in-memory collection: {exc}", "STORE")
            return False
        return True

    def _write(self, items: List[VinylData]) -> None:
        self.storage.set_item(self.collection_key, json.dumps(items, ensure_ascii=False))
        self.storage.set_item(self.version_key, str(self.current_version))

    def _reseed(self) -> List[VinylData]:
        items = self._template_factory()
        try:
            self._write(items)
        except StorageWriteError as exc:
            log_warning(f"Could not persist template dataset: {exc}", "STORE")
        return items

    # ------------------------------------------------------------------
    # Backup
    # ------------------------------------------------------------------

    @staticmethod
    def export_items(items: List[VinylData]) -> bytes:
        """Pretty-printed JSON array, no version wrapper."""
        return json.dumps(items, indent=2, ensure_ascii=False).encode("utf-8")

    @staticmethod
    def import_items(raw: bytes) -> List[VinylData]:
        """Parse a backup. Raises ImportInvalidError unless the top level is a list of objects."""
        try:
            text = raw.decode("utf-8-sig") if isinstance(raw, (bytes, bytearray)) else str(raw)
            data = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ImportInvalidError("Failed to parse file.") from exc
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise ImportInvalidError("Invalid backup file.")
        return data

"""Owns the canonical collection and persists it after every mutation."""
from __future__ import annotations

from datetime import date
from typing import Any, Iterable, List, Mapping, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from backend.errors import ImportInvalidError
from backend.models.vinyl import VinylData, apply_update, create_vinyl, vinyl_id
from backend.services.persistence_store import PersistenceStore
from common.log_utils import log_info, log_warning
from config import get_config

STORAGE_WARNING_TEXT = "Changes could not be saved to disk. They will be lost when the app closes."


class CollectionController(QObject):
    """Add/update/delete/import/reorder on the in-memory collection."""

    collectionChanged = pyqtSignal(object)  # List[VinylData]
    storageWarning = pyqtSignal(str)
    importRejected = pyqtSignal(str)
    importAccepted = pyqtSignal(int)

    def __init__(self, store: PersistenceStore, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.store = store
        self._items: List[VinylData] = []
        self.schema_version = store.current_version

    @property
    def items(self) -> List[VinylData]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def load(self) -> List[VinylData]:
        self._items, self.schema_version = self.store.load()
        log_info(f"Collection loaded: {len(self._items)} records (schema v{self.schema_version})", "COLLECTION")
        self.collectionChanged.emit(self._items)
        return self._items

    def get(self, item_id: str) -> Optional[VinylData]:
        for item in self._items:
            if vinyl_id(item) == item_id:
                return item
        return None

    def index_of(self, item_id: str) -> int:
        for idx, item in enumerate(self._items):
            if vinyl_id(item) == item_id:
                return idx
        return -1

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, fields: Mapping[str, Any]) -> VinylData:
        """Create a record and put it at the front of the collection."""
        record = create_vinyl(fields)
        self._commit([record, *self._items])
        return record

    def update(self, item_id: str, fields: Mapping[str, Any]) -> Optional[VinylData]:
        index = self.index_of(item_id)
        if index < 0:
            return None
        updated = apply_update(self._items[index], fields)
        items = list(self._items)
        items[index] = updated
        self._commit(items)
        return updated

    def delete(self, item_id: str) -> bool:
        index = self.index_of(item_id)
        if index < 0:
            return False
        items = list(self._items)
        items.pop(index)
        self._commit(items)
        return True

    def replace_all(self, items: List[VinylData]) -> None:
        self._commit(list(items))

    def reorder(self, ordered_ids: Iterable[str]) -> None:
        """Apply a new order; records not listed keep their relative order at the end."""
        by_id = {vinyl_id(item): item for item in self._items}
        seen = set()
        ordered: List[VinylData] = []
        for item_id in ordered_ids:
            item = by_id.get(item_id)
            if item is not None and item_id not in seen:
                ordered.append(item)
                seen.add(item_id)
        ordered.extend(item for item in self._items if vinyl_id(item) not in seen)
        self._commit(ordered)

    # ------------------------------------------------------------------
    # Backup
    # ------------------------------------------------------------------

    def import_bytes(self, raw: bytes) -> bool:
        """Replace the collection from a backup. Leaves it untouched on rejection."""
        try:
            items = self.store.import_items(raw)
        except ImportInvalidError as exc:
            log_warning(f"Import rejected: {exc}", "COLLECTION")
            self.importRejected.emit(str(exc))
            return False
        self._commit(items)
        log_info(f"Imported {len(items)} records", "COLLECTION")
        self.importAccepted.emit(len(items))
        return True

    def export_bytes(self) -> bytes:
        return self.store.export_items(self._items)

    @staticmethod
    def export_filename(today: Optional[date] = None) -> str:
        day = today or date.today()
        return f"{get_config().export_filename_prefix}{day.isoformat()}.json"

    def _commit(self, items: List[VinylData]) -> None:
        self._items = items
        if not self.store.save(self._items):
            self.storageWarning.emit(STORAGE_WARNING_TEXT)
        self.collectionChanged.emit(self._items)

"""Searchable index of the collection; picking an entry opens it for inspection."""
from __future__ import annotations

from typing import List

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QComboBox, QHBoxLayout, QLineEdit, QListWidget, QListWidgetItem, QVBoxLayout, QWidget

from backend.models.vinyl import FIELD_ARTIST, FIELD_TITLE, FIELD_YEAR, GENRES, VinylData, vinyl_id
from backend.services.collection_queries import GENRE_ALL, filter_and_sort


class IndexPanel(QWidget):
    itemChosen = pyqtSignal(str)  # record id

    def __init__(self, parent=None):
        super().__init__(parent)
        self._items: List[VinylData] = []

        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.setSpacing(6)

        row = QHBoxLayout()
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search title or artist")
        self.genre_combo = QComboBox()
        self.genre_combo.addItems([GENRE_ALL, *GENRES])
        row.addWidget(self.search_edit, 1)
        row.addWidget(self.genre_combo)
        root.addLayout(row)

        self.list_widget = QListWidget()
        root.addWidget(self.list_widget, 1)

        self.search_edit.textChanged.connect(lambda _text: self._refresh())
        self.genre_combo.currentTextChanged.connect(lambda _text: self._refresh())
        self.list_widget.itemActivated.connect(self._handle_activated)

    def set_items(self, items: List[VinylData]) -> None:
        self._items = list(items)
        self._refresh()

    def _refresh(self) -> None:
        self.list_widget.clear()
        for record in filter_and_sort(self._items, self.search_edit.text(), self.genre_combo.currentText()):
            entry = QListWidgetItem(
                f"{record.get(FIELD_TITLE, '')} · {record.get(FIELD_ARTIST, '')} ({record.get(FIELD_YEAR, '')})"
            )
            entry.setData(Qt.ItemDataRole.UserRole, vinyl_id(record))
            self.list_widget.addItem(entry)

    def _handle_activated(self, entry: QListWidgetItem) -> None:
        item_id = entry.data(Qt.ItemDataRole.UserRole)
        if item_id:
            self.itemChosen.emit(str(item_id))

"""Archive page for one record: catalogue text plus a two-column media grid."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

from PyQt6.QtCore import Qt, QUrl
from PyQt6.QtGui import QDesktopServices, QPixmap
from PyQt6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QGridLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from frontend.services.cover_loader import CoverLoader
from frontend.widgets import style

from backend.models.navigation import MediaKind, Theme
from backend.models.vinyl import FIELD_ARTIST, FIELD_TITLE
from backend.services.media_archive import LAYOUT_SPAN, archive_description, grid_layout, media_items, youtube_embed_url

CELL_HEIGHT = 220


class ArchiveDialog(QDialog):
    def __init__(
        self,
        record: Mapping[str, Any],
        covers: CoverLoader,
        parent=None,
        theme: Theme = Theme.LIGHT,
        layout_variant: str = LAYOUT_SPAN,
    ) -> None:
        super().__init__(parent)
        self.record = dict(record)
        self.covers = covers
        self.theme = theme
        self.cells = grid_layout(media_items(self.record), layout_variant)
        # url -> labels still waiting for their pixmap
        self._pending: Dict[str, List[QLabel]] = {}
        self.setWindowTitle(f"Archive: {self.record.get(FIELD_TITLE, '')}")
        self.setMinimumSize(640, 560)
        self._build_ui()
        self.covers.pixmapReady.connect(self._handle_pixmap)
        self.covers.fetchFailed.connect(self._handle_failed)

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)

        heading = QLabel(f"{self.record.get(FIELD_TITLE, '')} · {self.record.get(FIELD_ARTIST, '')}")
        heading.setStyleSheet(style.heading_style(theme=self.theme))
        layout.addWidget(heading)

        self.description_label = QLabel(archive_description(self.record))
        self.description_label.setWordWrap(True)
        self.description_label.setStyleSheet(style.monospace_text_style())
        layout.addWidget(self.description_label)

        grid_host = QWidget()
        self.grid = QGridLayout(grid_host)
        self.grid.setSpacing(8)
        row = col = 0
        for cell in self.cells:
            if cell.full_width and col:
                row, col = row + 1, 0
            span = 2 if cell.full_width else 1
            self.grid.addWidget(self._cell_widget(cell.item.kind, cell.item.url), row, col, 1, span)
            col += span
            if col >= 2:
                row, col = row + 1, 0

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setWidget(grid_host)
        layout.addWidget(scroll, 1)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _cell_widget(self, kind: MediaKind, url: str) -> QWidget:
        if kind is MediaKind.VIDEO:
            button = QPushButton("Play video")
            button.setMinimumHeight(CELL_HEIGHT // 2)
            target = youtube_embed_url(url) or url
            button.clicked.connect(lambda _checked=False: QDesktopServices.openUrl(QUrl(target)))
            return button

        label = QLabel()
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        label.setMinimumHeight(CELL_HEIGHT)
        pixmap = self.covers.get(url)
        if pixmap is None:
            if self.covers.has_failed(url):
                label.setText("Image unavailable")
            else:
                label.setText("Loading…")
                self._pending.setdefault(url, []).append(label)
        else:
            self._set_pixmap(label, pixmap)
        return label

    def _set_pixmap(self, label: QLabel, pixmap: QPixmap) -> None:
        label.setPixmap(
            pixmap.scaledToHeight(CELL_HEIGHT, Qt.TransformationMode.SmoothTransformation)
        )

    def _handle_pixmap(self, url: str, pixmap: QPixmap) -> None:
        for label in self._pending.pop(url, []):
            self._set_pixmap(label, pixmap)

    def _handle_failed(self, url: str) -> None:
        for label in self._pending.pop(url, []):
            label.setText("Image unavailable")

    def done(self, result: int) -> None:
        self.covers.pixmapReady.disconnect(self._handle_pixmap)
        self.covers.fetchFailed.disconnect(self._handle_failed)
        super().done(result)

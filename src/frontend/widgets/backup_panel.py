"""Export/import panel for JSON collection backups."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QFileDialog, QHBoxLayout, QLabel, QMessageBox, QPushButton, QVBoxLayout, QWidget

from frontend.utils.ui_messages import (
    BACKUP_FILE_FILTER,
    EXPORT_DIALOG_TITLE,
    IMPORT_CONFIRM_TEXT,
    IMPORT_DIALOG_TITLE,
    export_failure_message,
    export_success_message,
    import_success_message,
)
from frontend.widgets import style

from backend.models.navigation import Theme
from backend.services.collection_controller import CollectionController
from common.log_utils import log_info, log_warning


class BackupPanel(QWidget):
    closeRequested = pyqtSignal()
    statusMessage = pyqtSignal(str)

    def __init__(self, collection: CollectionController, parent=None):
        super().__init__(parent)
        self.setObjectName("backup_card")
        self.collection = collection
        self.last_dir: Optional[Path] = None

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 10, 12, 10)
        root.setSpacing(8)

        header = QHBoxLayout()
        self.title = QLabel("Backup")
        header.addWidget(self.title)
        header.addStretch(1)
        close_btn = QPushButton("Close")
        close_btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        close_btn.clicked.connect(self.closeRequested.emit)
        header.addWidget(close_btn)
        root.addLayout(header)

        body = QLabel(
            "Export writes the whole collection to a JSON file. "
            "Import replaces the collection with the records in a backup file."
        )
        body.setWordWrap(True)
        root.addWidget(body)

        buttons = QHBoxLayout()
        self.btn_export = QPushButton("Export…")
        self.btn_import = QPushButton("Import…")
        for btn in (self.btn_export, self.btn_import):
            btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
            buttons.addWidget(btn)
        buttons.addStretch(1)
        root.addLayout(buttons)

        self.label_result = QLabel("")
        self.label_result.setWordWrap(True)
        root.addWidget(self.label_result)
        root.addStretch(1)

        self.btn_export.clicked.connect(self._handle_export)
        self.btn_import.clicked.connect(self._handle_import)
        self.collection.importRejected.connect(self._show_result)
        self.collection.importAccepted.connect(lambda n: self._show_result(import_success_message(n)))
        self.apply_theme(Theme.LIGHT)

    def apply_theme(self, theme: Theme) -> None:
        self.setStyleSheet(style.card_style("backup_card", theme))
        self.title.setStyleSheet(style.heading_style(theme=theme))

    def _start_dir(self) -> str:
        return str(self.last_dir or Path.home())

    def _handle_export(self) -> None:
        suggested = str(Path(self._start_dir()) / self.collection.export_filename())
        path, _ = QFileDialog.getSaveFileName(self, EXPORT_DIALOG_TITLE, suggested, BACKUP_FILE_FILTER)
        if not path:
            return
        self.export_to(Path(path))

    def export_to(self, path: Path) -> bool:
        try:
            path.write_bytes(self.collection.export_bytes())
        except OSError as exc:
            log_warning(f"Export to {path} failed: {exc}", "BACKUP")
            self._show_result(export_failure_message(str(path), str(exc)))
            return False
        self.last_dir = path.parent
        log_info(f"Exported {len(self.collection)} records to {path}", "BACKUP")
        self._show_result(export_success_message(len(self.collection), str(path)))
        return True

    def _handle_import(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, IMPORT_DIALOG_TITLE, self._start_dir(), BACKUP_FILE_FILTER)
        if not path:
            return
        answer = QMessageBox.question(self, IMPORT_DIALOG_TITLE, IMPORT_CONFIRM_TEXT)
        if answer != QMessageBox.StandardButton.Yes:
            return
        self.import_from(Path(path))

    def import_from(self, path: Path) -> bool:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            log_warning(f"Could not read {path}: {exc}", "BACKUP")
            self._show_result(str(exc))
            return False
        self.last_dir = path.parent
        return self.collection.import_bytes(raw)

    def _show_result(self, message: str) -> None:
        self.label_result.setText(message)
        self.statusMessage.emit(message)

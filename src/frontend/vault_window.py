"""Main Qt window for browsing the vinyl collection.

Wires the collection controller, the navigation state machine and the input
router into the dashboard and its panels, and keeps preferences in sync.
"""
from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt, QThreadPool
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QApplication, QDockWidget, QMainWindow, QMessageBox

from frontend.services.cover_loader import CoverLoader
from frontend.utils.ui_messages import HELP_SHORTCUTS, WINDOW_TITLE, position_message
from frontend.widgets import style
from frontend.widgets.archive_dialog import ArchiveDialog
from frontend.widgets.backup_panel import BackupPanel
from frontend.widgets.dashboard_view import DashboardView
from frontend.widgets.index_panel import IndexPanel
from frontend.widgets.recommendation_panel import RecommendationPanel
from frontend.widgets.record_dialog import RecordDialog
from frontend.widgets.stats_panel import StatsPanel

from backend.models.navigation import Modal, NavigationState, Overlay, Theme
from backend.models.vinyl import FIELD_TITLE, vinyl_id
from backend.services.collection_controller import CollectionController
from backend.services.input_router import InputRouter
from backend.services.navigation_controller import NavigationStateMachine
from backend.services.recommendation_service import RecommendationController
from backend.utils.preferences import Preferences, save_preferences
from common.log_utils import log_info, log_warning


class VaultWindow(QMainWindow):
    def __init__(
        self,
        collection: CollectionController,
        machine: NavigationStateMachine,
        router: InputRouter,
        recommendations: RecommendationController,
        preferences: Optional[Preferences] = None,
        thread_pool: Optional[QThreadPool] = None,
    ) -> None:
        super().__init__()
        self.collection = collection
        self.machine = machine
        self.router = router
        self.recommendations = recommendations
        self.preferences = preferences or Preferences()
        self.thread_pool = thread_pool or QThreadPool.globalInstance()

        self.setWindowTitle(WINDOW_TITLE)
        self.resize(1200, 800)
        self._init_widgets()
        self._init_menus()
        self._connect_signals()
        self.apply_theme(self.preferences.theme, persist=False)
        self._handle_state(self.machine.state())

    # ============================================================================
    # INITIALIZATION SECTIONS
    # ============================================================================

    def _init_widgets(self) -> None:
        self.covers = CoverLoader(self.thread_pool, parent=self)
        self.dashboard = DashboardView(self.machine, self.router, lambda: self.collection.items, self.covers, self)
        self.setCentralWidget(self.dashboard)

        self.stats_panel = StatsPanel()
        self.backup_panel = BackupPanel(self.collection)
        self.dashboard.add_overlay(Modal.STATS, self.stats_panel)
        self.dashboard.add_overlay(Modal.BACKUP, self.backup_panel)

        self.index_panel = IndexPanel()
        self.index_dock = QDockWidget("Index", self)
        self.index_dock.setWidget(self.index_panel)
        self.addDockWidget(Qt.DockWidgetArea.LeftDockWidgetArea, self.index_dock)

        self.recommendation_panel = RecommendationPanel(self.recommendations, lambda: self.collection.items)
        self.recommendation_dock = QDockWidget("Recommendations", self)
        self.recommendation_dock.setWidget(self.recommendation_panel)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, self.recommendation_dock)
        self.recommendation_dock.hide()

    def _init_menus(self) -> None:
        menubar = self.menuBar()
        collection_menu = menubar.addMenu("&Collection")
        self.action_add = self._add_action(collection_menu, "Add record…", self._handle_add, "Ctrl+N")
        self.action_edit = self._add_action(collection_menu, "Edit record…", self._handle_edit, "Ctrl+E")
        self.action_delete = self._add_action(collection_menu, "Delete record", self._handle_delete, "Ctrl+Backspace")
        self.action_archive = self._add_action(collection_menu, "Archive page…", self._handle_archive, "Ctrl+R")
        collection_menu.addSeparator()
        self._add_action(collection_menu, "Stats", lambda: self.machine.toggle_overlay(Overlay.STATS), "Ctrl+I")
        self._add_action(collection_menu, "Backup…", lambda: self.machine.toggle_overlay(Overlay.BACKUP), "Ctrl+B")
        collection_menu.addSeparator()
        self._add_action(collection_menu, "Quit", self.close, "Ctrl+Q")

        view_menu = menubar.addMenu("&View")
        self._add_action(view_menu, "Toggle stand / stack", self.machine.toggle_view_mode, "Ctrl+T")
        self.action_theme = self._add_action(view_menu, "Dark theme", self._handle_theme_toggled, "Ctrl+D")
        self.action_theme.setCheckable(True)
        view_menu.addSeparator()
        view_menu.addAction(self.index_dock.toggleViewAction())
        view_menu.addAction(self.recommendation_dock.toggleViewAction())

        help_menu = menubar.addMenu("&Help")
        self._add_action(help_menu, "Shortcuts", self._show_shortcuts)

    def _add_action(self, menu, text: str, handler, shortcut: Optional[str] = None) -> QAction:
        action = QAction(text, self)
        if shortcut:
            action.setShortcut(QKeySequence(shortcut))
        action.triggered.connect(lambda _checked=False: handler())
        menu.addAction(action)
        return action

    def _connect_signals(self) -> None:
        self.collection.collectionChanged.connect(self._handle_collection_changed)
        self.collection.storageWarning.connect(self._handle_storage_warning)
        self.machine.stateChanged.connect(self._handle_state)
        self.stats_panel.closeRequested.connect(self.machine.close_overlay)
        self.backup_panel.closeRequested.connect(self.machine.close_overlay)
        self.backup_panel.statusMessage.connect(lambda msg: self.statusBar().showMessage(msg, 5000))
        self.index_panel.itemChosen.connect(self._handle_index_choice)

    # ============================================================================
    # HANDLERS
    # ============================================================================

    def _handle_collection_changed(self, items) -> None:
        self.covers.forget_failures()
        self.machine.set_collection(items)
        self.stats_panel.update_from_items(items)
        self.index_panel.set_items(items)

    def _handle_storage_warning(self, message: str) -> None:
        log_warning(message, "UI")
        self.statusBar().showMessage(message, 8000)

    def _handle_state(self, state: NavigationState) -> None:
        has_item = state.has_active
        self.action_edit.setEnabled(has_item)
        self.action_delete.setEnabled(has_item)
        self.action_archive.setEnabled(has_item)
        if state.modal is Modal.NONE or state.modal is Modal.INSPECTING:
            self.statusBar().showMessage(position_message(state.active_index, state.collection_length))

    def _handle_index_choice(self, item_id: str) -> None:
        if self.machine.modal is not Modal.NONE and self.machine.modal is not Modal.INSPECTING:
            return
        self.machine.focus_item(item_id)
        self.dashboard.setFocus()

    def _handle_add(self) -> None:
        dialog = RecordDialog(self)
        if dialog.exec():
            record = self.collection.add(dialog.fields())
            log_info(f"Added {record.get(FIELD_TITLE, '')}", "UI")

    def _handle_edit(self) -> None:
        item = self.machine.active_item
        if item is None:
            return
        dialog = RecordDialog(self, item)
        if dialog.exec():
            self.collection.update(vinyl_id(item), dialog.fields())

    def _handle_delete(self) -> None:
        item = self.machine.active_item
        if item is None:
            return
        answer = QMessageBox.question(self, "Delete record", f"Delete \"{item.get(FIELD_TITLE, '')}\" from the vault?")
        if answer == QMessageBox.StandardButton.Yes:
            self.collection.delete(vinyl_id(item))

    def _handle_archive(self) -> None:
        item = self.machine.active_item
        if item is None:
            return
        ArchiveDialog(item, self.covers, self, theme=self.preferences.theme).exec()

    def _handle_theme_toggled(self) -> None:
        theme = Theme.DARK if self.action_theme.isChecked() else Theme.LIGHT
        self.apply_theme(theme)

    def apply_theme(self, theme: Theme, persist: bool = True) -> None:
        self.preferences.theme = theme
        self.action_theme.blockSignals(True)
        self.action_theme.setChecked(theme is Theme.DARK)
        self.action_theme.blockSignals(False)
        app = QApplication.instance()
        if app is not None:
            style.apply_app_style(app, theme)
        for panel in (self.dashboard, self.stats_panel, self.backup_panel, self.recommendation_panel):
            panel.apply_theme(theme)
        self.machine.set_theme(theme)
        if persist:
            save_preferences(self.preferences)

    def _show_shortcuts(self) -> None:
        text = "\n".join(f"{keys}: {what}" for keys, what in HELP_SHORTCUTS)
        QMessageBox.information(self, "Shortcuts", text)

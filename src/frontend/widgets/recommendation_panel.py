"""Side panel for asking the recommendation service for new albums."""
from __future__ import annotations

from typing import Callable, List

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from frontend.utils.ui_messages import RECOMMEND_EMPTY, RECOMMEND_LOADING, RECOMMEND_PLACEHOLDER
from frontend.widgets import style

from backend.models.navigation import Theme
from backend.models.vinyl import VinylData
from backend.services.recommendation_service import SUGGESTED_QUERIES, Recommendation, RecommendationController


class RecommendationPanel(QWidget):
    def __init__(
        self,
        controller: RecommendationController,
        items_provider: Callable[[], List[VinylData]],
        parent=None,
    ):
        super().__init__(parent)
        self.setObjectName("recommendation_card")
        self.controller = controller
        self._items_provider = items_provider

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 10, 12, 10)
        root.setSpacing(6)

        self.title = QLabel("Crate digger")
        root.addWidget(self.title)

        row = QHBoxLayout()
        self.query_edit = QLineEdit()
        self.query_edit.setPlaceholderText(RECOMMEND_PLACEHOLDER)
        self.btn_search = QPushButton("Ask")
        row.addWidget(self.query_edit, 1)
        row.addWidget(self.btn_search)
        root.addLayout(row)

        chips = QHBoxLayout()
        for query in SUGGESTED_QUERIES:
            chip = QPushButton(query)
            chip.setFocusPolicy(Qt.FocusPolicy.NoFocus)
            chip.clicked.connect(lambda _checked=False, q=query: self.run_query(q))
            chips.addWidget(chip)
        chips.addStretch(1)
        root.addLayout(chips)

        self.label_status = QLabel(RECOMMEND_EMPTY)
        self.label_status.setWordWrap(True)
        root.addWidget(self.label_status)

        self.results = QListWidget()
        self.results.setWordWrap(True)
        root.addWidget(self.results, 1)

        self.btn_search.clicked.connect(lambda: self.run_query(self.query_edit.text()))
        self.query_edit.returnPressed.connect(lambda: self.run_query(self.query_edit.text()))
        self.controller.loadingChanged.connect(self._handle_loading)
        self.controller.resultsReady.connect(self._show_results)
        self.controller.failed.connect(self._show_error)
        self.apply_theme(Theme.LIGHT)

    def apply_theme(self, theme: Theme) -> None:
        self.setStyleSheet(style.card_style("recommendation_card", theme))
        self.title.setStyleSheet(style.heading_style(theme=theme))

    def run_query(self, query: str) -> None:
        self.query_edit.setText(query)
        self.controller.search(query, self._items_provider())

    def _handle_loading(self, loading: bool) -> None:
        self.btn_search.setEnabled(not loading)
        if loading:
            self.results.clear()
            self.label_status.setText(RECOMMEND_LOADING)

    def _show_results(self, results: List[Recommendation]) -> None:
        self.results.clear()
        self.label_status.setText(f"{len(results)} picks for \"{self.controller.query}\"" if results else RECOMMEND_EMPTY)
        for rec in results:
            item = QListWidgetItem(f"{rec.album} · {rec.artist} ({rec.year}, {rec.genre})\n{rec.reason}")
            self.results.addItem(item)

    def _show_error(self, message: str) -> None:
        self.results.clear()
        self.label_status.setText(message)

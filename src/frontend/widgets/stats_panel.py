"""Reusable widget to display collection statistics."""
from __future__ import annotations

from typing import List, Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QGridLayout, QHBoxLayout, QLabel, QProgressBar, QPushButton, QVBoxLayout, QWidget

from frontend.widgets import style

from backend.models.navigation import Theme
from backend.models.vinyl import VinylData
from backend.services.collection_queries import CollectionStats, compute_stats
from common.log_utils import is_debug_enabled, log_debug


class StatsPanel(QWidget):
    closeRequested = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("stats_card")
        self._theme = Theme.LIGHT

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 10, 12, 10)
        root.setSpacing(6)

        header = QHBoxLayout()
        self.title = QLabel("Collection stats:")
        header.addWidget(self.title)
        header.addStretch(1)
        close_btn = QPushButton("Close")
        close_btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        close_btn.clicked.connect(self.closeRequested.emit)
        header.addWidget(close_btn)
        root.addLayout(header)

        self.content = QWidget(self)
        self.content.setObjectName("stats_panel_content")

        content_layout = QVBoxLayout(self.content)
        content_layout.setContentsMargins(8, 6, 8, 8)
        content_layout.setSpacing(6)

        grid = QGridLayout()
        grid.setContentsMargins(8, 6, 8, 8)
        grid.setHorizontalSpacing(16)
        grid.setVerticalSpacing(4)
        self.label_total = QLabel()
        self.label_top_genre = QLabel()
        self.label_top_artist = QLabel()
        self.label_avg_rating = QLabel()
        for label in (self.label_total, self.label_top_genre, self.label_top_artist, self.label_avg_rating):
            label.setTextInteractionFlags(
                Qt.TextInteractionFlag.TextSelectableByMouse
                | Qt.TextInteractionFlag.TextSelectableByKeyboard
            )
        grid.addWidget(self.label_total, 0, 0)
        grid.addWidget(self.label_avg_rating, 0, 1)
        grid.addWidget(self.label_top_genre, 1, 0)
        grid.addWidget(self.label_top_artist, 1, 1)
        grid.setColumnStretch(0, 1)
        grid.setColumnStretch(1, 1)
        content_layout.addLayout(grid)

        self.chart_title = QLabel("Genre distribution")
        content_layout.addWidget(self.chart_title)
        # Genre bars are rebuilt on every update
        self.chart_layout = QGridLayout()
        self.chart_layout.setHorizontalSpacing(10)
        content_layout.addLayout(self.chart_layout)
        content_layout.addStretch(1)

        root.addWidget(self.content)
        self._bars: List[QWidget] = []
        self.apply_theme(Theme.LIGHT)
        self.reset()

    def apply_theme(self, theme: Theme) -> None:
        self._theme = theme
        self.setStyleSheet(style.card_style("stats_card", theme))
        self.content.setStyleSheet(style.panel_body_style("stats_panel_content", theme))
        self.title.setStyleSheet(style.heading_style(theme=theme))
        self.chart_title.setStyleSheet(style.section_title_style(theme))
        for widget in self._bars:
            if isinstance(widget, QProgressBar):
                widget.setStyleSheet(style.bar_style(theme))

    def update_from_items(self, items: List[VinylData]) -> None:
        self.update_from_stats(compute_stats(items))

    def update_from_stats(self, stats: CollectionStats) -> None:
        if is_debug_enabled("storage"):
            log_debug(f"stats:update total={stats.total} chart={stats.chart_data}", "STATS")
        self.label_total.setText(f"<b>Total records:</b> {stats.total}")
        self.label_avg_rating.setText(f"<b>Average rating:</b> {stats.avg_rating}")
        self.label_top_genre.setText(f"<b>Top genre:</b> {stats.top_genre}")
        self.label_top_artist.setText(f"<b>Top artist:</b> {stats.top_artist}")
        self._rebuild_chart(stats)

    def _rebuild_chart(self, stats: CollectionStats) -> None:
        for widget in self._bars:
            self.chart_layout.removeWidget(widget)
            widget.deleteLater()
        self._bars = []
        peak = max((count for _, count in stats.chart_data), default=0)
        for row, (genre, count) in enumerate(stats.chart_data):
            name = QLabel(genre)
            bar = QProgressBar()
            bar.setRange(0, max(1, peak))
            bar.setValue(count)
            bar.setFormat(str(count))
            bar.setStyleSheet(style.bar_style(self._theme))
            self.chart_layout.addWidget(name, row, 0)
            self.chart_layout.addWidget(bar, row, 1)
            self._bars.extend([name, bar])

    def reset(self, empty: Optional[CollectionStats] = None) -> None:
        self.update_from_stats(empty or compute_stats([]))

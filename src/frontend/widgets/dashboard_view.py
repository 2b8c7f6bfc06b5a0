"""Browse surface: paints the stand/stack arrangement and feeds input to the router.

The widget owns the only key listener of the window. Mouse input is split
into drags (horizontal travel past the threshold) and clicks (everything
else, hit-tested against the cards painted last).
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from PyQt6.QtCore import QPointF, QRectF, Qt, QUrl
from PyQt6.QtGui import QColor, QDesktopServices, QFont, QPainter, QPen
from PyQt6.QtWidgets import QHBoxLayout, QPushButton, QSizePolicy, QVBoxLayout, QWidget

from frontend.services.cover_loader import CoverLoader
from frontend.utils.ui_messages import media_position_message, position_message, view_mode_message
from frontend.widgets import style

from backend.models.navigation import MediaKind, Modal, NavigationState, Theme, ViewMode
from backend.models.vinyl import (
    FIELD_ARTIST,
    FIELD_GENRE,
    FIELD_TITLE,
    FIELD_YEAR,
    VinylData,
    cover_url,
    rating,
    tracks,
    video_url,
)
from backend.services.input_router import InputRouter
from backend.services.media_archive import youtube_embed_url
from backend.services.navigation_controller import NavigationStateMachine
from common.log_utils import is_debug_enabled, log_debug

CARD_FILL = QColor("#26252b")


class DashboardView(QWidget):
    def __init__(
        self,
        machine: NavigationStateMachine,
        router: InputRouter,
        items_provider: Callable[[], List[VinylData]],
        covers: CoverLoader,
        parent=None,
    ):
        super().__init__(parent)
        self.machine = machine
        self.router = router
        self._items_provider = items_provider
        self.covers = covers
        self._theme = Theme.LIGHT
        self._state: NavigationState = machine.state()
        self._press_pos: Optional[QPointF] = None
        self._card_rects: List[Tuple[int, QRectF]] = []
        self._overlays: Dict[Modal, QWidget] = {}

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(480, 360)

        root = QVBoxLayout(self)
        root.setContentsMargins(8, 8, 8, 8)
        root.addStretch(1)
        bar = QHBoxLayout()
        self.btn_view = QPushButton("Stand / Stack")
        self.btn_inspect = QPushButton("Inspect")
        self.btn_images = QPushButton("Images")
        self.btn_video = QPushButton("Video")
        self.btn_open_video = QPushButton("Open video")
        for btn in (self.btn_view, self.btn_inspect, self.btn_images, self.btn_video, self.btn_open_video):
            btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
            bar.addWidget(btn)
        bar.addStretch(1)
        root.addLayout(bar)

        self.btn_view.clicked.connect(self.machine.toggle_view_mode)
        self.btn_inspect.clicked.connect(self._toggle_inspect)
        self.btn_images.clicked.connect(lambda: self.machine.open_media(MediaKind.IMAGE))
        self.btn_video.clicked.connect(lambda: self.machine.open_media(MediaKind.VIDEO))
        self.btn_open_video.clicked.connect(self._open_video_externally)

        self.machine.stateChanged.connect(self._handle_state)
        self.covers.pixmapReady.connect(lambda _url, _pix: self.update())
        self._sync_buttons()

    def apply_theme(self, theme: Theme) -> None:
        self._theme = theme
        self.update()

    def add_overlay(self, modal: Modal, widget: QWidget) -> None:
        """Host a panel shown while ``modal`` is the active layer."""
        widget.setParent(self)
        widget.hide()
        self._overlays[modal] = widget
        self._place_overlays()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._place_overlays()

    def _place_overlays(self) -> None:
        area = self.rect().adjusted(40, 40, -40, -40)
        for modal, widget in self._overlays.items():
            widget.setGeometry(area)
            visible = self._state.modal is modal
            widget.setVisible(visible)
            if visible:
                widget.raise_()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def keyPressEvent(self, event):
        try:
            key = Qt.Key(event.key())
        except ValueError:
            super().keyPressEvent(event)
            return
        if self.router.handle_key(key):
            event.accept()
            return
        super().keyPressEvent(event)

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._press_pos = event.position()
            self.setFocus()
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton or self._press_pos is None:
            super().mouseReleaseEvent(event)
            return
        offset = event.position().x() - self._press_pos.x()
        self._press_pos = None
        if abs(offset) > self.router.drag_threshold:
            self.router.handle_drag_release(offset)
        else:
            index = self._card_at(event.position())
            if index is not None:
                self.router.handle_card_click(index)
        event.accept()

    def _card_at(self, pos: QPointF) -> Optional[int]:
        # Rects are stored in paint order, topmost last.
        for index, rect in reversed(self._card_rects):
            if rect.contains(pos):
                return index
        return None

    def _toggle_inspect(self) -> None:
        if self.machine.modal is Modal.INSPECTING:
            self.machine.exit_inspecting()
        else:
            self.machine.enter_inspecting()

    def _open_video_externally(self) -> None:
        url = video_url(self.machine.active_item)
        if url:
            QDesktopServices.openUrl(QUrl(url))

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def _handle_state(self, state: NavigationState) -> None:
        if is_debug_enabled("nav"):
            log_debug(f"render {state}", "DASH")
        self._state = state
        self._sync_buttons()
        self._place_overlays()
        self.update()

    def _sync_buttons(self) -> None:
        state = self._state
        item = self.machine.active_item
        browse = state.modal in (Modal.NONE, Modal.INSPECTING)
        self.btn_view.setEnabled(state.modal is Modal.NONE and state.has_active)
        self.btn_inspect.setEnabled(browse and state.has_active)
        self.btn_inspect.setText("Back" if state.inspecting else "Inspect")
        self.btn_images.setEnabled(browse and bool(self.machine.active_images()))
        self.btn_video.setEnabled(browse and bool(video_url(item)))
        self.btn_open_video.setVisible(
            state.modal is Modal.MEDIA and state.media_view is not None and state.media_view.kind is MediaKind.VIDEO
        )

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def _card_size(self) -> float:
        return max(80.0, min(self.width(), self.height()) * 0.55)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        palette = style.palette_for(self._theme)
        painter.fillRect(self.rect(), QColor(palette.app_bg))
        self._card_rects = []

        state = self._state
        if not state.has_active:
            painter.setPen(QColor(palette.text_primary))
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, position_message(-1, 0))
            painter.end()
            return

        if state.modal is Modal.MEDIA:
            self._paint_media(painter, state)
        else:
            self._paint_cards(painter, state)
            self._paint_metadata(painter, state)
        if state.view_mode_notify:
            self._paint_notice(painter, view_mode_message(state.view_mode))
        painter.end()

    def _paint_cards(self, painter: QPainter, state: NavigationState) -> None:
        items = self._items_provider()
        size = self._card_size()
        center = QPointF(self.width() / 2.0, self.height() / 2.0 - 20.0)
        percent_x = state.view_mode is ViewMode.STAND and state.modal is Modal.NONE
        layouts = []
        for index in range(len(items)):
            layout = state.card_layout(index)
            if layout.visible:
                layouts.append((layout.z_order, index, layout))
        for _, index, layout in sorted(layouts):
            side = size * layout.scale
            dx = layout.x / 100.0 * size if percent_x else layout.x
            rect = QRectF(center.x() + dx - side / 2.0, center.y() + layout.y - side / 2.0, side, side)
            painter.setOpacity(max(0.0, min(1.0, layout.opacity)))
            if layout.rotate_y >= 180.0:
                self._paint_jacket_back(painter, rect, items[index])
            else:
                self._paint_cover(painter, rect, items[index])
            self._card_rects.append((index, rect))
        painter.setOpacity(1.0)

    def _paint_cover(self, painter: QPainter, rect: QRectF, item: VinylData) -> None:
        pixmap = self.covers.get(cover_url(item))
        if pixmap is None:
            painter.fillRect(rect, CARD_FILL)
            painter.setPen(QColor(style.TEXT_ON_DARK))
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter | Qt.TextFlag.TextWordWrap, str(item.get(FIELD_TITLE, "")))
            return
        painter.drawPixmap(rect.toRect(), pixmap)

    def _paint_jacket_back(self, painter: QPainter, rect: QRectF, item: VinylData) -> None:
        painter.fillRect(rect, CARD_FILL)
        painter.setPen(QColor(style.TEXT_ON_DARK))
        lines = ["SIDE A"] + tracks(item, "A") + ["", "SIDE B"] + tracks(item, "B")
        painter.drawText(rect.adjusted(14, 14, -14, -14), Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop, "\n".join(lines))

    def _paint_metadata(self, painter: QPainter, state: NavigationState) -> None:
        item = self.machine.active_item
        if item is None:
            return
        # Text sits over the active cover so its tone follows the cover.
        painter.setPen(QColor(style.metadata_color(state.text_contrast)))
        size = self._card_size()
        box = QRectF(
            self.width() / 2.0 - size / 2.0 + 10,
            self.height() / 2.0 - 20.0 + size / 2.0 - 70,
            size - 20,
            60,
        )
        title_font = QFont(painter.font())
        title_font.setBold(True)
        painter.setFont(title_font)
        painter.drawText(box, Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop, str(item.get(FIELD_TITLE, "")))
        painter.setFont(QFont(self.font()))
        stars = "★" * rating(item)
        detail = f"{item.get(FIELD_ARTIST, '')} · {item.get(FIELD_YEAR, '')} · {item.get(FIELD_GENRE, '')}  {stars}"
        painter.drawText(box, Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignBottom, detail)

        palette = style.palette_for(self._theme)
        painter.setPen(QColor(palette.text_primary))
        painter.drawText(
            QRectF(0, 8, self.width() - 12, 24),
            Qt.AlignmentFlag.AlignRight,
            position_message(state.active_index, state.collection_length),
        )

    def _paint_media(self, painter: QPainter, state: NavigationState) -> None:
        painter.fillRect(self.rect(), QColor("#0b0b0d"))
        painter.setPen(QColor(style.TEXT_ON_DARK))
        view = state.media_view
        area = QRectF(self.rect()).adjusted(24, 24, -24, -64)
        if view is None:
            return
        if view.kind is MediaKind.VIDEO:
            embed = youtube_embed_url(video_url(self.machine.active_item))
            painter.drawText(area, Qt.AlignmentFlag.AlignCenter, embed or video_url(self.machine.active_item))
            return
        images = self.machine.active_images()
        if not images:
            return
        url = images[view.index % len(images)]
        pixmap = self.covers.get(url)
        if pixmap is not None:
            scaled = pixmap.scaled(
                area.size().toSize(),
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            )
            x = area.x() + (area.width() - scaled.width()) / 2.0
            y = area.y() + (area.height() - scaled.height()) / 2.0
            painter.drawPixmap(int(x), int(y), scaled)
        else:
            placeholder = "Image unavailable" if self.covers.has_failed(url) else "Loading…"
            painter.drawText(area, Qt.AlignmentFlag.AlignCenter, placeholder)
        painter.drawText(
            QRectF(0, self.height() - 56, self.width(), 24),
            Qt.AlignmentFlag.AlignCenter,
            media_position_message(view.index, len(images)),
        )

    def _paint_notice(self, painter: QPainter, text: str) -> None:
        rect = QRectF(self.width() / 2.0 - 90, 14, 180, 30)
        painter.setPen(QPen(QColor(style.ACCENT)))
        painter.setBrush(QColor(style.ACCENT))
        painter.drawRoundedRect(rect, 14, 14)
        painter.setPen(QColor(style.TEXT_ON_DARK))
        painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, text)

"""Navigation state machine for browsing the vault.

Owns the active index, the Stand/Stack view mode and the modal layer
(inspection, media viewer, stats and backup overlays). Modal layers are
mutually exclusive by construction: there is a single ``Modal`` value.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from backend.models.navigation import (
    MediaKind,
    MediaView,
    Modal,
    NavigationState,
    Overlay,
    TextContrast,
    Theme,
    ViewMode,
)
from backend.models.vinyl import VinylData, additional_images, cover_url, video_url, vinyl_id
from backend.services.contrast_controller import ContrastController
from common.log_utils import is_debug_enabled, log_debug
from config import get_config

_ITEM_MODALS = (Modal.INSPECTING, Modal.MEDIA)
_OVERLAY_MODALS = {Overlay.STATS: Modal.STATS, Overlay.BACKUP: Modal.BACKUP}


class NavigationStateMachine(QObject):
    """Session-scoped browse/inspect state for the dashboard."""

    stateChanged = pyqtSignal(object)  # NavigationState
    activeIndexChanged = pyqtSignal(int)
    viewModeChanged = pyqtSignal(str)
    modalChanged = pyqtSignal(str)

    def __init__(
        self,
        items: Optional[Sequence[VinylData]] = None,
        *,
        contrast: Optional[ContrastController] = None,
        theme: Theme = Theme.LIGHT,
        initial_item_id: Optional[str] = None,
        notify_ms: Optional[int] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        """Initialize the state machine.

        Args:
            items: Current collection (read-only view; the controller owns it)
            contrast: Contrast controller, created on the global pool if omitted
            theme: Ambient theme used when the active record has no cover
            initial_item_id: Open straight into Stack + Inspecting on this record
            notify_ms: Duration of the view-mode notification flag
            parent: Optional parent QObject
        """
        super().__init__(parent)
        config = get_config()
        self._items: List[VinylData] = list(items or [])
        self._theme = theme
        self._active_index = 0
        self._active_id: Optional[str] = None
        self._active_cover = ""
        self._view_mode = ViewMode.STAND
        self._modal = Modal.NONE
        self._media_view: Optional[MediaView] = None
        self._media_return = Modal.NONE
        self._jacket_flipped = False
        self._view_mode_notify = False
        self._stand_window = config.stand_render_window
        self._stack_window = config.stack_render_window
        self._last_state: Optional[NavigationState] = None

        self._notify_timer = QTimer(self)
        self._notify_timer.setSingleShot(True)
        self._notify_timer.setInterval(config.view_mode_notify_ms if notify_ms is None else notify_ms)
        self._notify_timer.timeout.connect(self._clear_view_mode_notify)

        self._contrast = contrast or ContrastController(parent=self)
        self._contrast.contrastChanged.connect(self._handle_contrast_changed)

        if self._items:
            self._active_id = vinyl_id(self._items[0])
            self._active_cover = cover_url(self._items[0])
        self._refresh_contrast()
        if initial_item_id is not None:
            self.focus_item(initial_item_id)
        self._publish()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def active_index(self) -> int:
        """Index of the active record, -1 when the collection is empty."""
        return self._active_index if self._items else -1

    @property
    def active_item(self) -> Optional[VinylData]:
        if not self._items:
            return None
        return self._items[self._active_index]

    @property
    def view_mode(self) -> ViewMode:
        return self._view_mode

    @property
    def modal(self) -> Modal:
        return self._modal

    @property
    def media_view(self) -> Optional[MediaView]:
        return self._media_view

    @property
    def jacket_flipped(self) -> bool:
        return self._jacket_flipped

    @property
    def text_contrast(self) -> TextContrast:
        return self._contrast.text_contrast

    @property
    def view_mode_notify(self) -> bool:
        return self._view_mode_notify

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def collection_length(self) -> int:
        return len(self._items)

    def state(self) -> NavigationState:
        return NavigationState(
            active_index=self.active_index,
            collection_length=len(self._items),
            view_mode=self._view_mode,
            modal=self._modal,
            jacket_flipped=self._jacket_flipped,
            media_view=self._media_view,
            text_contrast=self.text_contrast,
            view_mode_notify=self._view_mode_notify,
            stand_render_window=self._stand_window,
            stack_render_window=self._stack_window,
        )

    def active_images(self) -> List[str]:
        return additional_images(self.active_item)

    # ------------------------------------------------------------------
    # Collection synchronisation
    # ------------------------------------------------------------------

    def set_collection(self, items: Sequence[VinylData]) -> None:
        """Re-sync after the collection changed.

        The active record stays active if it still exists. Otherwise the old
        index is clamped to the new bounds and item-bound modals close.
        """
        self._items = list(items)
        if not self._items:
            self._active_index = 0
            self._active_id = None
            self._active_cover = ""
            self._jacket_flipped = False
            if self._modal in _ITEM_MODALS:
                self._set_modal(Modal.NONE)
            self._media_return = Modal.NONE
            self._refresh_contrast()
            self._publish()
            return

        target = self._index_of(self._active_id)
        if target is None:
            if self._active_id is not None and self._modal in _ITEM_MODALS:
                if is_debug_enabled("nav"):
                    log_debug(f"Active record {self._active_id} removed, closing {self._modal.value}", "NAV")
                self._set_modal(Modal.NONE)
                self._media_return = Modal.NONE
            target = min(self._active_index, len(self._items) - 1)
        self._move_to(target, force_sync=True)
        self._normalize_media_view()
        self._publish()

    def focus_item(self, item_id: str) -> bool:
        """Make ``item_id`` active and open it in Stack + Inspecting."""
        index = self._index_of(item_id)
        if index is None:
            return False
        self._move_to(index)
        self._set_view_mode(ViewMode.STACK, notify=False)
        self._set_modal(Modal.INSPECTING)
        self._publish()
        return True

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def advance(self) -> bool:
        return self._step(1)

    def retreat(self) -> bool:
        return self._step(-1)

    def set_active_index(self, index: int) -> bool:
        """Jump to ``index``, clamped into the collection bounds."""
        if not self._items:
            return False
        changed = self._move_to(max(0, min(index, len(self._items) - 1)))
        self._publish()
        return changed

    def toggle_view_mode(self) -> bool:
        """Stand <-> Stack. Ignored while any layer is open."""
        if self._modal is not Modal.NONE:
            return False
        target = ViewMode.STACK if self._view_mode is ViewMode.STAND else ViewMode.STAND
        self._set_view_mode(target)
        self._publish()
        return True

    def collapse_to_stand(self) -> bool:
        if self._view_mode is not ViewMode.STACK:
            return False
        self._set_view_mode(ViewMode.STAND)
        self._publish()
        return True

    def select(self, index: int) -> bool:
        """Card click. Returns False for ignored clicks."""
        if self._modal is not Modal.NONE or not 0 <= index < len(self._items):
            return False
        if index != self._active_index:
            self._move_to(index)
        elif self._view_mode is ViewMode.STAND:
            self._set_view_mode(ViewMode.STACK)
        else:
            self._set_modal(Modal.INSPECTING)
        self._publish()
        return True

    def enter_inspecting(self) -> bool:
        if not self._items or self._modal is Modal.INSPECTING:
            return False
        self._set_modal(Modal.INSPECTING)
        self._publish()
        return True

    def exit_inspecting(self) -> bool:
        if self._modal is not Modal.INSPECTING:
            return False
        self._set_modal(Modal.NONE)
        self._publish()
        return True

    def flip_jacket(self) -> bool:
        if self._modal is not Modal.INSPECTING:
            return False
        self._jacket_flipped = not self._jacket_flipped
        self._publish()
        return True

    def open_media(self, kind: MediaKind, start_index: int = 0) -> bool:
        """Open the media viewer for the active record."""
        if self._modal not in (Modal.NONE, Modal.INSPECTING) or not self._items:
            return False
        if kind is MediaKind.IMAGE:
            images = self.active_images()
            if not images:
                return False
            view = MediaView(MediaKind.IMAGE, start_index % len(images))
        else:
            if not video_url(self.active_item):
                return False
            view = MediaView(MediaKind.VIDEO, 0)
        self._media_return = self._modal
        self._set_modal(Modal.MEDIA, media_view=view)
        self._publish()
        return True

    def close_media(self) -> bool:
        if self._modal is not Modal.MEDIA:
            return False
        target = self._media_return if self._items else Modal.NONE
        self._media_return = Modal.NONE
        self._set_modal(target)
        self._publish()
        return True

    def navigate_media(self, direction: int) -> bool:
        """Page the image viewer with wraparound. No-op on an empty list."""
        view = self._media_view
        if self._modal is not Modal.MEDIA or view is None or view.kind is not MediaKind.IMAGE:
            return False
        count = len(self.active_images())
        if count == 0:
            return False
        step = 1 if direction > 0 else -1
        self._media_view = MediaView(MediaKind.IMAGE, (view.index + step) % count)
        self._publish()
        return True

    def toggle_overlay(self, which: Overlay) -> None:
        target = _OVERLAY_MODALS[which]
        self._set_modal(Modal.NONE if self._modal is target else target)
        self._media_return = Modal.NONE
        self._publish()

    def close_overlay(self) -> bool:
        if self._modal not in (Modal.STATS, Modal.BACKUP):
            return False
        self._set_modal(Modal.NONE)
        self._publish()
        return True

    def set_theme(self, theme: Theme) -> None:
        if theme is self._theme:
            return
        self._theme = theme
        if not self._active_cover:
            self._refresh_contrast()
        self._publish()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _step(self, delta: int) -> bool:
        if self._modal is Modal.MEDIA:
            view = self._media_view
            if view is not None and view.kind is MediaKind.IMAGE:
                return self.navigate_media(delta)
            return False
        if self._modal not in (Modal.NONE, Modal.INSPECTING) or not self._items:
            return False
        target = max(0, min(self._active_index + delta, len(self._items) - 1))
        changed = self._move_to(target)
        self._publish()
        return changed

    def _index_of(self, item_id: Optional[str]) -> Optional[int]:
        if item_id is None:
            return None
        for idx, item in enumerate(self._items):
            if vinyl_id(item) == item_id:
                return idx
        return None

    def _move_to(self, index: int, *, force_sync: bool = False) -> bool:
        """Point at ``index``; resets the jacket and resamples contrast when the record changes."""
        item = self._items[index]
        new_id = vinyl_id(item)
        new_cover = cover_url(item)
        index_changed = index != self._active_index
        item_changed = new_id != self._active_id
        cover_changed = new_cover != self._active_cover

        self._active_index = index
        self._active_id = new_id
        self._active_cover = new_cover
        if index_changed or item_changed:
            self._jacket_flipped = False
        if index_changed or item_changed or cover_changed:
            if is_debug_enabled("nav"):
                log_debug(f"active -> {index} ({new_id})", "NAV")
            self._refresh_contrast()
        if index_changed:
            self.activeIndexChanged.emit(index)
        return index_changed or (force_sync and item_changed)

    def _refresh_contrast(self) -> None:
        self._contrast.request(self._active_id, self._active_cover, self._theme)

    def _set_view_mode(self, mode: ViewMode, *, notify: bool = True) -> None:
        if mode is self._view_mode:
            return
        self._view_mode = mode
        if notify:
            self._view_mode_notify = True
            self._notify_timer.start()
        self.viewModeChanged.emit(mode.value)

    def _set_modal(self, modal: Modal, *, media_view: Optional[MediaView] = None) -> None:
        self._media_view = media_view if modal is Modal.MEDIA else None
        if modal is self._modal:
            return
        if is_debug_enabled("nav"):
            log_debug(f"modal {self._modal.value} -> {modal.value}", "NAV")
        self._modal = modal
        self.modalChanged.emit(modal.value)

    def _normalize_media_view(self) -> None:
        view = self._media_view
        if self._modal is not Modal.MEDIA or view is None:
            return
        if view.kind is MediaKind.VIDEO:
            if not video_url(self.active_item):
                self.close_media()
            return
        images = self.active_images()
        if not images:
            self.close_media()
            return
        self._media_view = MediaView(MediaKind.IMAGE, view.index % len(images))

    def _clear_view_mode_notify(self) -> None:
        if self._view_mode_notify:
            self._view_mode_notify = False
            self._publish()

    def _handle_contrast_changed(self, _value: str) -> None:
        self._publish()

    def _publish(self) -> None:
        state = self.state()
        if state == self._last_state:
            return
        self._last_state = state
        self.stateChanged.emit(state)

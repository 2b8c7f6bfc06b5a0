"""Routes keyboard, drag and click input to the navigation state machine.

One ordered dispatch per event; the first matching layer wins:
media viewer, then overlays, then inspection, then plain browsing.
"""
from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt

from backend.models.navigation import MediaKind, Modal, ViewMode
from backend.services.navigation_controller import NavigationStateMachine
from common.log_utils import is_debug_enabled, log_debug
from config import get_config

_ACTIVATE_KEYS = (Qt.Key.Key_Space, Qt.Key.Key_Enter, Qt.Key.Key_Return)


class InputRouter:
    """Interprets raw input against the current navigation state."""

    def __init__(
        self,
        machine: NavigationStateMachine,
        drag_threshold: Optional[int] = None,
    ) -> None:
        self.machine = machine
        self.drag_threshold = (
            get_config().drag_threshold_px if drag_threshold is None else drag_threshold
        )

    def handle_key(self, key: Qt.Key) -> bool:
        """Dispatch a key press. Returns True if the key was consumed."""
        machine = self.machine
        modal = machine.modal
        if is_debug_enabled("nav"):
            log_debug(f"key {key} in modal={modal.value} view={machine.view_mode.value}", "NAV")

        if modal is Modal.MEDIA:
            if key == Qt.Key.Key_Escape:
                machine.close_media()
                return True
            view = machine.media_view
            if view is not None and view.kind is MediaKind.IMAGE:
                if key == Qt.Key.Key_Right:
                    machine.navigate_media(1)
                    return True
                if key == Qt.Key.Key_Left:
                    machine.navigate_media(-1)
                    return True
            # Everything else is swallowed while the viewer is up.
            return True

        if modal in (Modal.STATS, Modal.BACKUP):
            if key == Qt.Key.Key_Escape:
                machine.close_overlay()
            return True

        if modal is Modal.INSPECTING:
            if key == Qt.Key.Key_Escape:
                machine.exit_inspecting()
            elif key == Qt.Key.Key_Right:
                machine.advance()
            elif key == Qt.Key.Key_Left:
                machine.retreat()
            elif key in _ACTIVATE_KEYS:
                machine.flip_jacket()
            else:
                return False
            return True

        if key == Qt.Key.Key_Escape:
            machine.collapse_to_stand()
            return True
        if key == Qt.Key.Key_Right:
            machine.advance()
            return True
        if key == Qt.Key.Key_Left:
            machine.retreat()
            return True
        if key in _ACTIVATE_KEYS:
            if machine.view_mode is ViewMode.STAND:
                machine.toggle_view_mode()
            else:
                machine.enter_inspecting()
            return True
        return False

    def handle_drag_release(self, offset_x: float) -> bool:
        """Horizontal drag released after ``offset_x`` pixels.

        Dragging left past the threshold advances, right retreats. Ignored
        while any modal layer is open.
        """
        if self.machine.modal is not Modal.NONE:
            return False
        if offset_x < -self.drag_threshold:
            return self.machine.advance()
        if offset_x > self.drag_threshold:
            return self.machine.retreat()
        return False

    def handle_card_click(self, index: int) -> bool:
        return self.machine.select(index)

"""Navigation state types: view modes, modal layer and render snapshot."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ViewMode(str, Enum):
    STAND = "stand"
    STACK = "stack"


class Modal(str, Enum):
    """Mutually exclusive full-screen layers above the browse view."""

    NONE = "none"
    INSPECTING = "inspecting"
    MEDIA = "media"
    STATS = "stats"
    BACKUP = "backup"


class MediaKind(str, Enum):
    VIDEO = "video"
    IMAGE = "image"


class Overlay(str, Enum):
    STATS = "stats"
    BACKUP = "backup"


class TextContrast(str, Enum):
    """Tone of the text drawn over the active cover.

    LIGHT text goes on dark covers, DARK text on light covers.
    """

    LIGHT = "light"
    DARK = "dark"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class MediaView:
    kind: MediaKind
    index: int = 0


@dataclass(frozen=True)
class CardLayout:
    """Presentation hints for a single card in the current arrangement."""

    visible: bool
    x: float  # stand: percent of card width, stack: pixels
    y: float
    scale: float
    opacity: float
    z_order: int
    rotate_y: float = 0.0


HIDDEN_CARD = CardLayout(visible=False, x=0.0, y=0.0, scale=1.0, opacity=0.0, z_order=0)


@dataclass(frozen=True)
class NavigationState:
    """Render-relevant snapshot emitted by the navigation state machine.

    ``active_index`` is -1 when the collection is empty. ``media_view`` is
    only set while ``modal`` is MEDIA.
    """

    active_index: int
    collection_length: int
    view_mode: ViewMode
    modal: Modal
    jacket_flipped: bool
    media_view: Optional[MediaView]
    text_contrast: TextContrast
    view_mode_notify: bool
    stand_render_window: int = 2
    stack_render_window: int = 5

    @property
    def inspecting(self) -> bool:
        return self.modal is Modal.INSPECTING

    @property
    def stats_open(self) -> bool:
        return self.modal is Modal.STATS

    @property
    def backup_open(self) -> bool:
        return self.modal is Modal.BACKUP

    @property
    def has_active(self) -> bool:
        return self.active_index >= 0

    def card_layout(self, index: int) -> CardLayout:
        """Layout for card ``index`` relative to the active card."""
        if not self.has_active or index < 0 or index >= self.collection_length:
            return HIDDEN_CARD
        offset = index - self.active_index
        distance = abs(offset)

        if self.modal in (Modal.INSPECTING, Modal.MEDIA):
            if offset != 0:
                return HIDDEN_CARD
            return CardLayout(
                visible=True,
                x=0.0,
                y=0.0,
                scale=1.0,
                opacity=1.0,
                z_order=100,
                rotate_y=180.0 if self.jacket_flipped else 0.0,
            )

        if self.view_mode is ViewMode.STAND:
            if distance > self.stand_render_window:
                return HIDDEN_CARD
            return CardLayout(
                visible=True,
                x=offset * 110.0,
                y=0.0,
                scale=1.0 - distance * 0.1,
                opacity=1.0 - distance * 0.2,
                z_order=100 - distance,
                rotate_y=offset * -10.0,
            )

        if distance > self.stack_render_window:
            return HIDDEN_CARD
        return CardLayout(
            visible=True,
            x=offset * 20.0,
            y=-offset * 20.0,
            scale=1.0 - distance * 0.05,
            opacity=1.0,
            z_order=100 - distance,
            rotate_y=-20.0,
        )

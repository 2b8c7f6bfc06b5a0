from __future__ import annotations

import pytest
from PyQt6.QtCore import Qt

from backend.models.navigation import MediaKind, Modal, Overlay, ViewMode
from backend.services.input_router import InputRouter
from conftest import make_record, make_records


@pytest.fixture
def router(make_machine):
    items = make_records(4)
    items[0]["additionalImages"] = ["https://img.example/a.jpg", "https://img.example/b.jpg"]
    return InputRouter(make_machine(items))


def test_browse_keys(router):
    machine = router.machine
    assert router.handle_key(Qt.Key.Key_Right) is True
    assert machine.active_index == 1
    router.handle_key(Qt.Key.Key_Left)
    assert machine.active_index == 0


def test_space_promotes_stand_then_inspects(router):
    machine = router.machine
    router.handle_key(Qt.Key.Key_Space)
    assert machine.view_mode is ViewMode.STACK
    router.handle_key(Qt.Key.Key_Return)
    assert machine.modal is Modal.INSPECTING


def test_escape_collapses_stack(router):
    machine = router.machine
    machine.toggle_view_mode()
    router.handle_key(Qt.Key.Key_Escape)
    assert machine.view_mode is ViewMode.STAND


def test_inspecting_keys(router):
    machine = router.machine
    machine.enter_inspecting()
    router.handle_key(Qt.Key.Key_Enter)
    assert machine.jacket_flipped is True
    router.handle_key(Qt.Key.Key_Right)
    assert machine.active_index == 1
    assert machine.jacket_flipped is False
    router.handle_key(Qt.Key.Key_Escape)
    assert machine.modal is Modal.NONE


def test_unhandled_key_falls_through(router):
    assert router.handle_key(Qt.Key.Key_A) is False


def test_media_viewer_takes_precedence(router):
    machine = router.machine
    machine.enter_inspecting()
    machine.open_media(MediaKind.IMAGE)

    router.handle_key(Qt.Key.Key_Right)
    assert machine.media_view.index == 1
    assert machine.active_index == 0
    # Swallowed, so the jacket underneath does not flip
    assert router.handle_key(Qt.Key.Key_Space) is True
    assert machine.jacket_flipped is False

    router.handle_key(Qt.Key.Key_Escape)
    assert machine.modal is Modal.INSPECTING
    router.handle_key(Qt.Key.Key_Escape)
    assert machine.modal is Modal.NONE


def test_overlay_only_listens_for_escape(router):
    machine = router.machine
    machine.toggle_overlay(Overlay.STATS)
    assert router.handle_key(Qt.Key.Key_Right) is True
    assert machine.active_index == 0
    router.handle_key(Qt.Key.Key_Escape)
    assert machine.modal is Modal.NONE


@pytest.mark.parametrize(
    "offset, expected",
    [(-41, 1), (-40, 0), (0, 0), (40, 0)],
)
def test_drag_threshold(router, offset, expected):
    router.handle_drag_release(offset)
    assert router.machine.active_index == expected


def test_drag_right_retreats(router):
    router.machine.set_active_index(2)
    assert router.handle_drag_release(55) is True
    assert router.machine.active_index == 1


def test_drag_disabled_under_modals(router):
    machine = router.machine
    machine.enter_inspecting()
    assert router.handle_drag_release(-200) is False
    assert machine.active_index == 0


def test_card_click(make_machine):
    router = InputRouter(make_machine([make_record("x"), make_record("y")]))
    assert router.handle_card_click(1) is True
    assert router.machine.active_index == 1

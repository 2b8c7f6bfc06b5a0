"""Shared UI strings and formatting helpers."""
from __future__ import annotations

from typing import Sequence, Tuple

from backend.models.navigation import ViewMode

WINDOW_TITLE = "Groove Vault"
STATUS_EMPTY_COLLECTION = "The vault is empty. Add a record or import a backup."
EXPORT_DIALOG_TITLE = "Export collection"
IMPORT_DIALOG_TITLE = "Import collection"
IMPORT_CONFIRM_TEXT = "Importing replaces the whole collection. Continue?"
BACKUP_FILE_FILTER = "JSON backup (*.json)"
RECOMMEND_PLACEHOLDER = "Ask for something: a mood, an era, a genre…"
RECOMMEND_EMPTY = "No recommendations yet."
RECOMMEND_LOADING = "Digging through the crates…"

HELP_SHORTCUTS: Sequence[Tuple[str, str]] = [
    ("← / →", "Previous / next record, or page images in the media viewer"),
    ("Space / Enter", "Stand → Stack, Stack → inspect, flip jacket while inspecting"),
    ("Esc", "Close the top layer, or collapse Stack back to Stand"),
    ("Drag", "Swipe more than 40 px left or right to move"),
]


def view_mode_message(mode: ViewMode) -> str:
    return "Stack view" if mode is ViewMode.STACK else "Stand view"


def position_message(index: int, total: int) -> str:
    if total <= 0 or index < 0:
        return STATUS_EMPTY_COLLECTION
    return f"{index + 1} / {total}"


def export_success_message(count: int, path: str) -> str:
    return f"Exported {count} records to {path}"


def export_failure_message(path: str, error: str) -> str:
    return f"Could not write {path}: {error}"


def import_success_message(count: int) -> str:
    return f"Imported {count} records."


def media_position_message(index: int, total: int) -> str:
    return f"{index + 1} / {total}" if total else ""

"""Shared UI style helpers for the vault window and its panels."""
from __future__ import annotations

from dataclasses import dataclass

from backend.models.navigation import TextContrast, Theme

BODY_FONT_SIZE = "14.5px"
HEADING_FONT_SIZE = 16.0
MONO_TEXT_STYLE = "font-family: 'JetBrains Mono', 'Fira Code', monospace; font-size: 12.5px;"

ACCENT = "#d9472b"  # label red used for badges and the active rating
TEXT_ON_DARK = "#f5f3ee"
TEXT_ON_LIGHT = "#17161a"


@dataclass(frozen=True)
class Palette:
    app_bg: str
    card_bg: str
    border: str
    text_primary: str
    text_title: str
    button_bg: str
    button_bg_hover: str
    select_bg: str


LIGHT_PALETTE = Palette(
    app_bg="#eceae4",  # warm paper
    card_bg="#f9f8f5",
    border="#dcd8cf",
    text_primary="#2b2a2f",
    text_title="#0f0f12",
    button_bg="#f9f8f5",
    button_bg_hover="#edeae3",
    select_bg="#f1d9d2",
)

DARK_PALETTE = Palette(
    app_bg="#141417",
    card_bg="#1d1d22",
    border="#2f2f36",
    text_primary="#d8d6d0",
    text_title="#f5f3ee",
    button_bg="#25252b",
    button_bg_hover="#303038",
    select_bg="#4a2a24",
)


def palette_for(theme: Theme) -> Palette:
    return DARK_PALETTE if theme is Theme.DARK else LIGHT_PALETTE


def metadata_color(contrast: TextContrast) -> str:
    """Foreground for text drawn over the active cover."""
    return TEXT_ON_DARK if contrast is TextContrast.LIGHT else TEXT_ON_LIGHT


def metadata_style(contrast: TextContrast) -> str:
    return f"color: {metadata_color(contrast)}; background: transparent; font-size: {BODY_FONT_SIZE};"


def card_style(object_name: str, theme: Theme = Theme.LIGHT) -> str:
    p = palette_for(theme)
    return (
        f"#{object_name} {{ background: {p.card_bg}; border-radius: 8px; }}"
        f"#{object_name} QLabel {{ color: {p.text_primary}; font-size: {BODY_FONT_SIZE}; background: transparent; }}"
    )


def panel_body_style(object_name: str, theme: Theme = Theme.LIGHT) -> str:
    p = palette_for(theme)
    return (
        f"#{object_name} {{ background: {p.card_bg}; border: 1px solid {p.border};"
        f" border-radius: 8px; padding: 10px 12px; font-size: {BODY_FONT_SIZE}; }}"
        f"#{object_name} QLabel {{ background: transparent; }}"
    )


def heading_style(size: float = HEADING_FONT_SIZE, theme: Theme = Theme.LIGHT) -> str:
    """Shared heading style for panel titles."""
    return f"font-size: {size}px; font-weight: 700; color: {palette_for(theme).text_title}; background: transparent;"


def section_title_style(theme: Theme = Theme.LIGHT) -> str:
    return (
        "font-size: 12.5px; font-weight: 700; text-transform: uppercase; letter-spacing: 0.55px;"
        f" color: {palette_for(theme).text_title};"
    )


def monospace_text_style() -> str:
    return MONO_TEXT_STYLE.replace("12.5px", BODY_FONT_SIZE)


def bar_style(theme: Theme = Theme.LIGHT) -> str:
    p = palette_for(theme)
    return (
        f"QProgressBar {{ border: 1px solid {p.border}; border-radius: 4px; background: {p.card_bg};"
        f" color: {p.text_primary}; text-align: right; }}"
        f"QProgressBar::chunk {{ background: {ACCENT}; border-radius: 3px; }}"
    )


def app_stylesheet(theme: Theme = Theme.LIGHT) -> str:
    """Application-wide stylesheet with consistent background and text colors."""
    p = palette_for(theme)
    return (
        f"QMainWindow {{ background: {p.app_bg}; color: {p.text_primary}; font-size: {BODY_FONT_SIZE}; }}"
        f"QDialog {{ background: {p.app_bg}; color: {p.text_primary}; font-size: {BODY_FONT_SIZE}; }}"
        f"QMessageBox {{ background: {p.app_bg}; color: {p.text_primary}; font-size: {BODY_FONT_SIZE}; }}"
        f"QWidget {{ color: {p.text_primary}; background: {p.app_bg}; font-size: {BODY_FONT_SIZE}; }}"
        f"QLabel {{ color: {p.text_primary}; background: transparent; font-size: {BODY_FONT_SIZE}; }}"
        f"QMenuBar {{ background: {p.card_bg}; color: {p.text_title}; }}"
        f"QMenuBar::item:selected {{ background: {p.button_bg_hover}; }}"
        f"QMenu {{ background: {p.card_bg}; color: {p.text_title}; }}"
        f"QMenu::item:selected {{ background: {p.button_bg_hover}; }}"
        f"QToolTip {{ color: {p.text_primary}; background-color: {p.card_bg}; border: 1px solid {p.border}; }}"
        f"QPushButton {{ color: {p.text_primary}; background: {p.button_bg};"
        f" border: 1px solid {p.border}; border-radius: 6px; padding: 5px 10px;"
        f" min-height: 24px; font-size: {BODY_FONT_SIZE}; }}"
        f"QPushButton:hover {{ background: {p.button_bg_hover}; border-color: {p.text_title}; }}"
        f"QPushButton:checked {{ background: {p.select_bg}; border-color: {ACCENT}; }}"
        f"QPushButton:disabled {{ color: #8d95a3; border-color: {p.border}; }}"
        f"QLineEdit, QTextEdit, QPlainTextEdit, QComboBox {{ background: {p.card_bg}; color: {p.text_primary};"
        f" border: 1px solid {p.border}; border-radius: 6px; padding: 6px; font-size: {BODY_FONT_SIZE};"
        f" selection-background-color: {p.select_bg}; selection-color: {p.text_primary}; }}"
        f"QListWidget {{ background: {p.card_bg}; border: 1px solid {p.border}; border-radius: 6px; }}"
    )


def apply_app_style(app, theme: Theme = Theme.LIGHT) -> None:
    """Apply the shared stylesheet to the given QApplication instance."""
    app.setStyleSheet(app_stylesheet(theme))

"""Form dialog for adding or editing a record."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from PyQt6.QtWidgets import (
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLineEdit,
    QPlainTextEdit,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from frontend.widgets import style

from backend.models.vinyl import (
    FIELD_ARTIST,
    FIELD_COVER,
    FIELD_FORMAT,
    FIELD_GENRE,
    FIELD_IMAGES,
    FIELD_NOTES,
    FIELD_RATING,
    FIELD_TITLE,
    FIELD_TRACKS_A,
    FIELD_TRACKS_B,
    FIELD_VIDEO,
    FIELD_YEAR,
    GENRES,
    RATING_MAX,
    RATING_MIN,
    clamp_rating,
)


def _lines(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def _year(text: str) -> Any:
    text = text.strip()
    return int(text) if text.isdigit() else text


class RecordDialog(QDialog):
    def __init__(self, parent=None, record: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(parent)
        self.record = dict(record or {})
        self.setWindowTitle("Edit record" if record else "Add record")
        self.setMinimumWidth(520)
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)

        card = QWidget(self)
        card.setObjectName("record_card")
        card.setStyleSheet(style.card_style("record_card"))
        form = QFormLayout(card)

        rec = self.record
        self.edit_title = QLineEdit(str(rec.get(FIELD_TITLE, "")))
        self.edit_artist = QLineEdit(str(rec.get(FIELD_ARTIST, "")))
        self.edit_year = QLineEdit(str(rec.get(FIELD_YEAR, "")))
        self.combo_genre = QComboBox()
        self.combo_genre.addItems(GENRES)
        genre = rec.get(FIELD_GENRE)
        if genre in GENRES:
            self.combo_genre.setCurrentText(genre)
        self.spin_rating = QSpinBox()
        self.spin_rating.setRange(RATING_MIN, RATING_MAX)
        self.spin_rating.setValue(clamp_rating(rec.get(FIELD_RATING, RATING_MAX)))
        self.edit_format = QLineEdit(str(rec.get(FIELD_FORMAT, "")))
        self.edit_cover = QLineEdit(str(rec.get(FIELD_COVER, "")))
        self.edit_video = QLineEdit(str(rec.get(FIELD_VIDEO, "")))
        self.edit_images = QPlainTextEdit("\n".join(rec.get(FIELD_IMAGES) or []))
        self.edit_tracks_a = QPlainTextEdit("\n".join(rec.get(FIELD_TRACKS_A) or []))
        self.edit_tracks_b = QPlainTextEdit("\n".join(rec.get(FIELD_TRACKS_B) or []))
        self.edit_notes = QPlainTextEdit(str(rec.get(FIELD_NOTES, "")))

        form.addRow("Title", self.edit_title)
        form.addRow("Artist", self.edit_artist)
        form.addRow("Year", self.edit_year)
        form.addRow("Genre", self.combo_genre)
        form.addRow("Rating", self.spin_rating)
        form.addRow("Format", self.edit_format)
        form.addRow("Cover URL", self.edit_cover)
        form.addRow("Video URL", self.edit_video)
        form.addRow("Extra images (one per line)", self.edit_images)
        form.addRow("Side A", self.edit_tracks_a)
        form.addRow("Side B", self.edit_tracks_b)
        form.addRow("Notes", self.edit_notes)
        layout.addWidget(card)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel)
        buttons.accepted.connect(self._accept_if_valid)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _accept_if_valid(self) -> None:
        if not self.edit_title.text().strip() or not self.edit_artist.text().strip():
            self.edit_title.setFocus()
            return
        self.accept()

    def fields(self) -> Dict[str, Any]:
        """Form values keyed by the persisted field names."""
        return {
            FIELD_TITLE: self.edit_title.text().strip(),
            FIELD_ARTIST: self.edit_artist.text().strip(),
            FIELD_YEAR: _year(self.edit_year.text()),
            FIELD_GENRE: self.combo_genre.currentText(),
            FIELD_RATING: self.spin_rating.value(),
            FIELD_FORMAT: self.edit_format.text().strip(),
            FIELD_COVER: self.edit_cover.text().strip(),
            FIELD_VIDEO: self.edit_video.text().strip(),
            FIELD_IMAGES: _lines(self.edit_images.toPlainText()),
            FIELD_TRACKS_A: _lines(self.edit_tracks_a.toPlainText()),
            FIELD_TRACKS_B: _lines(self.edit_tracks_b.toPlainText()),
            FIELD_NOTES: self.edit_notes.toPlainText().strip(),
        }

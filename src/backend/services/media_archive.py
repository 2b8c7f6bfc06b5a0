"""Media archive helpers: aggregated media list, description text and grid layouts."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping
from urllib.parse import parse_qs, urlparse

from backend.models.navigation import MediaKind
from backend.models.vinyl import (
    FIELD_ADDED_AT,
    FIELD_ARCHIVE,
    FIELD_ARTIST,
    FIELD_GENRE,
    FIELD_NOTES,
    FIELD_TITLE,
    FIELD_YEAR,
    additional_images,
    cover_url,
    video_url,
)

LAYOUT_PAD = "pad"
LAYOUT_SPAN = "span"


@dataclass(frozen=True)
class MediaItem:
    kind: MediaKind
    url: str


@dataclass(frozen=True)
class GridCell:
    item: MediaItem
    full_width: bool = False


def media_items(record: Mapping[str, Any]) -> List[MediaItem]:
    """Video first, then the cover, then the additional images."""
    items: List[MediaItem] = []
    video = video_url(record)
    if video:
        items.append(MediaItem(MediaKind.VIDEO, video))
    cover = cover_url(record)
    if cover:
        items.append(MediaItem(MediaKind.IMAGE, cover))
    items.extend(MediaItem(MediaKind.IMAGE, url) for url in additional_images(record))
    return items


def archive_description(record: Mapping[str, Any]) -> str:
    stored = record.get(FIELD_ARCHIVE)
    if isinstance(stored, str) and stored:
        return stored

    added = record.get(FIELD_ADDED_AT)
    try:
        catalogued = datetime.fromtimestamp(float(added) / 1000.0).strftime("%x")
    except (TypeError, ValueError, OverflowError, OSError):
        catalogued = "AN UNKNOWN DATE"
    notes = record.get(FIELD_NOTES)
    notes_text = f"NOTES: {notes.upper()}" if isinstance(notes, str) and notes else "NO SPECIFIC ARCHIVAL NOTES ATTACHED."
    return (
        f"ON {catalogued}, THE ARTIST KNOWN AS {record.get(FIELD_ARTIST, '')} WAS CATALOGED INTO THE SYSTEM. "
        f"THE RECORD, TITLED \"{record.get(FIELD_TITLE, '')}\", RELEASED IN {record.get(FIELD_YEAR, '')}, "
        "REPRESENTS A FRAGMENT OF AUDIO HISTORY PRESERVED IN VINYL FORMAT. "
        "THIS VISUAL ARCHIVE DECONSTRUCTS THE PHYSICAL ARTIFACT INTO ITS VISUAL COMPONENTS. "
        f"({record.get(FIELD_GENRE, '')}).\n\n{notes_text}"
    )


def youtube_video_id(url: str) -> str:
    """Video id from watch?v=, youtu.be/ or /embed/ URLs; empty when none found."""
    if not url:
        return ""
    try:
        parsed = urlparse(url)
    except ValueError:
        return ""
    if "v" in parse_qs(parsed.query):
        return parse_qs(parsed.query)["v"][0]
    host = (parsed.netloc or "").lower()
    path = parsed.path or ""
    if host.endswith("youtu.be"):
        return path.strip("/").split("/")[0]
    if "/embed/" in path:
        return path.split("/embed/", 1)[1].split("/")[0]
    return ""


def youtube_embed_url(url: str) -> str:
    video_id = youtube_video_id(url)
    return f"https://www.youtube.com/embed/{video_id}" if video_id else ""


def grid_layout(items: List[MediaItem], variant: str = LAYOUT_SPAN) -> List[GridCell]:
    """Two-column grid for the archive page.

    Odd counts are handled two ways: ``pad`` repeats the first item so every
    row is full, ``span`` lets the last item take the whole row.
    """
    cells = [GridCell(item) for item in items]
    if len(cells) % 2 == 0:
        return cells
    if variant == LAYOUT_PAD:
        return cells + [GridCell(items[0])]
    if variant == LAYOUT_SPAN:
        return cells[:-1] + [GridCell(items[-1], full_width=True)]
    raise ValueError(f"Unknown grid layout: {variant}")

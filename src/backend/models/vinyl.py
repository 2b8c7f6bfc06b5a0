"""Vinyl record helpers.

Records are plain dicts with the exact keys of the persisted JSON, so unknown
keys written by newer or older versions survive load, migration and export.
The helpers below give typed access without a hydrate/serialize step.
"""
from __future__ import annotations

import time
import uuid
from copy import deepcopy
from typing import Any, Dict, List, Mapping, Optional

VinylData = Dict[str, Any]

FIELD_ID = "id"
FIELD_TITLE = "title"
FIELD_ARTIST = "artist"
FIELD_YEAR = "year"
FIELD_GENRE = "genre"
FIELD_RATING = "rating"
FIELD_NOTES = "notes"
FIELD_COVER = "coverUrl"
FIELD_VIDEO = "videoUrl"
FIELD_IMAGES = "additionalImages"
FIELD_FORMAT = "format"
FIELD_TRACKS_A = "tracksSideA"
FIELD_TRACKS_B = "tracksSideB"
FIELD_ARCHIVE = "archiveDescription"
FIELD_ADDED_AT = "addedAt"

# Fields the user never edits
IMMUTABLE_FIELDS = frozenset({FIELD_ID, FIELD_ADDED_AT})

RATING_MIN = 1
RATING_MAX = 5

GENRES = [
    "Rock",
    "Jazz",
    "Electronic",
    "Hip Hop",
    "Classical",
    "Pop",
    "Soul",
    "Reggae",
    "Blues",
    "Metal",
    "Country",
    "Folk",
    "Other",
]


def now_ms() -> int:
    return int(time.time() * 1000)


def clamp_rating(value: Any) -> int:
    try:
        rating = int(value)
    except (TypeError, ValueError):
        return RATING_MIN
    return max(RATING_MIN, min(RATING_MAX, rating))


def create_vinyl(fields: Mapping[str, Any], *, added_at: Optional[int] = None) -> VinylData:
    """Build a new record from form fields with a fresh id and creation time."""
    record: VinylData = {k: deepcopy(v) for k, v in fields.items() if k not in IMMUTABLE_FIELDS}
    record[FIELD_ID] = str(uuid.uuid4())
    record[FIELD_ADDED_AT] = now_ms() if added_at is None else added_at
    record[FIELD_RATING] = clamp_rating(record.get(FIELD_RATING, RATING_MIN))
    return record


def apply_update(existing: Mapping[str, Any], fields: Mapping[str, Any]) -> VinylData:
    """Return ``existing`` with every editable field replaced by ``fields``."""
    updated = deepcopy(dict(existing))
    for key, value in fields.items():
        if key in IMMUTABLE_FIELDS:
            continue
        updated[key] = deepcopy(value)
    if FIELD_RATING in fields:
        updated[FIELD_RATING] = clamp_rating(fields[FIELD_RATING])
    return updated


def vinyl_id(record: Mapping[str, Any]) -> Optional[str]:
    value = record.get(FIELD_ID)
    return str(value) if value is not None else None


def cover_url(record: Optional[Mapping[str, Any]]) -> str:
    if not record:
        return ""
    value = record.get(FIELD_COVER)
    return value if isinstance(value, str) else ""


def video_url(record: Optional[Mapping[str, Any]]) -> str:
    if not record:
        return ""
    value = record.get(FIELD_VIDEO)
    return value if isinstance(value, str) else ""


def additional_images(record: Optional[Mapping[str, Any]]) -> List[str]:
    if not record:
        return []
    images = record.get(FIELD_IMAGES)
    if not isinstance(images, list):
        return []
    return [img for img in images if isinstance(img, str) and img]


def tracks(record: Mapping[str, Any], side: str) -> List[str]:
    """Track list for side ``"A"`` or ``"B"``."""
    key = FIELD_TRACKS_A if side.upper() == "A" else FIELD_TRACKS_B
    value = record.get(key)
    return [str(t) for t in value] if isinstance(value, list) else []


def rating(record: Mapping[str, Any]) -> int:
    return clamp_rating(record.get(FIELD_RATING, RATING_MIN))


def display_label(record: Mapping[str, Any]) -> str:
    """``"Title by Artist"``, the form used in recommendation context."""
    return f"{record.get(FIELD_TITLE, '')} by {record.get(FIELD_ARTIST, '')}"

"""Read-only queries over the collection: index filtering and statistics."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from backend.models.vinyl import FIELD_ADDED_AT, FIELD_ARTIST, FIELD_GENRE, FIELD_TITLE, VinylData, rating
from config import get_config

GENRE_ALL = "All"


def filter_and_sort(
    items: Sequence[VinylData],
    search: str = "",
    genre: str = GENRE_ALL,
) -> List[VinylData]:
    """Genre filter, then case-insensitive title/artist search, newest first."""
    result = list(items)
    if genre and genre != GENRE_ALL:
        result = [v for v in result if v.get(FIELD_GENRE) == genre]
    if search:
        needle = search.lower()
        result = [
            v for v in result
            if needle in str(v.get(FIELD_TITLE, "")).lower()
            or needle in str(v.get(FIELD_ARTIST, "")).lower()
        ]
    result.sort(key=lambda v: v.get(FIELD_ADDED_AT) or 0, reverse=True)
    return result


@dataclass(frozen=True)
class CollectionStats:
    total: int
    top_genre: str
    top_artist: str
    avg_rating: str
    chart_data: List[Tuple[str, int]] = field(default_factory=list)


def _most_common(counter: Counter) -> str:
    if not counter:
        return "N/A"
    # ties go to the first one seen
    return str(counter.most_common(1)[0][0])


def compute_stats(items: Sequence[VinylData], chart_limit: Optional[int] = None) -> CollectionStats:
    limit = get_config().stats_chart_limit if chart_limit is None else chart_limit
    genres: Counter = Counter()
    artists: Counter = Counter()
    total_rating = 0
    for item in items:
        genres[item.get(FIELD_GENRE, "")] += 1
        artists[item.get(FIELD_ARTIST, "")] += 1
        total_rating += rating(item)

    total = len(items)
    avg = f"{total_rating / total:.1f}" if total else "0.0"
    chart = [(str(name), count) for name, count in genres.most_common(limit)]
    return CollectionStats(
        total=total,
        top_genre=_most_common(genres),
        top_artist=_most_common(artists),
        avg_rating=avg,
        chart_data=chart,
    )

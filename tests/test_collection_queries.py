from __future__ import annotations

from backend.services.collection_queries import GENRE_ALL, compute_stats, filter_and_sort
from conftest import make_record


def _items():
    return [
        make_record("a", title="Kind of Blue", artist="Miles Davis", genre="Jazz", rating=5, addedAt=1),
        make_record("b", title="Blue Train", artist="John Coltrane", genre="Jazz", rating=4, addedAt=3),
        make_record("c", title="Discovery", artist="Daft Punk", genre="Electronic", rating=3, addedAt=2),
        make_record("d", title="Bitches Brew", artist="Miles Davis", genre="Jazz", rating=4, addedAt=4),
    ]


def test_filter_by_genre_and_search_newest_first():
    result = filter_and_sort(_items(), search="BLUE", genre="Jazz")
    assert [item["id"] for item in result] == ["b", "a"]


def test_search_matches_artist():
    result = filter_and_sort(_items(), search="daft")
    assert [item["id"] for item in result] == ["c"]


def test_all_genres_sorted_by_added():
    result = filter_and_sort(_items(), genre=GENRE_ALL)
    assert [item["id"] for item in result] == ["d", "b", "c", "a"]


def test_stats():
    stats = compute_stats(_items())
    assert stats.total == 4
    assert stats.top_genre == "Jazz"
    assert stats.top_artist == "Miles Davis"
    assert stats.avg_rating == "4.0"
    assert stats.chart_data == [("Jazz", 3), ("Electronic", 1)]


def test_stats_empty():
    stats = compute_stats([])
    assert (stats.total, stats.top_genre, stats.top_artist, stats.avg_rating) == (0, "N/A", "N/A", "0.0")
    assert stats.chart_data == []


def test_chart_limit():
    items = [make_record(str(i), genre=f"G{i}") for i in range(12)]
    assert len(compute_stats(items).chart_data) == 8
    assert len(compute_stats(items, chart_limit=3).chart_data) == 3

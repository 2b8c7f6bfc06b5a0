from __future__ import annotations

from backend.models.template_collection import initial_collection
from backend.models.vinyl import additional_images, apply_update, clamp_rating, create_vinyl, display_label, tracks


def test_clamp_rating():
    assert clamp_rating(0) == 1
    assert clamp_rating("4") == 4
    assert clamp_rating(11) == 5
    assert clamp_rating(None) == 1


def test_create_assigns_identity_and_time():
    record = create_vinyl({"title": "T", "artist": "A"}, added_at=123)
    assert record["addedAt"] == 123
    assert len(record["id"]) == 36
    assert record["rating"] == 1


def test_apply_update_is_a_copy():
    original = {"id": "1", "addedAt": 5, "title": "Old", "tracksSideA": ["x"]}
    updated = apply_update(original, {"title": "New", "tracksSideA": ["y"]})
    assert original["title"] == "Old"
    assert updated == {"id": "1", "addedAt": 5, "title": "New", "tracksSideA": ["y"]}


def test_accessors_tolerate_bad_shapes():
    record = {"additionalImages": "oops", "tracksSideB": None, "title": "T", "artist": "A"}
    assert additional_images(record) == []
    assert tracks(record, "B") == []
    assert display_label(record) == "T by A"


def test_template_timestamps_follow_reference():
    items = initial_collection(now=20_000_000)
    assert [item["addedAt"] for item in items] == [10_000_000, 15_000_000, 20_000_000]
    items[0]["title"] = "changed"
    assert initial_collection(now=1)[0]["title"] != "changed"

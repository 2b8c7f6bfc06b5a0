from __future__ import annotations

from backend.models.navigation import Theme
from backend.utils.preferences import Preferences, load_preferences, save_preferences


def test_defaults_when_missing(tmp_path):
    assert load_preferences(tmp_path / "nope.yaml") == Preferences()


def test_round_trip(tmp_path):
    path = tmp_path / "nested" / "preferences.yaml"
    assert save_preferences(Preferences(theme=Theme.DARK), path) is True
    assert load_preferences(path).theme is Theme.DARK


def test_invalid_values_fall_back(tmp_path):
    path = tmp_path / "preferences.yaml"
    path.write_text("theme: neon\n", encoding="utf-8")
    assert load_preferences(path).theme is Theme.LIGHT


def test_malformed_yaml(tmp_path):
    path = tmp_path / "preferences.yaml"
    path.write_text("theme: [unclosed\n", encoding="utf-8")
    assert load_preferences(path) == Preferences()

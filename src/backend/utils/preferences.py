"""UI preferences persisted as YAML next to the collection."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from backend.models.navigation import Theme
from common.log_utils import log_warning
from common.yaml_utils import load_yaml, save_yaml
from config import get_config


@dataclass
class Preferences:
    theme: Theme = Theme.LIGHT


def _preferences_path(path: Optional[Path]) -> Path:
    return path or get_config().preferences_path


def load_preferences(path: Optional[Path] = None) -> Preferences:
    """Read preferences; unknown or malformed values fall back to defaults."""
    raw = load_yaml(_preferences_path(path))
    prefs = Preferences()
    try:
        prefs.theme = Theme(str(raw.get("theme", prefs.theme.value)))
    except ValueError:
        pass
    return prefs


def save_preferences(prefs: Preferences, path: Optional[Path] = None) -> bool:
    target = _preferences_path(path)
    ok = save_yaml(target, {"theme": prefs.theme.value})
    if not ok:
        log_warning(f"Could not write preferences to {target}", "PREFS")
    return ok

"""Groove Vault settings: storage location, persistence keys and UI timings.

``GROOVE_VAULT_HOME`` relocates the storage directory; everything else is a
plain default on :class:`AppConfig`.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _default_storage_dir() -> Path:
    override = os.environ.get("GROOVE_VAULT_HOME", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "groove_vault"


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""

    # Persistence
    schema_version: int = 2
    storage_dir: Path = field(default_factory=_default_storage_dir)
    collection_key: str = "groovevault_collection"
    version_key: str = "groovevault_version"
    preferences_filename: str = "preferences.yaml"
    export_filename_prefix: str = "groove_vault_backup_"

    # Navigation
    view_mode_notify_ms: int = 2500
    drag_threshold_px: int = 40
    stand_render_window: int = 2
    stack_render_window: int = 5

    # Contrast sampling
    brightness_threshold: float = 127.5
    brightness_fetch_timeout_s: float = 5.0

    # Recommendations
    recommendation_model: str = "gemini-3-flash-preview"
    recommendation_min_rating: int = 4
    recommendation_context_limit: int = 5

    # Statistics overlay
    stats_chart_limit: int = 8

    @property
    def recommendation_api_key(self) -> str:
        """API key read lazily so tests can patch the environment."""
        return os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY") or ""

    @property
    def preferences_path(self) -> Path:
        return self.storage_dir / self.preferences_filename


# Global singleton instance
_CONFIG: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the global application configuration.

    Returns:
        AppConfig instance (singleton)
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = AppConfig()
    return _CONFIG


def reset_config() -> None:
    """Reset configuration to default (mainly for testing)."""
    global _CONFIG
    _CONFIG = None

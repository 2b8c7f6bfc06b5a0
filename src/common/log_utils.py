"""Centralized logging utilities with tqdm support and timestamps.

Output format: ``[HH:MM:SS.mmm] [LEVEL] [PREFIX] message``. INFO lines carry no
level tag. The level comes from ``LOG_LEVEL``; per-area debug output can be
switched on without going to full DEBUG through the ``DEBUG_*`` flags below.
"""
from __future__ import annotations

import os
import sys
from datetime import datetime
from typing import Dict, TextIO

from tqdm import tqdm

# ANSI color codes
COLOR_RESET = "\033[0m"
COLOR_RED = "\033[91m"
COLOR_YELLOW = "\033[93m"
COLOR_GRAY = "\033[90m"

LOG_LEVEL_DEBUG = 0
LOG_LEVEL_INFO = 1
LOG_LEVEL_WARNING = 2
LOG_LEVEL_ERROR = 3

_LEVEL_NAMES: Dict[str, int] = {
    "DEBUG": LOG_LEVEL_DEBUG,
    "INFO": LOG_LEVEL_INFO,
    "WARNING": LOG_LEVEL_WARNING,
    "ERROR": LOG_LEVEL_ERROR,
}

# category -> environment flag
DEBUG_FLAGS: Dict[str, str] = {
    "nav": "DEBUG_NAV",
    "storage": "DEBUG_STORAGE",
    "contrast": "DEBUG_CONTRAST",
    "timing": "DEBUG_TIMING",
}

_LOG_LEVEL = _LEVEL_NAMES.get(os.environ.get("LOG_LEVEL", "INFO").upper(), LOG_LEVEL_INFO)


def set_log_level(level: str) -> None:
    """Override the level picked from LOG_LEVEL. Unknown names are ignored."""
    global _LOG_LEVEL
    _LOG_LEVEL = _LEVEL_NAMES.get(level.upper(), _LOG_LEVEL)


def get_timestamp() -> str:
    return datetime.now().strftime("[%H:%M:%S.%f")[:-3] + "]"


def _format_message(message: str, prefix: str, level: str, color: str, stream: TextIO) -> str:
    parts = [get_timestamp()]
    if level:
        parts.append(f"[{level}]")
    if prefix:
        parts.append(f"[{prefix}]")
    parts.append(message)
    line = " ".join(parts)
    if color and stream.isatty():
        return f"{color}{line}{COLOR_RESET}"
    return line


def _emit(threshold: int, message: str, prefix: str, level: str = "", color: str = "") -> None:
    if _LOG_LEVEL > threshold:
        return
    stream = sys.stdout if threshold == LOG_LEVEL_INFO else sys.stderr
    # tqdm.write keeps log lines from tearing any active progress bar
    tqdm.write(_format_message(message, prefix, level, color, stream), file=stream)


def log_debug(message: str, prefix: str = "") -> None:
    _emit(LOG_LEVEL_DEBUG, message, prefix, "DEBUG", COLOR_GRAY)


def log_info(message: str, prefix: str = "") -> None:
    _emit(LOG_LEVEL_INFO, message, prefix)


def log_warning(message: str, prefix: str = "") -> None:
    _emit(LOG_LEVEL_WARNING, message, prefix, "WARNING", COLOR_YELLOW)


def log_error(message: str, prefix: str = "") -> None:
    _emit(LOG_LEVEL_ERROR, message, prefix, "ERROR", COLOR_RED)


def is_debug_enabled(category: str = "") -> bool:
    """Check if debug is enabled globally or for a specific category."""
    if _LOG_LEVEL <= LOG_LEVEL_DEBUG:
        return True
    flag = DEBUG_FLAGS.get(category)
    if flag is None:
        return False
    return os.environ.get(flag, "").lower() in {"1", "true", "on"}

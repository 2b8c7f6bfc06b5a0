"""Durable string key/value storage backed by one file per key."""
from __future__ import annotations

import os
import re
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from backend.errors import StorageWriteError
from common.log_utils import is_debug_enabled, log_debug

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")

# Serialise writes so a flush from a worker never interleaves with the UI thread.
_WRITE_LOCK = threading.Lock()


class FileKeyValueStorage:
    """Stores each key as ``<root>/<key>`` written atomically via a temp file."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / key

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            # Unreadable is indistinguishable from garbage for callers.
            if is_debug_enabled("storage"):
                log_debug(f"Read failed for {key}: {exc}", "STORE")
            return ""

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_name(f".{path.name}.tmp")
        with _WRITE_LOCK:
            try:
                self.root.mkdir(parents=True, exist_ok=True)
                tmp.write_text(value, encoding="utf-8")
                os.replace(tmp, path)
            except OSError as exc:
                try:
                    tmp.unlink()
                except OSError:
                    pass
                raise StorageWriteError(f"Cannot write {key}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise StorageWriteError(f"Cannot remove {key}: {exc}") from exc


class MemoryKeyValueStorage:
    """In-process storage with the same interface, used by tests and previews."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(initial or {})
        self.fail_writes = False

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"Quota exceeded writing {key}")
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)

"""Background fetch of cover and archive images for display."""
from __future__ import annotations

from collections import OrderedDict
from typing import Optional, Set

from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal
from PyQt6.QtGui import QPixmap

from backend.utils.brightness import read_image_bytes
from common.log_utils import log_debug
from config import get_config

PIXMAP_CACHE_LIMIT = 48
FAILED_URL_LIMIT = 256


class CoverFetchSignals(QObject):
    fetched = pyqtSignal(str, object)  # url, bytes | None


class CoverFetchTask(QRunnable):
    def __init__(self, url: str, timeout: float) -> None:
        super().__init__()
        self.url = url
        self.timeout = timeout
        self.signals = CoverFetchSignals()

    def run(self) -> None:
        try:
            data = read_image_bytes(self.url, self.timeout)
        except Exception as exc:  # noqa: BLE001
            log_debug(f"Cover fetch failed for {self.url}: {exc}", "COVERS")
            data = None
        try:
            self.signals.fetched.emit(self.url, data)
        except RuntimeError:
            pass


class CoverLoader(QObject):
    """Decodes fetched bytes into pixmaps on the GUI thread and caches them."""

    pixmapReady = pyqtSignal(str, QPixmap)
    fetchFailed = pyqtSignal(str)

    def __init__(self, thread_pool: Optional[QThreadPool] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._thread_pool = thread_pool or QThreadPool.globalInstance()
        self._cache: "OrderedDict[str, QPixmap]" = OrderedDict()
        self._inflight: Set[str] = set()
        # urls that could not be fetched or decoded; never retried until forgotten
        self._failed: "OrderedDict[str, None]" = OrderedDict()
        self._tasks: dict[str, CoverFetchTask] = {}

    def get(self, url: str) -> Optional[QPixmap]:
        """Cached pixmap for ``url``; schedules a fetch on a miss."""
        if not url or url in self._failed:
            return None
        pixmap = self._cache.get(url)
        if pixmap is not None:
            self._cache.move_to_end(url)
            return pixmap
        if url not in self._inflight:
            self._inflight.add(url)
            task = CoverFetchTask(url, get_config().brightness_fetch_timeout_s)
            task.signals.fetched.connect(self._handle_fetched)
            self._tasks[url] = task
            self._thread_pool.start(task)
        return None

    def _handle_fetched(self, url: str, data: Optional[bytes]) -> None:
        self._inflight.discard(url)
        self._tasks.pop(url, None)
        if not data:
            self._mark_failed(url)
            return
        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            self._mark_failed(url)
            return
        self._cache[url] = pixmap
        while len(self._cache) > PIXMAP_CACHE_LIMIT:
            self._cache.popitem(last=False)
        self.pixmapReady.emit(url, pixmap)

    def forget_failures(self) -> None:
        """Allow previously broken urls to be fetched again."""
        self._failed.clear()

    def has_failed(self, url: str) -> bool:
        return url in self._failed

    def _mark_failed(self, url: str) -> None:
        self._failed[url] = None
        while len(self._failed) > FAILED_URL_LIMIT:
            self._failed.popitem(last=False)
        self.fetchFailed.emit(url)

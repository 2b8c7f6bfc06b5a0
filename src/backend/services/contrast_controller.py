"""Asynchronous text-contrast selection for the active cover."""
from __future__ import annotations

from collections import OrderedDict
from typing import Callable, Dict, Optional

from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal

from backend.models.navigation import TextContrast, Theme
from backend.utils.brightness import Brightness, estimate_brightness
from common.log_utils import is_debug_enabled, log_debug

SAMPLE_CACHE_LIMIT = 256


def contrast_for_brightness(brightness: Brightness) -> TextContrast:
    """Light covers get dark text and dark covers get light text."""
    return TextContrast.DARK if brightness is Brightness.LIGHT else TextContrast.LIGHT


def contrast_for_theme(theme: Theme) -> TextContrast:
    return TextContrast.LIGHT if theme is Theme.DARK else TextContrast.DARK


class BrightnessTaskSignals(QObject):
    completed = pyqtSignal(int, str, str, str)  # token, item id, image ref, Brightness value
    finished = pyqtSignal(int)

    def __init__(self) -> None:
        super().__init__()


class BrightnessTask(QRunnable):
    def __init__(
        self,
        token: int,
        item_id: str,
        image_ref: str,
        estimator: Callable[[str], Brightness],
    ) -> None:
        super().__init__()
        self.token = token
        self.item_id = item_id
        self.image_ref = image_ref
        self.estimator = estimator
        self.signals = BrightnessTaskSignals()

    def run(self) -> None:
        try:
            result = self.estimator(self.image_ref)
        except Exception:  # noqa: BLE001
            result = Brightness.DARK
        try:
            self.signals.completed.emit(self.token, self.item_id, self.image_ref, Brightness(result).value)
            self.signals.finished.emit(self.token)
        except RuntimeError:
            # Signals object may be gone if the window closed mid-sample.
            pass


class ContrastController(QObject):
    """Keeps the text contrast in sync with the active cover.

    Each request bumps a token; a sample is applied only if its token and item
    id still match the latest request, so a slow sample for an item the user
    already left never repaints the current one. Until a sample arrives the
    previous contrast is kept. Finished samples are cached per cover, so going
    back to a cover already seen applies its contrast at once.
    """

    contrastChanged = pyqtSignal(str)

    def __init__(
        self,
        thread_pool: Optional[QThreadPool] = None,
        estimator: Callable[[str], Brightness] = estimate_brightness,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._thread_pool = thread_pool or QThreadPool.globalInstance()
        self._estimator = estimator
        self._token = 0
        self._pending_item: Optional[str] = None
        self._tasks: Dict[int, BrightnessTask] = {}
        self._contrast = TextContrast.LIGHT
        self._samples: "OrderedDict[str, Brightness]" = OrderedDict()

    @property
    def text_contrast(self) -> TextContrast:
        return self._contrast

    @property
    def pending_item(self) -> Optional[str]:
        return self._pending_item

    def request(self, item_id: Optional[str], cover_ref: str, theme: Theme) -> None:
        """Recompute contrast for ``item_id``; covers are sampled off-thread."""
        self._token += 1
        if not item_id or not cover_ref:
            self._pending_item = None
            self._apply(contrast_for_theme(theme))
            return

        cached = self._samples.get(cover_ref)
        if cached is not None:
            self._samples.move_to_end(cover_ref)
            self._pending_item = None
            self._apply(contrast_for_brightness(cached))
            return

        self._pending_item = item_id
        task = BrightnessTask(self._token, item_id, cover_ref, self._estimator)
        task.signals.completed.connect(self._handle_completed)
        task.signals.finished.connect(self._handle_finished)
        self._tasks[self._token] = task
        if is_debug_enabled("contrast"):
            log_debug(f"Sampling cover for {item_id} (token {self._token})", "CONTRAST")
        self._thread_pool.start(task)

    def cancel(self) -> None:
        """Invalidate any in-flight sample."""
        self._token += 1
        self._pending_item = None

    def _handle_completed(self, token: int, item_id: str, image_ref: str, value: str) -> None:
        brightness = Brightness(value)
        self._samples[image_ref] = brightness
        while len(self._samples) > SAMPLE_CACHE_LIMIT:
            self._samples.popitem(last=False)
        if token != self._token or item_id != self._pending_item:
            if is_debug_enabled("contrast"):
                log_debug(f"Discarding stale sample for {item_id} (token {token})", "CONTRAST")
            return
        self._pending_item = None
        self._apply(contrast_for_brightness(brightness))

    def _handle_finished(self, token: int) -> None:
        self._tasks.pop(token, None)

    def _apply(self, contrast: TextContrast) -> None:
        if contrast is self._contrast:
            return
        self._contrast = contrast
        self.contrastChanged.emit(contrast.value)

from __future__ import annotations

from backend.models.navigation import TextContrast, Theme
from backend.services.contrast_controller import (
    ContrastController,
    contrast_for_brightness,
    contrast_for_theme,
)
from backend.utils.brightness import Brightness


def test_mappings():
    assert contrast_for_brightness(Brightness.LIGHT) is TextContrast.DARK
    assert contrast_for_brightness(Brightness.DARK) is TextContrast.LIGHT
    assert contrast_for_theme(Theme.DARK) is TextContrast.LIGHT
    assert contrast_for_theme(Theme.LIGHT) is TextContrast.DARK


def test_no_cover_applies_theme_synchronously(qapp, pool):
    controller = ContrastController(thread_pool=pool)
    changes = []
    controller.contrastChanged.connect(changes.append)
    controller.request("a", "", Theme.LIGHT)
    assert pool.tasks == []
    assert controller.text_contrast is TextContrast.DARK
    assert changes == ["dark"]


def test_sample_applies_when_current(qapp, pool):
    controller = ContrastController(thread_pool=pool, estimator=lambda _ref: Brightness.LIGHT)
    controller.request("a", "cover.jpg", Theme.DARK)
    assert controller.pending_item == "a"
    pool.run_all()
    assert controller.text_contrast is TextContrast.DARK
    assert controller.pending_item is None


def test_previous_contrast_kept_until_sample_arrives(qapp, pool):
    controller = ContrastController(thread_pool=pool, estimator=lambda _ref: Brightness.LIGHT)
    controller.request("a", "cover.jpg", Theme.LIGHT)
    assert controller.text_contrast is TextContrast.LIGHT


def test_stale_sample_dropped(qapp, pool):
    samples = {"a.jpg": Brightness.LIGHT, "b.jpg": Brightness.DARK}
    controller = ContrastController(thread_pool=pool, estimator=samples.__getitem__)
    controller.request("a", "a.jpg", Theme.LIGHT)
    controller.request("b", "b.jpg", Theme.LIGHT)
    first, second = pool.tasks
    second.run()
    first.run()
    assert controller.text_contrast is TextContrast.LIGHT


def test_cancel_drops_inflight_sample(qapp, pool):
    controller = ContrastController(thread_pool=pool, estimator=lambda _ref: Brightness.LIGHT)
    controller.request("a", "a.jpg", Theme.LIGHT)
    controller.cancel()
    pool.run_all()
    assert controller.text_contrast is TextContrast.LIGHT


def test_estimator_errors_read_as_dark(qapp, pool):
    def boom(_ref):
        raise RuntimeError("network down")

    controller = ContrastController(thread_pool=pool, estimator=boom)
    controller.request("a", "a.jpg", Theme.LIGHT)
    pool.run_all()
    assert controller.text_contrast is TextContrast.LIGHT


def test_seen_cover_applies_without_resampling(qapp, pool):
    samples = {"a.jpg": Brightness.LIGHT, "b.jpg": Brightness.DARK}
    controller = ContrastController(thread_pool=pool, estimator=samples.__getitem__)
    controller.request("a", "a.jpg", Theme.LIGHT)
    pool.run_all()
    controller.request("b", "b.jpg", Theme.LIGHT)
    pool.run_all()
    assert controller.text_contrast is TextContrast.LIGHT

    controller.request("a", "a.jpg", Theme.LIGHT)
    assert pool.tasks == []
    assert controller.pending_item is None
    assert controller.text_contrast is TextContrast.DARK

from __future__ import annotations

import base64

import cv2
import numpy as np
import pytest

from backend.utils.brightness import (
    Brightness,
    average_pixel,
    classify_array,
    classify_pixel,
    decode_image,
    estimate_brightness,
    perceived_brightness,
    read_image_bytes,
)


def _solid(b: int, g: int, r: int, size: int = 8) -> np.ndarray:
    img = np.zeros((size, size, 3), dtype=np.uint8)
    img[:, :] = (b, g, r)
    return img


def test_perceived_brightness_uses_hsp_weights():
    assert perceived_brightness(255, 255, 255) == pytest.approx(255.0)
    assert perceived_brightness(0, 0, 0) == 0.0
    assert perceived_brightness(255, 0, 0) == pytest.approx(np.sqrt(0.299) * 255)


def test_threshold_is_strictly_greater():
    assert classify_pixel(127, 127, 127) is Brightness.DARK
    assert classify_pixel(150, 150, 150, threshold=200.0) is Brightness.DARK
    assert classify_pixel(128, 128, 128) is Brightness.LIGHT


def test_pure_green_reads_light_pure_blue_reads_dark():
    assert classify_pixel(0, 255, 0) is Brightness.LIGHT
    assert classify_pixel(0, 0, 255) is Brightness.DARK


def test_average_pixel_returns_rgb_order():
    r, g, b = average_pixel(_solid(10, 20, 30))
    assert (r, g, b) == pytest.approx((30, 20, 10), abs=1)


def test_classify_array():
    assert classify_array(_solid(240, 240, 240)) is Brightness.LIGHT
    assert classify_array(_solid(15, 15, 15)) is Brightness.DARK


def test_estimate_from_file(tmp_path):
    path = tmp_path / "cover.png"
    assert cv2.imwrite(str(path), _solid(250, 250, 250, size=32))
    assert estimate_brightness(str(path)) is Brightness.LIGHT
    assert estimate_brightness(f"file://{path}") is Brightness.LIGHT


@pytest.mark.parametrize("ref", ["", "/does/not/exist.jpg"])
def test_failures_read_as_dark(ref):
    assert estimate_brightness(ref) is Brightness.DARK


def test_undecodable_bytes(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"definitely not an image")
    assert decode_image(path.read_bytes()) is None
    assert estimate_brightness(str(path)) is Brightness.DARK


def test_data_uri_cover_is_decoded():
    ok, encoded = cv2.imencode(".png", _solid(250, 250, 250))
    assert ok
    uri = "data:image/png;base64," + base64.b64encode(encoded.tobytes()).decode("ascii")
    assert read_image_bytes(uri, timeout=1.0) == encoded.tobytes()
    assert estimate_brightness(uri) is Brightness.LIGHT

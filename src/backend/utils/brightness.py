"""Perceived brightness of a cover image (HSP colour model)."""
from __future__ import annotations

import math
import urllib.request
from enum import Enum
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from common.log_utils import is_debug_enabled, log_debug
from common.timing import timed
from config import get_config

HSP_WEIGHTS = (0.299, 0.587, 0.114)  # R, G, B


class Brightness(str, Enum):
    LIGHT = "light"
    DARK = "dark"


def read_image_bytes(image_ref: str, timeout: float) -> Optional[bytes]:
    """Raw bytes from an http(s) URL, a data: URI, a file:// URL or a plain path."""
    if image_ref.startswith("data:"):
        with urllib.request.urlopen(image_ref, timeout=timeout) as response:
            return response.read()
    if image_ref.startswith(("http://", "https://")):
        req = urllib.request.Request(image_ref, headers={"User-Agent": "GrooveVault/1.0"})
        with urllib.request.urlopen(req, timeout=timeout) as response:
            return response.read()
    path = Path(image_ref[7:] if image_ref.startswith("file://") else image_ref)
    return path.read_bytes()


def decode_image(data: bytes) -> Optional[np.ndarray]:
    """Decode encoded image bytes to a BGR array, or None."""
    buffer = np.frombuffer(data, dtype=np.uint8)
    if buffer.size == 0:
        return None
    img = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if img is None or img.size == 0:
        return None
    return img


def average_pixel(img: np.ndarray) -> tuple[float, float, float]:
    """Downsample to a single pixel and return it as (R, G, B)."""
    pixel = cv2.resize(img, (1, 1), interpolation=cv2.INTER_AREA)
    b, g, r = (float(c) for c in pixel.reshape(-1)[:3])
    return r, g, b


def perceived_brightness(r: float, g: float, b: float) -> float:
    wr, wg, wb = HSP_WEIGHTS
    return math.sqrt(wr * r * r + wg * g * g + wb * b * b)


def classify_pixel(r: float, g: float, b: float, threshold: Optional[float] = None) -> Brightness:
    limit = get_config().brightness_threshold if threshold is None else threshold
    return Brightness.LIGHT if perceived_brightness(r, g, b) > limit else Brightness.DARK


def classify_array(img: np.ndarray, threshold: Optional[float] = None) -> Brightness:
    return classify_pixel(*average_pixel(img), threshold=threshold)


@timed
def estimate_brightness(image_ref: str) -> Brightness:
    """Classify the cover at ``image_ref`` (URL or path). Never raises; DARK on failure."""
    if not image_ref:
        return Brightness.DARK
    try:
        data = read_image_bytes(image_ref, get_config().brightness_fetch_timeout_s)
        img = decode_image(data) if data else None
        if img is None:
            return Brightness.DARK
        return classify_array(img)
    except Exception as exc:  # noqa: BLE001
        if is_debug_enabled("contrast"):
            log_debug(f"Brightness sample failed for {image_ref}: {exc}", "CONTRAST")
        return Brightness.DARK

from __future__ import annotations
from pathlib import Path
from typing import Optional
import logging
import os

import numpy as np
import cv2

log = logging.getLogger(__name__)


class CaptureError(RuntimeError):
    """Raised when the capture device or image file cannot be opened."""


def _ext(p: str | Path) -> str:
    return os.path.splitext(str(p))[-1].lower()


def safe_imread(path: str | Path) -> Optional[np.ndarray]:
    """
    Read an image as bytes -> imdecode, so non-ASCII paths work too.
    Returns BGR or None.
    """
    try:
        data = np.fromfile(str(path), dtype=np.uint8)
    except OSError:
        return None
    if data.size == 0:
        return None
    return cv2.imdecode(data, cv2.IMREAD_COLOR)


def safe_imread_first_frame(path: str | Path) -> Optional[np.ndarray]:
    """
    TIFF/TIF: first page via imreadmulti, everything else through safe_imread.
    Returns BGR or None.
    """
    p = str(path)
    if _ext(p) in (".tif", ".tiff"):
        ok, frames = cv2.imreadmulti(p, flags=cv2.IMREAD_UNCHANGED)
        if ok and frames:
            img = frames[0]
            if img.ndim == 2:
                img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
            elif img.ndim == 3 and img.shape[2] == 4:
                img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
            elif img.ndim == 3 and img.shape[2] == 1:
                img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
            return img
    return safe_imread(p)


class CameraSource:
    """Frame source over cv2.VideoCapture. `read()` returns a fresh BGR frame or None."""

    def __init__(self, cap: "cv2.VideoCapture") -> None:
        self._cap = cap

    def read(self) -> Optional[np.ndarray]:
        ok, frame = self._cap.read()
        if not ok or frame is None:
            return None
        return frame

    def release(self) -> None:
        self._cap.release()


class StillImageSource:
    """Frame source that yields a copy of one image on every read."""

    def __init__(self, image: np.ndarray) -> None:
        self._image = image

    def read(self) -> Optional[np.ndarray]:
        return self._image.copy()

    def release(self) -> None:
        pass


def open_camera(device: int = 0, width: int = 640, height: int = 480) -> CameraSource:
    """Open capture device `device` and request a resolution.

    Raises
    ------
    CaptureError
        If the device cannot be opened.
    """
    cap = cv2.VideoCapture(int(device))
    if not cap.isOpened():
        raise CaptureError(f"Cannot open capture device {device}")
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, int(width))
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, int(height))
    log.info("Camera %d opened, requested %dx%d", device, width, height)
    return CameraSource(cap)


def open_image(path: str | Path) -> StillImageSource:
    img = safe_imread_first_frame(path)
    if img is None:
        raise CaptureError(f"Cannot read image {path}")
    log.info("Image %s loaded, %dx%d", path, img.shape[1], img.shape[0])
    return StillImageSource(img)

from __future__ import annotations

from typing import Optional

import cv2
import numpy as np


class HighGuiDisplay:
    """OpenCV highgui window: shows frames and polls the keyboard."""

    def __init__(self, title: str) -> None:
        self.title = title
        cv2.namedWindow(self.title)

    def show(self, frame: np.ndarray) -> None:
        cv2.imshow(self.title, frame)

    def poll_key(self, delay_ms: int) -> Optional[int]:
        """Wait up to `delay_ms` for a key. Returns the 8-bit code or None."""
        k = cv2.waitKey(max(1, int(delay_ms)))
        if k < 0:
            return None
        return k & 0xFF

    def close(self) -> None:
        cv2.destroyWindow(self.title)

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import cv2
import numpy as np


@dataclass(frozen=True)
class SyntheticParams:
    width: int = 640
    height: int = 480
    bg_level: int = 30
    fg_level: int = 230
    # Horizontal bars drawn across the full width: y coordinate of each bar
    line_rows: Tuple[int, ...] = (60,)
    line_thickness: int = 4
    # Circles: (cx, cy, r)
    circles: Tuple[Tuple[int, int, int], ...] = ((320, 280, 60),)
    circle_thickness: int = 4
    noise_sigma: float = 0.0
    seed: int = 42


def generate_synthetic_scene(
    p: SyntheticParams = SyntheticParams(),
) -> Tuple[np.ndarray, List[int], List[Tuple[int, int, int]]]:
    """Make a BGR frame with bright straight bars and circle outlines.

    Returns
    -------
    image_bgr : np.ndarray (H, W, 3) uint8
    line_rows : y coordinate of every bar
    circles   : ground-truth circles (cx, cy, r)
    """
    H, W = p.height, p.width
    img = np.full((H, W), p.bg_level, np.uint8)

    for y in p.line_rows:
        cv2.line(img, (0, int(y)), (W - 1, int(y)), int(p.fg_level), int(p.line_thickness))

    for cx, cy, r in p.circles:
        cv2.circle(img, (int(cx), int(cy)), int(r), int(p.fg_level), int(p.circle_thickness))

    if p.noise_sigma > 0:
        rng = np.random.default_rng(p.seed)
        noise = rng.normal(0.0, p.noise_sigma, size=(H, W)).astype(np.float32)
        img = np.clip(img.astype(np.float32) + noise, 0, 255).astype(np.uint8)

    bgr = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    return bgr, list(p.line_rows), list(p.circles)

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import cv2
import numpy as np

from .lines import to_gray
from .types import DetectedCircle

logger = logging.getLogger(__name__)

BGR_GREEN = (0, 255, 0)
BGR_RED = (0, 0, 255)


@dataclass(frozen=True)
class CircleParams:
    """Parameters for cv2.HoughCircles (HOUGH_GRADIENT) and circle overlay."""
    median_ksize: int = 5
    dp: float = 1.0                     # inverse ratio accumulator : image resolution
    min_dist_divider: float = 1.0       # min center distance = rows / divider
    param1: float = 100.0               # upper Canny threshold inside HoughCircles
    param2: float = 30.0                # accumulator threshold for centers
    min_radius: int = 30
    max_radius: int = 100
    # Drawing
    dot_radius: int = 1
    dot_color: Tuple[int, int, int] = BGR_RED
    circle_color: Tuple[int, int, int] = BGR_GREEN
    thickness: int = 3


def smooth_gray(bgr: np.ndarray, ksize: int = 5) -> np.ndarray:
    """GRAY + median blur to reduce noise before circle voting."""
    return cv2.medianBlur(to_gray(bgr), int(ksize))


def detect_circles(gray: np.ndarray, params: CircleParams = CircleParams()) -> List[DetectedCircle]:
    """Hough gradient circle detection on a smoothed grayscale image."""
    min_dist = gray.shape[0] / float(params.min_dist_divider)
    raw = cv2.HoughCircles(
        gray,
        cv2.HOUGH_GRADIENT,
        float(params.dp),
        float(min_dist),
        param1=float(params.param1),
        param2=float(params.param2),
        minRadius=int(params.min_radius),
        maxRadius=int(params.max_radius),
    )
    circles = DetectedCircle.list_from_hough(raw)
    logger.debug("HoughCircles: %d circles", len(circles))
    return circles


def draw_circles(frame: np.ndarray, circles: Sequence[DetectedCircle], params: CircleParams = CircleParams()) -> np.ndarray:
    """Overlay a center dot and an outline for each circle, in place."""
    for c in circles:
        cv2.circle(frame, c.center, int(params.dot_radius), params.dot_color,
                   int(params.thickness), cv2.LINE_AA)
        cv2.circle(frame, c.center, int(c.radius), params.circle_color,
                   int(params.thickness), cv2.LINE_AA)
    return frame


def hough_circles_overlay(frame: np.ndarray, params: CircleParams = CircleParams()) -> List[DetectedCircle]:
    """Smooth → Hough circles → draw onto `frame`. Returns the circles."""
    gray = smooth_gray(frame, params.median_ksize)
    circles = detect_circles(gray, params)
    draw_circles(frame, circles, params)
    return circles

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import cv2
import numpy as np

from .types import DetectedLine

logger = logging.getLogger(__name__)

BGR_ORANGE = (0, 75, 255)


@dataclass(frozen=True)
class EdgeParams:
    """Canny parameters.

    `threshold_1`/`threshold_2` are passed to cv2.Canny in this order.
    """
    threshold_1: float = 50.0
    threshold_2: float = 200.0
    aperture_size: int = 3


@dataclass(frozen=True)
class LineParams:
    """Standard and probabilistic Hough line parameters."""
    rho: float = 1.0                    # px
    theta_deg: float = 1.0              # degrees, converted to radians on use
    threshold: int = 150
    srn: float = 0.0
    stn: float = 0.0
    min_theta: float = 0.0
    max_theta: float = float(np.pi)
    # Probabilistic transform
    p_threshold: int = 50
    p_min_line_length: float = 50.0
    p_max_line_gap: float = 10.0
    # Drawing
    color: Tuple[int, int, int] = BGR_ORANGE
    thickness: int = 3
    extent: int = 1000                  # half-length of drawn polar lines


# ----------------------- preprocessing ------------------------------------- #

def to_gray(bgr: np.ndarray) -> np.ndarray:
    """BGR→GRAY (uint8); single-channel input is returned as is."""
    if bgr.ndim == 2:
        return bgr
    return cv2.cvtColor(bgr, cv2.COLOR_BGR2GRAY)


def detect_edges(bgr: np.ndarray, params: EdgeParams = EdgeParams()) -> np.ndarray:
    """Canny edge map of the frame."""
    gray = to_gray(bgr)
    return cv2.Canny(
        gray,
        float(params.threshold_1),
        float(params.threshold_2),
        apertureSize=int(params.aperture_size),
    )


# ----------------------- detection ----------------------------------------- #

def detect_lines(edges: np.ndarray, params: LineParams = LineParams()) -> List[DetectedLine]:
    """Standard Hough transform over an edge map. Returns polar lines."""
    raw = cv2.HoughLines(
        edges,
        float(params.rho),
        float(np.deg2rad(params.theta_deg)),
        int(params.threshold),
        None,
        float(params.srn),
        float(params.stn),
        float(params.min_theta),
        float(params.max_theta),
    )
    lines = DetectedLine.list_from_hough(raw)
    logger.debug("HoughLines: %d lines", len(lines))
    return lines


def detect_segments(edges: np.ndarray, params: LineParams = LineParams()) -> List[DetectedLine]:
    """Probabilistic Hough transform over an edge map. Returns segments."""
    raw = cv2.HoughLinesP(
        edges,
        float(params.rho),
        float(np.deg2rad(params.theta_deg)),
        int(params.p_threshold),
        minLineLength=float(params.p_min_line_length),
        maxLineGap=float(params.p_max_line_gap),
    )
    segments = DetectedLine.list_from_hough(raw)
    logger.debug("HoughLinesP: %d segments", len(segments))
    return segments


# ----------------------- drawing ------------------------------------------- #

def draw_lines(frame: np.ndarray, lines: Sequence[DetectedLine], params: LineParams = LineParams()) -> np.ndarray:
    """Overlay lines on `frame` in place (anti-aliased)."""
    for ln in lines:
        pt1, pt2 = ln.endpoints(params.extent)
        cv2.line(frame, pt1, pt2, params.color, int(params.thickness), cv2.LINE_AA)
    return frame


def hough_lines_overlay(
    frame: np.ndarray,
    edge_params: EdgeParams = EdgeParams(),
    params: LineParams = LineParams(),
    probabilistic: bool = False,
) -> List[DetectedLine]:
    """Edges → Hough lines (or segments) → draw onto `frame`.

    Returns the detected lines; the frame itself is modified in place.
    """
    edges = detect_edges(frame, edge_params)
    if probabilistic:
        lines = detect_segments(edges, params)
    else:
        lines = detect_lines(edges, params)
    draw_lines(frame, lines, params)
    return lines

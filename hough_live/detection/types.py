"""Datatypes for detection modes and detected shapes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

import numpy as np

Point = Tuple[int, int]


class Mode(Enum):
    """Active detection behaviour. The value is the key that selects it."""

    NONE = "n"
    LINE = "l"
    CIRCLE = "c"
    BOTH = "b"

    @property
    def draws_lines(self) -> bool:
        return self in (Mode.LINE, Mode.BOTH)

    @property
    def draws_circles(self) -> bool:
        return self in (Mode.CIRCLE, Mode.BOTH)

    @property
    def description(self) -> str:
        return _MODE_DESCRIPTIONS[self]

    @staticmethod
    def from_key(key: str) -> Optional["Mode"]:
        """Return the mode selected by `key`, or None if the key selects nothing."""
        for m in Mode:
            if m.value == key:
                return m
        return None


_MODE_DESCRIPTIONS = {
    Mode.NONE: "no hough detection",
    Mode.LINE: "hough line detection",
    Mode.CIRCLE: "hough circle detection",
    Mode.BOTH: "both hough line and circle detection",
}


class Notice(Enum):
    """What a key press did to the mode."""

    IGNORED = "ignored"
    ACTIVATED = "activated"
    ALREADY_ACTIVE = "already-active"
    EXIT = "exit"


@dataclass
class DetectedLine:
    """Single detected line, either in polar form or as a segment.

    Attributes
    ----------
    rho, theta : float, optional
        Polar form from the standard Hough transform (pixels, radians).
    x1, y1, x2, y2 : int, optional
        Segment endpoints from the probabilistic Hough transform.
    """

    rho: Optional[float] = None
    theta: Optional[float] = None
    x1: Optional[int] = None
    y1: Optional[int] = None
    x2: Optional[int] = None
    y2: Optional[int] = None

    @property
    def is_polar(self) -> bool:
        return self.rho is not None and self.theta is not None

    def endpoints(self, extent: int = 1000) -> Tuple[Point, Point]:
        """Return two integer points to draw.

        Polar lines are extended `extent` px to both sides of the foot point
        (rho*cos(theta), rho*sin(theta)).
        """
        if self.is_polar:
            a = float(np.cos(self.theta))
            b = float(np.sin(self.theta))
            x0 = a * self.rho
            y0 = b * self.rho
            pt1 = (int(round(x0 + extent * (-b))), int(round(y0 + extent * a)))
            pt2 = (int(round(x0 - extent * (-b))), int(round(y0 - extent * a)))
            return pt1, pt2
        if None in (self.x1, self.y1, self.x2, self.y2):
            raise ValueError("DetectedLine has neither polar nor segment coordinates")
        return (int(self.x1), int(self.y1)), (int(self.x2), int(self.y2))

    # ---- factories --------------------------------------------------------
    @staticmethod
    def from_polar(rho: float, theta: float) -> "DetectedLine":
        return DetectedLine(rho=float(rho), theta=float(theta))

    @staticmethod
    def from_segment(seg: Iterable[float]) -> "DetectedLine":
        x1, y1, x2, y2 = [int(v) for v in seg]
        return DetectedLine(x1=x1, y1=y1, x2=x2, y2=y2)

    @staticmethod
    def list_from_hough(raw: Optional[np.ndarray]) -> List["DetectedLine"]:
        """Convert cv2.HoughLines (N,1,2) or cv2.HoughLinesP (N,1,4) output."""
        if raw is None or raw.size == 0:
            return []
        rows = raw.reshape(raw.shape[0], -1)
        if rows.shape[1] == 2:
            return [DetectedLine.from_polar(r[0], r[1]) for r in rows]
        return [DetectedLine.from_segment(r[:4]) for r in rows]


@dataclass
class DetectedCircle:
    """Detected circle in integer pixel coordinates."""

    x: int
    y: int
    radius: int

    @property
    def center(self) -> Point:
        return self.x, self.y

    @staticmethod
    def list_from_hough(raw: Optional[np.ndarray]) -> List["DetectedCircle"]:
        """Convert cv2.HoughCircles (1,N,3) float output, rounding to pixels."""
        if raw is None or raw.size == 0:
            return []
        rows = np.around(raw.reshape(-1, 3)).astype(np.int64)
        return [DetectedCircle(int(c[0]), int(c[1]), int(c[2])) for c in rows]

"""Connects keyboard input and frames to the detection backends."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .detection.circles import hough_circles_overlay
from .detection.config import PipelineConfig
from .detection.lines import hough_lines_overlay
from .detection.types import Mode, Notice
from .modes import Key, report, resolve


def annotate(
    frame: np.ndarray,
    mode: Mode,
    config: Optional[PipelineConfig] = None,
    probabilistic: bool = False,
) -> np.ndarray:
    """Draw the overlays required by `mode` onto `frame` (in place) and return it.

    Lines are always drawn before circles, so in BOTH mode circle detection
    sees the line overlay.
    """
    cfg = config or PipelineConfig()
    if mode.draws_lines:
        hough_lines_overlay(frame, cfg.canny.to_params(), cfg.lines.to_params(),
                            probabilistic=probabilistic)
    if mode.draws_circles:
        hough_circles_overlay(frame, cfg.circles.to_params())
    return frame


class Controller:
    """Holds the current mode and configuration for one interactive session."""

    def __init__(self, config: Optional[PipelineConfig] = None, mode: Mode = Mode.NONE) -> None:
        self.config = config or PipelineConfig()
        self._mode = mode

    @property
    def mode(self) -> Mode:
        return self._mode

    def handle_key(self, key: Key) -> Notice:
        new_mode, notice = resolve(self._mode, key)
        report(self._mode, new_mode, notice, key)
        self._mode = new_mode
        return notice

    def process(self, frame: np.ndarray) -> np.ndarray:
        return annotate(frame, self._mode, self.config)

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence

import numpy as np

from .controller import Controller
from .detection.config import ConfigError, PipelineConfig
from .detection.types import Mode, Notice
from .modes import Key
from .ui.highgui import HighGuiDisplay
from .utils.io import CaptureError, open_camera, open_image

VERSION = "v0.1"
ESCAPE_KEY = 27

EXIT_OK = 0
EXIT_NO_DEVICE = 1
EXIT_STREAM_LOST = 2
EXIT_NO_DISPLAY = 3
EXIT_BAD_CONFIG = 4

log = logging.getLogger("hough_live.app")


class DisplayNotAvailableError(RuntimeError):
    """Raised when the requested display backend cannot be imported."""


class FrameSource(Protocol):
    def read(self) -> Optional[np.ndarray]: ...
    def release(self) -> None: ...


class Display(Protocol):
    def show(self, frame: np.ndarray) -> None: ...
    def poll_key(self, delay_ms: int) -> Key: ...
    def close(self) -> None: ...


@dataclass
class LoopResult:
    exit_code: int
    frames_shown: int = 0
    trace: List[Mode] = field(default_factory=list)      # initial mode + mode after each handled key
    notices: List[Notice] = field(default_factory=list)


def run_loop(
    controller: Controller,
    source: FrameSource,
    display: Display,
    poll_ms: int = 10,
    max_failed_reads: int = 30,
) -> LoopResult:
    """Poll key → switch mode → read → annotate → show, until ESC.

    A failed read skips that iteration. After `max_failed_reads` failures in
    a row the loop stops with EXIT_STREAM_LOST. The display and the source
    are released on every exit path.
    """
    result = LoopResult(EXIT_OK, trace=[controller.mode])
    failed = 0
    try:
        while True:
            key = display.poll_key(poll_ms)
            if key == ESCAPE_KEY or key == chr(ESCAPE_KEY):
                result.notices.append(Notice.EXIT)
                break
            if key is not None and key != -1:
                result.notices.append(controller.handle_key(key))
                result.trace.append(controller.mode)

            frame = source.read()
            if frame is None:
                failed += 1
                log.warning("Frame read failed (%d/%d)", failed, max_failed_reads)
                if failed >= max_failed_reads:
                    log.error("Giving up after %d failed reads", failed)
                    result.exit_code = EXIT_STREAM_LOST
                    break
                continue
            failed = 0

            controller.process(frame)
            display.show(frame)
            result.frames_shown += 1
    finally:
        display.close()
        source.release()
    log.info(">> Exiting!")
    return result


def make_display(title: str, use_qt: bool = False) -> Display:
    if not use_qt:
        return HighGuiDisplay(title)
    try:
        from .ui.qt_view import QtDisplay
    except ImportError as exc:
        raise DisplayNotAvailableError(
            "PySide6 is not available. Install it with:\n"
            "    pip install PySide6\n"
            "or run without --qt to use the OpenCV window."
        ) from exc
    return QtDisplay(title)


def build_parser() -> argparse.ArgumentParser:
    # -h/--help does not exit: usage is printed at every start anyway.
    parser = argparse.ArgumentParser(
        prog="hough-live",
        description="Live camera view with Hough line/circle overlays. "
                    "Press n/l/c/b in the window to switch modes, ESC to exit.",
        add_help=False,
    )
    parser.add_argument("-n", action="store_true", help="disable any hough detection.")
    parser.add_argument("-l", action="store_true", help="enable hough line detection.")
    parser.add_argument("-c", action="store_true", help="enable hough circle detection.")
    parser.add_argument("-b", action="store_true", help="enable both hough line and circle detection.")
    parser.add_argument("-h", "--help", action="store_true", help="show help message")
    parser.add_argument("--device", type=int, default=None, help="capture device index (default 0)")
    parser.add_argument("--width", type=int, default=None, help="requested frame width (default 640)")
    parser.add_argument("--height", type=int, default=None, help="requested frame height (default 480)")
    parser.add_argument("--image", default=None, help="loop over a still image instead of the camera")
    parser.add_argument("--config", default=None, help="load pipeline configuration from JSON")
    parser.add_argument("--save-config", default=None, help="write the effective configuration to JSON")
    parser.add_argument("--qt", action="store_true", help="use the PySide6 window instead of OpenCV highgui")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _apply_overrides(cfg: PipelineConfig, args: argparse.Namespace) -> PipelineConfig:
    if args.device is not None:
        cfg.capture.device = args.device
    if args.width is not None:
        cfg.capture.width = args.width
    if args.height is not None:
        cfg.capture.height = args.height
    return cfg


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    parser.print_help()
    print(VERSION)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = PipelineConfig.load_json(args.config) if args.config else PipelineConfig()
    except ConfigError as e:
        log.error("%s", e)
        return EXIT_BAD_CONFIG
    cfg = _apply_overrides(cfg, args)
    if args.save_config:
        try:
            cfg.save_json(args.save_config)
        except ConfigError as e:
            log.error("%s", e)
            return EXIT_BAD_CONFIG
        log.info("Configuration saved: %s", args.save_config)

    try:
        if args.image:
            source = open_image(args.image)
        else:
            source = open_camera(cfg.capture.device, cfg.capture.width, cfg.capture.height)
    except CaptureError as e:
        log.error("%s", e)
        return EXIT_NO_DEVICE

    try:
        display = make_display(cfg.capture.window_title, use_qt=args.qt)
    except DisplayNotAvailableError as e:
        log.error("%s", e)
        source.release()
        return EXIT_NO_DISPLAY

    result = run_loop(
        Controller(cfg),
        source,
        display,
        poll_ms=cfg.capture.poll_ms,
        max_failed_reads=cfg.capture.max_failed_reads,
    )
    log.debug("Frames shown: %d", result.frames_shown)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())

"""Keyboard-driven switching between detection modes."""

from __future__ import annotations

import logging
from typing import Optional, Tuple, Union

from .detection.types import Mode, Notice

log = logging.getLogger("hough_live.modes")

Key = Union[int, str, None]


def key_to_char(key: Key) -> Optional[str]:
    """Normalize a key from cv2.waitKey / Qt / tests to a single character.

    -1 and None mean "no key"; integer codes are masked to 8 bits.
    """
    if key is None:
        return None
    if isinstance(key, str):
        return key[:1] or None
    if key < 0:
        return None
    return chr(key & 0xFF)


def resolve(mode: Mode, key: Key) -> Tuple[Mode, Notice]:
    """Return (new_mode, notice) for a key press without side effects."""
    ch = key_to_char(key)
    requested = Mode.from_key(ch) if ch is not None else None
    if requested is None:
        return mode, Notice.IGNORED
    if requested is mode:
        return mode, Notice.ALREADY_ACTIVE
    return requested, Notice.ACTIVATED


def report(mode: Mode, new_mode: Mode, notice: Notice, key: Key) -> None:
    """Log the outcome of a resolved key press. IGNORED logs nothing."""
    if notice is Notice.ACTIVATED:
        if new_mode is Mode.NONE:
            log.info(">> disable all hough detection requested")
        else:
            log.info(">> enabling %s", new_mode.description)
    elif notice is Notice.ALREADY_ACTIVE:
        log.info(">> requested mode is currently enabled! (got [%s], current mode [%s])",
                 key_to_char(key), mode.value)


def transition(mode: Mode, key: Key) -> Mode:
    """Apply a key press to `mode` and log what happened."""
    new_mode, notice = resolve(mode, key)
    report(mode, new_mode, notice, key)
    return new_mode

import logging

from hough_live.detection.types import Mode, Notice
from hough_live.modes import key_to_char, resolve, transition


def test_unrecognized_keys_are_noops():
    for mode in Mode:
        for key in ("x", "q", " ", "N", None, -1, ord("z")):
            new_mode, notice = resolve(mode, key)
            assert new_mode is mode
            assert notice is Notice.IGNORED
            assert transition(mode, key) is mode


def test_same_mode_key_reports_already_active(caplog):
    caplog.set_level(logging.INFO, logger="hough_live.modes")
    for mode in Mode:
        caplog.clear()
        new_mode, notice = resolve(mode, mode.value)
        assert new_mode is mode
        assert notice is Notice.ALREADY_ACTIVE

        assert transition(mode, mode.value) is mode
        assert "currently enabled" in caplog.text
        assert "enabling" not in caplog.text


def test_other_mode_key_activates_and_names_mode(caplog):
    caplog.set_level(logging.INFO, logger="hough_live.modes")
    for mode in Mode:
        for target in Mode:
            if target is mode:
                continue
            caplog.clear()
            new_mode, notice = resolve(mode, target.value)
            assert new_mode is target
            assert notice is Notice.ACTIVATED

            assert transition(mode, target.value) is target
            if target is Mode.NONE:
                assert "disable all hough detection" in caplog.text
            else:
                assert target.description in caplog.text


def test_ignored_key_logs_nothing(caplog):
    caplog.set_level(logging.INFO, logger="hough_live.modes")
    transition(Mode.LINE, "x")
    assert caplog.records == []


def test_cycle_returns_to_start():
    mode = Mode.NONE
    for key in ("n", "l", "c", "b", "n"):
        mode = transition(mode, key)
    assert mode is Mode.NONE

    # whatever the start, the cycle ends with detection disabled
    for start in Mode:
        mode = start
        for key in ("n", "l", "c", "b", "n"):
            mode = transition(mode, key)
        assert mode is Mode.NONE


def test_integer_key_codes():
    # cv2.waitKey returns ints; high bits are masked off
    assert resolve(Mode.NONE, ord("l")) == (Mode.LINE, Notice.ACTIVATED)
    assert resolve(Mode.NONE, 0x100 | ord("c")) == (Mode.CIRCLE, Notice.ACTIVATED)
    assert key_to_char(-1) is None
    assert key_to_char("") is None
    assert key_to_char("bb") == "b"

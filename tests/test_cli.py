import importlib.util

import cv2
import pytest

from hough_live import app
from hough_live.detection.synthetic import generate_synthetic_scene
from hough_live.utils.io import CaptureError


class _KeyDisplay:
    def __init__(self, keys) -> None:
        self.keys = list(keys)
        self.frames = 0
        self.closed = False

    def poll_key(self, delay_ms):
        return self.keys.pop(0) if self.keys else app.ESCAPE_KEY

    def show(self, frame) -> None:
        self.frames += 1

    def close(self) -> None:
        self.closed = True


def test_parser_accepts_mode_flags_and_help_without_exiting():
    args = app.build_parser().parse_args(["-l", "-c", "-h"])
    assert args.l and args.c and args.help
    assert not args.n and not args.b


def test_missing_device_exits_with_error_code(monkeypatch, capsys):
    def _fail(*a, **kw):
        raise CaptureError("Cannot open capture device 0")

    monkeypatch.setattr(app, "open_camera", _fail)
    assert app.main(["--help"]) == app.EXIT_NO_DEVICE

    out = capsys.readouterr().out
    assert "usage" in out and app.VERSION in out


def test_bad_config_exits_with_error_code(tmp_path):
    assert app.main(["--config", str(tmp_path / "nope.json")]) == app.EXIT_BAD_CONFIG


def test_unreadable_image_exits_with_error_code(tmp_path):
    assert app.main(["--image", str(tmp_path / "nope.png")]) == app.EXIT_NO_DEVICE


def test_run_on_still_image(tmp_path, monkeypatch):
    img, _, _ = generate_synthetic_scene()
    path = tmp_path / "scene.png"
    assert cv2.imwrite(str(path), img)
    cfg_path = tmp_path / "effective.json"

    display = _KeyDisplay([None, "b", None, app.ESCAPE_KEY])
    monkeypatch.setattr(app, "make_display", lambda title, use_qt=False: display)

    code = app.main(["--image", str(path), "--width", "320", "--save-config", str(cfg_path)])

    assert code == app.EXIT_OK
    assert display.frames == 3 and display.closed
    assert '"width": 320' in cfg_path.read_text(encoding="utf-8")


def test_camera_overrides_reach_open_camera(monkeypatch):
    seen = {}

    def _open(device, width, height):
        seen.update(device=device, width=width, height=height)
        raise CaptureError("no camera in tests")

    monkeypatch.setattr(app, "open_camera", _open)
    app.main(["--device", "3", "--height", "240"])
    assert seen == {"device": 3, "width": 640, "height": 240}


class _ReleasingSource:
    def __init__(self) -> None:
        self.released = 0

    def read(self):
        return None

    def release(self) -> None:
        self.released += 1


def test_bad_config_value_exits_with_error_code(tmp_path):
    p = tmp_path / "color.json"
    p.write_text('{"lines": {"color": 5}}', encoding="utf-8")
    assert app.main(["--config", str(p)]) == app.EXIT_BAD_CONFIG


def test_unwritable_save_config_exits_with_error_code(tmp_path):
    target = tmp_path / "no" / "dir" / "x.json"
    assert app.main(["--save-config", str(target)]) == app.EXIT_BAD_CONFIG
    assert not target.exists()


def test_qt_without_pyside_exits_and_releases_source(monkeypatch):
    # Skip this test if PySide6 is actually installed.
    if importlib.util.find_spec("PySide6") is not None:
        pytest.skip("PySide6 installed; guard test not applicable.")

    source = _ReleasingSource()
    monkeypatch.setattr(app, "open_camera", lambda *a, **kw: source)

    assert app.main(["--qt"]) == app.EXIT_NO_DISPLAY
    assert source.released == 1

import numpy as np
import pytest

from hough_live.detection.types import DetectedCircle, DetectedLine, Mode


def test_mode_dispatch_table():
    assert [m.draws_lines for m in Mode] == [False, True, False, True]
    assert [m.draws_circles for m in Mode] == [False, False, True, True]
    assert Mode.from_key("b") is Mode.BOTH
    assert Mode.from_key("x") is None


def test_polar_endpoints_vertical_line():
    # theta = 0 -> vertical line x = rho
    ln = DetectedLine.from_polar(10.0, 0.0)
    assert ln.is_polar
    assert ln.endpoints() == ((10, 1000), (10, -1000))


def test_polar_endpoints_horizontal_line():
    ln = DetectedLine.from_polar(50.0, np.pi / 2)
    (x1, y1), (x2, y2) = ln.endpoints(extent=100)
    assert (x1, x2) == (-100, 100)
    assert y1 == y2 == 50


def test_segment_endpoints():
    ln = DetectedLine.from_segment([1, 2, 30, 40])
    assert not ln.is_polar
    assert ln.endpoints() == ((1, 2), (30, 40))


def test_empty_line_raises():
    with pytest.raises(ValueError):
        DetectedLine().endpoints()


def test_list_from_hough_shapes():
    assert DetectedLine.list_from_hough(None) == []
    polar = np.array([[[5.0, 0.5]], [[7.0, 1.0]]], dtype=np.float32)
    lines = DetectedLine.list_from_hough(polar)
    assert len(lines) == 2 and lines[1].rho == pytest.approx(7.0)

    segs = np.array([[[0, 0, 10, 10]]], dtype=np.int32)
    (seg,) = DetectedLine.list_from_hough(segs)
    assert (seg.x1, seg.y1, seg.x2, seg.y2) == (0, 0, 10, 10)


def test_circles_are_rounded():
    raw = np.array([[[10.4, 20.6, 30.5]]], dtype=np.float32)
    (c,) = DetectedCircle.list_from_hough(raw)
    assert c.center == (10, 21)
    assert c.radius == 30  # round half to even
    assert DetectedCircle.list_from_hough(None) == []

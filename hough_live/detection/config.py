from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Tuple
import json
from pathlib import Path

from .circles import CircleParams
from .lines import EdgeParams, LineParams


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or does not fit the schema."""


@dataclass
class CaptureConfig:
    device: int = 0
    width: int = 640
    height: int = 480
    window_title: str = "Hough line/circle detection"
    poll_ms: int = 10                 # bounded wait for a key press per iteration
    max_failed_reads: int = 30        # consecutive failed reads before giving up


@dataclass
class CannyConfig:
    threshold_1: float = 50.0
    threshold_2: float = 200.0
    aperture_size: int = 3

    def to_params(self) -> EdgeParams:
        return EdgeParams(
            threshold_1=self.threshold_1,
            threshold_2=self.threshold_2,
            aperture_size=self.aperture_size,
        )


@dataclass
class LineConfig:
    rho: float = 1.0
    theta_deg: float = 1.0
    threshold: int = 150
    p_threshold: int = 50
    p_min_line_length: float = 50.0
    p_max_line_gap: float = 10.0
    color: Tuple[int, int, int] = (0, 75, 255)
    thickness: int = 3
    extent: int = 1000                # half-length of drawn polar lines

    def to_params(self) -> LineParams:
        return LineParams(
            rho=self.rho,
            theta_deg=self.theta_deg,
            threshold=self.threshold,
            p_threshold=self.p_threshold,
            p_min_line_length=self.p_min_line_length,
            p_max_line_gap=self.p_max_line_gap,
            color=tuple(self.color),
            thickness=self.thickness,
            extent=self.extent,
        )


@dataclass
class CircleConfig:
    median_ksize: int = 5
    dp: float = 1.0
    min_dist_divider: float = 1.0
    param1: float = 100.0
    param2: float = 30.0
    min_radius: int = 30
    max_radius: int = 100
    dot_radius: int = 1
    dot_color: Tuple[int, int, int] = (0, 0, 255)
    circle_color: Tuple[int, int, int] = (0, 255, 0)
    thickness: int = 3

    def to_params(self) -> CircleParams:
        return CircleParams(
            median_ksize=self.median_ksize,
            dp=self.dp,
            min_dist_divider=self.min_dist_divider,
            param1=self.param1,
            param2=self.param2,
            min_radius=self.min_radius,
            max_radius=self.max_radius,
            dot_radius=self.dot_radius,
            dot_color=tuple(self.dot_color),
            circle_color=tuple(self.circle_color),
            thickness=self.thickness,
        )


@dataclass
class PipelineConfig:
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    canny: CannyConfig = field(default_factory=CannyConfig)
    lines: LineConfig = field(default_factory=LineConfig)
    circles: CircleConfig = field(default_factory=CircleConfig)

    # ---- JSON I/O ----
    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PipelineConfig":
        try:
            cap = CaptureConfig(**d.get("capture", {}))
            cny = CannyConfig(**d.get("canny", {}))
            ln = LineConfig(**d.get("lines", {}))
            cr = CircleConfig(**d.get("circles", {}))
            # JSON has no tuples
            ln.color = tuple(ln.color)
            cr.dot_color = tuple(cr.dot_color)
            cr.circle_color = tuple(cr.circle_color)
        except TypeError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc
        return PipelineConfig(capture=cap, canny=cny, lines=ln, circles=cr)

    def save_json(self, path: str | Path) -> None:
        try:
            Path(path).write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot write config {path}: {exc}") from exc

    @staticmethod
    def load_json(path: str | Path) -> "PipelineConfig":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Cannot read config {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must hold a JSON object")
        return PipelineConfig.from_dict(data)


# ---- Presets ----

def preset_default() -> PipelineConfig:
    return PipelineConfig()


def preset_fine() -> PipelineConfig:
    """Lower vote thresholds: more (and noisier) lines and circles."""
    pc = PipelineConfig()
    pc.lines.threshold = 100
    pc.lines.p_threshold = 30
    pc.lines.p_min_line_length = 30.0
    pc.circles.param2 = 20.0
    pc.circles.min_radius = 15
    pc.circles.max_radius = 150
    return pc

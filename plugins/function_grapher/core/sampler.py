"""Curve sampling: turn a compiled program into drawable pixel-space points."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from common.logging import get_logger
from common.tasks import map_in_threads

from .errors import DomainError, StackError
from .evaluator import evaluate
from .program import Program

Range = tuple[float, float]
Point = tuple[float, float]
SamplePoint = Point | None

DEFAULT_RANGE: Range = (-10.0, 10.0)
ZOOM_IN_FACTOR = 0.8
ZOOM_OUT_FACTOR = 1.2

logger = get_logger("function_grapher.sampler")


def _coerce_range(value: Sequence[float], axis: str) -> Range:
    try:
        low, high = (float(item) for item in value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{axis} must be a pair of numbers") from exc
    if not (math.isfinite(low) and math.isfinite(high)):
        raise ValueError(f"{axis} bounds must be finite")
    if low >= high:
        raise ValueError(f"{axis} minimum must be less than its maximum")
    return low, high


@dataclass(frozen=True, slots=True)
class ViewWindow:
    """Visible mathematical range on both axes."""

    x_range: Range = DEFAULT_RANGE
    y_range: Range = DEFAULT_RANGE

    def __post_init__(self) -> None:
        object.__setattr__(self, "x_range", _coerce_range(self.x_range, "x_range"))
        object.__setattr__(self, "y_range", _coerce_range(self.y_range, "y_range"))

    @classmethod
    def default(cls) -> "ViewWindow":
        return cls()

    def zoom(self, factor: float) -> "ViewWindow":
        """Scale both intervals about their centres; ``factor < 1`` zooms in."""

        factor = float(factor)
        if not math.isfinite(factor) or factor <= 0:
            raise ValueError("Zoom factor must be a positive number")
        return ViewWindow(_scale(self.x_range, factor), _scale(self.y_range, factor))

    def reset(self) -> "ViewWindow":
        return ViewWindow.default()

    def to_pixel_x(self, x: float, width: int) -> float:
        x_min, x_max = self.x_range
        return (x - x_min) / (x_max - x_min) * width

    def to_pixel_y(self, y: float, height: int) -> float:
        y_min, y_max = self.y_range
        return height - (y - y_min) / (y_max - y_min) * height

    def to_dict(self) -> dict[str, list[float]]:
        return {"x_range": list(self.x_range), "y_range": list(self.y_range)}


def _scale(bounds: Range, factor: float) -> Range:
    low, high = bounds
    centre = (low + high) / 2
    half = (high - low) / 2 * factor
    return centre - half, centre + half


def _check_size(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be a positive integer")
    return value


def column_inputs(width: int, x_range: Range) -> list[float]:
    """Return the ``width + 1`` x values sampled left to right."""

    x_min, x_max = x_range
    step = (x_max - x_min) / width
    return (x_min + np.arange(width + 1, dtype=np.float64) * step).tolist()


def sample(
    program: Program,
    width: int,
    height: int,
    x_range: Range | Sequence[float] = DEFAULT_RANGE,
    y_range: Range | Sequence[float] = DEFAULT_RANGE,
    *,
    workers: int = 1,
) -> list[SamplePoint]:
    """Evaluate ``program`` once per pixel column.

    Returns ``width + 1`` entries, each a ``(pixel_x, pixel_y)`` pair or
    ``None`` where the expression is undefined or not finite. A malformed
    program is logged and yields gaps rather than aborting the pass.
    """

    width = _check_size(width, "width")
    height = _check_size(height, "height")
    window = ViewWindow(tuple(x_range), tuple(y_range))  # type: ignore[arg-type]

    def _column(item: tuple[int, float]) -> SamplePoint:
        column, x = item
        try:
            y = evaluate(program, x)
        except DomainError:
            return None
        except StackError as exc:
            logger.error("malformed program %r at x=%g: %s", program.source, x, exc)
            return None
        pixel_y = window.to_pixel_y(y, height)
        if not math.isfinite(pixel_y):
            return None
        return float(column), pixel_y

    xs = column_inputs(width, window.x_range)
    points = map_in_threads(_column, enumerate(xs), max_workers=workers)
    logger.debug(
        "sampled %r over %d columns (%d gaps)",
        program.source,
        len(points),
        sum(1 for point in points if point is None),
    )
    return points


def split_segments(points: Sequence[SamplePoint], height: float) -> list[list[Point]]:
    """Group sampled points into polylines that can be stroked independently.

    A gap ends the current polyline. Two consecutive points whose vertical
    distance exceeds ``height`` are also split, so that a pole such as the
    one of ``tan(x)`` at ``pi/2`` is not drawn as a near-vertical stroke.
    """

    segments: list[list[Point]] = []
    current: list[Point] = []
    for point in points:
        if point is None:
            if current:
                segments.append(current)
            current = []
            continue
        if current and abs(point[1] - current[-1][1]) > height:
            segments.append(current)
            current = []
        current.append(point)
    if current:
        segments.append(current)
    return segments


__all__ = [
    "DEFAULT_RANGE",
    "SamplePoint",
    "ViewWindow",
    "ZOOM_IN_FACTOR",
    "ZOOM_OUT_FACTOR",
    "column_inputs",
    "sample",
    "split_segments",
]

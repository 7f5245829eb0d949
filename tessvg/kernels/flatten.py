"""
Curve flattening.

Converts the events of a Path into polylines. Bezier segments are sampled
uniformly; the segment count comes from Wang's formula, which bounds the
distance between the curve and its chords by the tolerance.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import torch

from ..path import Path, MoveTo, LineTo, QuadraticTo, CubicTo, Close


# Points closer than this are merged when building polylines
MERGE_EPSILON = 1e-9


@dataclass
class Polyline:
    """One flattened sub-path."""
    points: torch.Tensor     # float64: [num_points, 2]
    is_closed: bool

    @property
    def num_points(self) -> int:
        return self.points.shape[0]

    def coords(self) -> List[Tuple[float, float]]:
        return [(float(x), float(y)) for x, y in self.points.tolist()]


def segment_count(control_points: Sequence[Tuple[float, float]], tolerance: float) -> int:
    """
    Number of uniform subdivisions needed to flatten a Bezier segment.

    Wang's formula: n = ceil(sqrt(d * (d - 1) / 8 * M / tolerance)) where d is
    the degree and M the largest second difference of the control points.
    """
    if tolerance <= 0:
        raise ValueError(f"tolerance must be positive, got {tolerance}")
    degree = len(control_points) - 1
    if degree < 2:
        return 1

    m = 0.0
    for i in range(degree - 1):
        (x0, y0), (x1, y1), (x2, y2) = control_points[i:i + 3]
        m = max(m, math.hypot(x0 - 2 * x1 + x2, y0 - 2 * y1 + y2))

    n = math.ceil(math.sqrt(degree * (degree - 1) / 8.0 * m / tolerance))
    return max(n, 1)


def eval_quadratic_bezier(t: torch.Tensor, p0, p1, p2) -> torch.Tensor:
    """Evaluate a quadratic Bezier at parameters t. Returns [len(t), 2]."""
    pts = torch.tensor([p0, p1, p2], dtype=torch.float64)
    t = t.unsqueeze(1)
    one_minus_t = 1.0 - t
    w0 = one_minus_t * one_minus_t
    w1 = 2.0 * one_minus_t * t
    w2 = t * t
    return w0 * pts[0] + w1 * pts[1] + w2 * pts[2]


def eval_cubic_bezier(t: torch.Tensor, p0, p1, p2, p3) -> torch.Tensor:
    """Evaluate a cubic Bezier at parameters t. Returns [len(t), 2]."""
    pts = torch.tensor([p0, p1, p2, p3], dtype=torch.float64)
    t = t.unsqueeze(1)
    one_minus_t = 1.0 - t
    one_minus_t_sq = one_minus_t * one_minus_t
    t_sq = t * t

    w0 = one_minus_t_sq * one_minus_t
    w1 = 3.0 * one_minus_t_sq * t
    w2 = 3.0 * one_minus_t * t_sq
    w3 = t_sq * t
    return w0 * pts[0] + w1 * pts[1] + w2 * pts[2] + w3 * pts[3]


def _sample_params(n: int) -> torch.Tensor:
    # Excludes t=0, the start point is already in the polyline
    return torch.arange(1, n + 1, dtype=torch.float64) / n


def _finish(chunks: List[torch.Tensor], is_closed: bool) -> Polyline:
    points = torch.cat(chunks, dim=0)

    # Drop consecutive duplicates
    if points.shape[0] > 1:
        step = (points[1:] - points[:-1]).norm(dim=1)
        keep = torch.cat([torch.tensor([True]), step > MERGE_EPSILON])
        points = points[keep]

    # A closed ring does not repeat its first point
    if is_closed and points.shape[0] > 1:
        if (points[-1] - points[0]).norm() <= MERGE_EPSILON:
            points = points[:-1]

    return Polyline(points=points, is_closed=is_closed)


def flatten_path(path: Path, tolerance: float = 0.1) -> List[Polyline]:
    """
    Flatten a path into one polyline per sub-path.

    Args:
        path: Path to flatten
        tolerance: Maximum distance between a curve and its chords

    Returns:
        List of Polyline in sub-path order
    """
    if not (tolerance > 0 and math.isfinite(tolerance)):
        raise ValueError(f"tolerance must be a finite positive number, got {tolerance}")

    polylines = []
    chunks = None
    current = None

    for event in path:
        if isinstance(event, MoveTo):
            if chunks is not None:
                polylines.append(_finish(chunks, is_closed=False))
            current = event.to
            chunks = [torch.tensor([current], dtype=torch.float64)]
            continue

        if chunks is None:
            raise ValueError(f"{type(event).__name__} event before any MoveTo")

        if isinstance(event, LineTo):
            chunks.append(torch.tensor([event.to], dtype=torch.float64))
            current = event.to
        elif isinstance(event, QuadraticTo):
            n = segment_count([current, event.ctrl, event.to], tolerance)
            chunks.append(eval_quadratic_bezier(_sample_params(n), current, event.ctrl, event.to))
            current = event.to
        elif isinstance(event, CubicTo):
            n = segment_count([current, event.ctrl1, event.ctrl2, event.to], tolerance)
            chunks.append(eval_cubic_bezier(_sample_params(n), current, event.ctrl1, event.ctrl2, event.to))
            current = event.to
        elif isinstance(event, Close):
            polylines.append(_finish(chunks, is_closed=True))
            chunks = None
            current = None
        else:
            raise ValueError(f"Unknown path event: {event!r}")

    if chunks is not None:
        polylines.append(_finish(chunks, is_closed=False))

    return polylines

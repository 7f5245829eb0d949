"""
Path construction for tessvg.

A Path is an immutable sequence of path events. Sub-paths start with a
MoveTo and are closed iff they end with a Close event. PathBuilder offers
the usual drawing commands plus helpers for closed shapes (circle, rounded
rectangle, polygon).

Coordinates use the SVG convention: x to the right, y pointing down.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Sequence, Tuple, Union

from .errors import PathError


Point = Tuple[float, float]

# Cubic control point offset for a quarter circle of radius 1
KAPPA = 0.5522847498


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MoveTo:
    to: Point


@dataclass(frozen=True)
class LineTo:
    to: Point


@dataclass(frozen=True)
class QuadraticTo:
    ctrl: Point
    to: Point


@dataclass(frozen=True)
class CubicTo:
    ctrl1: Point
    ctrl2: Point
    to: Point


@dataclass(frozen=True)
class Close:
    pass


PathEvent = Union[MoveTo, LineTo, QuadraticTo, CubicTo, Close]


@dataclass(frozen=True)
class Path:
    """Immutable ordered sequence of path events."""
    events: Tuple[PathEvent, ...] = ()

    def __iter__(self) -> Iterator[PathEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    @property
    def is_empty(self) -> bool:
        return not self.events

    @property
    def num_subpaths(self) -> int:
        return sum(1 for ev in self.events if isinstance(ev, MoveTo))

    def points(self) -> List[Point]:
        """All points referenced by the path (endpoints and control points)."""
        pts = []
        for ev in self.events:
            if isinstance(ev, (MoveTo, LineTo)):
                pts.append(ev.to)
            elif isinstance(ev, QuadraticTo):
                pts.extend([ev.ctrl, ev.to])
            elif isinstance(ev, CubicTo):
                pts.extend([ev.ctrl1, ev.ctrl2, ev.to])
        return pts

    @staticmethod
    def builder() -> 'PathBuilder':
        return PathBuilder()


# ---------------------------------------------------------------------------
# Shape parameters
# ---------------------------------------------------------------------------

class Winding(Enum):
    """Traversal direction of a closed shape.

    POSITIVE runs clockwise on screen (y down), NEGATIVE is its reversal.
    """
    POSITIVE = 1
    NEGATIVE = -1


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class BorderRadii:
    top_left: float = 0.0
    top_right: float = 0.0
    bottom_left: float = 0.0
    bottom_right: float = 0.0

    @classmethod
    def uniform(cls, radius: float) -> 'BorderRadii':
        return cls(radius, radius, radius, radius)


def _point(p) -> Point:
    x, y = p
    return (float(x), float(y))


def _check_non_negative(name: str, value: float):
    if not math.isfinite(value) or value < 0:
        raise PathError(f"{name} must be a finite non-negative number, got {value!r}")


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class PathBuilder:
    """Accumulates path events and produces an immutable Path."""

    def __init__(self):
        self._events: List[PathEvent] = []
        self._open = False

    def begin(self, at) -> 'PathBuilder':
        if self._open:
            raise PathError("begin() called while a sub-path is still open; call end() first")
        self._events.append(MoveTo(_point(at)))
        self._open = True
        return self

    def _require_open(self, op: str):
        if not self._open:
            raise PathError(f"{op}() requires an open sub-path; call begin() first")

    def line_to(self, to) -> 'PathBuilder':
        self._require_open('line_to')
        self._events.append(LineTo(_point(to)))
        return self

    def quadratic_bezier_to(self, ctrl, to) -> 'PathBuilder':
        self._require_open('quadratic_bezier_to')
        self._events.append(QuadraticTo(_point(ctrl), _point(to)))
        return self

    def cubic_bezier_to(self, ctrl1, ctrl2, to) -> 'PathBuilder':
        self._require_open('cubic_bezier_to')
        self._events.append(CubicTo(_point(ctrl1), _point(ctrl2), _point(to)))
        return self

    def end(self, close: bool = False) -> 'PathBuilder':
        self._require_open('end')
        if close:
            self._events.append(Close())
        self._open = False
        return self

    def close(self) -> 'PathBuilder':
        return self.end(close=True)

    # Closed shapes -----------------------------------------------------

    def _add_contour(self, start: Point, segments: list, winding: Winding):
        """Emit a closed contour given as a start point and segment list.

        Each segment is a tuple of points, the last one being the end point
        (1 point = line, 2 = quadratic, 3 = cubic).
        """
        if winding is Winding.NEGATIVE:
            start, segments = _reverse_contour(start, segments)

        self.begin(start)
        for seg in segments:
            if len(seg) == 1:
                self.line_to(seg[0])
            elif len(seg) == 2:
                self.quadratic_bezier_to(seg[0], seg[1])
            else:
                self.cubic_bezier_to(seg[0], seg[1], seg[2])
        self.end(close=True)

    def add_circle(self, center, radius: float, winding: Winding = Winding.POSITIVE) -> 'PathBuilder':
        _check_non_negative('radius', radius)
        cx, cy = _point(center)
        r = float(radius)
        k = KAPPA * r
        start = (cx, cy - r)
        segments = [
            ((cx + k, cy - r), (cx + r, cy - k), (cx + r, cy)),
            ((cx + r, cy + k), (cx + k, cy + r), (cx, cy + r)),
            ((cx - k, cy + r), (cx - r, cy + k), (cx - r, cy)),
            ((cx - r, cy - k), (cx - k, cy - r), (cx, cy - r)),
        ]
        self._add_contour(start, segments, winding)
        return self

    def add_rectangle(self, rect: Rect, winding: Winding = Winding.POSITIVE) -> 'PathBuilder':
        return self.add_rounded_rectangle(rect, BorderRadii(), winding)

    def add_rounded_rectangle(self, rect: Rect, radii: BorderRadii,
                              winding: Winding = Winding.POSITIVE) -> 'PathBuilder':
        _check_non_negative('width', rect.width)
        _check_non_negative('height', rect.height)
        for name in ('top_left', 'top_right', 'bottom_left', 'bottom_right'):
            _check_non_negative(name, getattr(radii, name))

        x, y = float(rect.x), float(rect.y)
        w, h = float(rect.width), float(rect.height)
        limit = min(w, h) / 2.0
        tl = min(radii.top_left, limit)
        tr = min(radii.top_right, limit)
        bl = min(radii.bottom_left, limit)
        br = min(radii.bottom_right, limit)

        def corner(corner_pt, end_pt, from_pt):
            # Quarter arc from from_pt to end_pt bending toward corner_pt
            c1 = (from_pt[0] + (corner_pt[0] - from_pt[0]) * KAPPA,
                  from_pt[1] + (corner_pt[1] - from_pt[1]) * KAPPA)
            c2 = (end_pt[0] + (corner_pt[0] - end_pt[0]) * KAPPA,
                  end_pt[1] + (corner_pt[1] - end_pt[1]) * KAPPA)
            return (c1, c2, end_pt)

        start = (x + tl, y)
        segments = [((x + w - tr, y),)]
        if tr > 0:
            segments.append(corner((x + w, y), (x + w, y + tr), (x + w - tr, y)))
        segments.append(((x + w, y + h - br),))
        if br > 0:
            segments.append(corner((x + w, y + h), (x + w - br, y + h), (x + w, y + h - br)))
        segments.append(((x + bl, y + h),))
        if bl > 0:
            segments.append(corner((x, y + h), (x, y + h - bl), (x + bl, y + h)))
        segments.append(((x, y + tl),))
        if tl > 0:
            segments.append(corner((x, y), (x + tl, y), (x, y + tl)))

        self._add_contour(start, segments, winding)
        return self

    def add_polygon(self, points: Sequence, closed: bool = True) -> 'PathBuilder':
        pts = [_point(p) for p in points]
        if not pts:
            raise PathError("add_polygon() needs at least one point")
        self.begin(pts[0])
        for p in pts[1:]:
            self.line_to(p)
        self.end(close=closed)
        return self

    def build(self) -> Path:
        if self._open:
            raise PathError("build() called with an open sub-path; call end() first")
        return Path(tuple(self._events))


def _reverse_contour(start: Point, segments: list):
    """Reverse the traversal direction of a contour."""
    # Start point of every segment
    starts = [start] + [seg[-1] for seg in segments[:-1]]
    end = segments[-1][-1] if segments else start

    reversed_segments = []
    for seg_start, seg in zip(reversed(starts), reversed(segments)):
        ctrls = list(seg[:-1])
        ctrls.reverse()
        reversed_segments.append(tuple(ctrls) + (seg_start,))
    return end, reversed_segments


# ---------------------------------------------------------------------------
# Example shapes
# ---------------------------------------------------------------------------

class ExampleShape(Enum):
    """The fixed set of demonstration shapes. Values are used as file names."""
    BEZIER = 'Bezier'
    CIRCLE = 'Circle'
    ROUND_RECT = 'RoundRect'
    POLYGON = 'Polygon'

    def __str__(self):
        return self.value

    @classmethod
    def parse(cls, name: str) -> 'ExampleShape':
        """Look up a shape by value or member name, case-insensitively."""
        key = name.strip().lower().replace('_', '').replace('-', '')
        for shape in cls:
            if key in (shape.value.lower(), shape.name.lower().replace('_', '')):
                return shape
        raise ValueError(f"Unknown shape: {name!r} (expected one of {[s.value for s in cls]})")


def _bezier(builder: PathBuilder):
    builder.begin((0.0, 0.0))
    builder.quadratic_bezier_to((60.0, 0.0), (90.0, 90.0))
    builder.end(close=True)


def _circle(builder: PathBuilder):
    builder.add_circle((0.0, 0.0), 90.0, Winding.POSITIVE)


def _round_rect(builder: PathBuilder):
    builder.add_rounded_rectangle(
        Rect(5.0, 5.0, 80.0, 80.0),
        BorderRadii.uniform(5.0),
        Winding.POSITIVE,
    )


def _polygon(builder: PathBuilder):
    builder.add_polygon([(45.0, 10.0), (80.0, 80.0), (10.0, 80.0)], closed=True)


_SHAPE_BUILDERS = {
    ExampleShape.BEZIER: _bezier,
    ExampleShape.CIRCLE: _circle,
    ExampleShape.ROUND_RECT: _round_rect,
    ExampleShape.POLYGON: _polygon,
}


def build_example_path(shape: ExampleShape) -> Path:
    """Build the abstract path for one of the example shapes."""
    builder = PathBuilder()
    _SHAPE_BUILDERS[shape](builder)
    return builder.build()

"""
Fill and stroke tessellation.

Turns a Path into GeometryBuffers: a vertex tensor plus a flat triangle index
tensor. Flattening and fill-rule classification happen in tessvg.kernels;
buffering (stroke outlines), noding and constrained Delaunay triangulation
are delegated to shapely/GEOS.

Pipeline per pass:
1. Flatten the path into polylines (tolerance-bounded)
2. Build the covered region (fill: faces kept by the fill rule,
   stroke: union of buffered polylines)
3. Triangulate the region
4. Collect triangles through a BuffersBuilder, which applies the caller's
   vertex projection and drops degenerate triangles
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
import shapely
import torch
from shapely.errors import GEOSException
from shapely.geometry import LinearRing, LineString, Polygon
from shapely.ops import unary_union

from .errors import TessellationError
from .kernels import Polyline, flatten_path, total_winding_numbers
from .path import Path

log = logging.getLogger(__name__)


# Triangles with a smaller absolute area are dropped
MIN_TRIANGLE_AREA = 1e-9


class FillRule(Enum):
    """Rule deciding which regions of a path are interior."""
    EVEN_ODD = 'evenodd'
    NON_ZERO = 'nonzero'


class LineJoin(Enum):
    """Stroke join style. Values are shapely join_style names."""
    MITER = 'mitre'
    ROUND = 'round'
    BEVEL = 'bevel'


class LineCap(Enum):
    """Stroke cap style for open sub-paths. Values are shapely cap_style names."""
    BUTT = 'flat'
    SQUARE = 'square'
    ROUND = 'round'


@dataclass
class FillOptions:
    """Options for the fill tessellator."""
    tolerance: float = 0.1                   # Max curve flattening error
    fill_rule: FillRule = FillRule.EVEN_ODD


@dataclass
class StrokeOptions:
    """Options for the stroke tessellator."""
    tolerance: float = 0.1                   # Max curve flattening error
    line_width: float = 1.0
    line_join: LineJoin = LineJoin.MITER
    line_cap: LineCap = LineCap.BUTT
    miter_limit: float = 4.0


@dataclass(frozen=True)
class FillVertex:
    """Vertex produced by the fill tessellator."""
    position: Tuple[float, float]


@dataclass(frozen=True)
class StrokeVertex:
    """Vertex produced by the stroke tessellator."""
    position: Tuple[float, float]
    line_width: float


def position_only(vertex) -> Tuple[float, float]:
    """Default vertex projection: keep the 2D position."""
    return vertex.position


@dataclass
class GeometryBuffers:
    """
    Output of one tessellation pass.

    Memory layout:
    - vertices[i, :] = projected vertex record (x, y for position_only)
    - indices[3 * t + k] = k-th vertex of triangle t
    """
    vertices: torch.Tensor           # float32: [num_vertices, record_width]
    indices: torch.Tensor            # int32: [num_triangles * 3]

    @property
    def num_vertices(self) -> int:
        return self.vertices.shape[0]

    @property
    def num_triangles(self) -> int:
        return self.indices.shape[0] // 3

    @property
    def is_empty(self) -> bool:
        return self.indices.shape[0] == 0

    def triangles(self) -> torch.Tensor:
        """Indices grouped per triangle: [num_triangles, 3]."""
        return self.indices.view(-1, 3)

    def validate(self):
        """Check the buffer invariants. Raises ValueError on violation."""
        if self.indices.shape[0] % 3 != 0:
            raise ValueError(f"Index count {self.indices.shape[0]} is not a multiple of 3")
        if self.indices.shape[0] > 0:
            lo = int(self.indices.min())
            hi = int(self.indices.max())
            if lo < 0 or hi >= self.num_vertices:
                raise ValueError(
                    f"Index out of range: [{lo}, {hi}] for {self.num_vertices} vertices")

    @classmethod
    def empty(cls, record_width: int = 2) -> 'GeometryBuffers':
        return cls(
            vertices=torch.zeros((0, record_width), dtype=torch.float32),
            indices=torch.zeros((0,), dtype=torch.int32),
        )


def _signed_area(p0, p1, p2) -> float:
    return 0.5 * ((p1[0] - p0[0]) * (p2[1] - p0[1]) - (p2[0] - p0[0]) * (p1[1] - p0[1]))


class BuffersBuilder:
    """
    Collects tessellator output into GeometryBuffers.

    Vertices are shared between triangles by position, in first-seen order.
    The vertex_constructor maps a FillVertex/StrokeVertex to a flat record
    of floats (default: the position).
    """

    def __init__(self, vertex_constructor: Optional[Callable] = None):
        self.vertex_constructor = vertex_constructor or position_only
        self._records: List[List[float]] = []
        self._index_of = {}
        self._indices: List[int] = []

    def add_vertex(self, vertex) -> int:
        index = self._index_of.get(vertex.position)
        if index is None:
            record = [float(v) for v in self.vertex_constructor(vertex)]
            if self._records and len(record) != len(self._records[0]):
                raise ValueError(
                    f"Vertex projection returned {len(record)} values, expected {len(self._records[0])}")
            index = len(self._records)
            self._records.append(record)
            self._index_of[vertex.position] = index
        return index

    def add_triangle(self, v0, v1, v2) -> bool:
        """Add a triangle. Returns False if it was dropped as degenerate."""
        if abs(_signed_area(v0.position, v1.position, v2.position)) < MIN_TRIANGLE_AREA:
            return False
        self._indices.extend([self.add_vertex(v0), self.add_vertex(v1), self.add_vertex(v2)])
        return True

    def build(self) -> GeometryBuffers:
        if not self._records:
            return GeometryBuffers.empty()
        return GeometryBuffers(
            vertices=torch.tensor(self._records, dtype=torch.float32),
            indices=torch.tensor(self._indices, dtype=torch.int32),
        )


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _check_path(path: Path):
    for x, y in path.points():
        if not (math.isfinite(x) and math.isfinite(y)):
            raise TessellationError(f"Path contains a non-finite coordinate ({x}, {y})", path=path)


def _check_tolerance(tolerance: float, path: Path):
    if not (math.isfinite(tolerance) and tolerance > 0):
        raise TessellationError(f"tolerance must be a finite positive number, got {tolerance}", path=path)


def _flatten(path: Path, tolerance: float) -> List[Polyline]:
    try:
        return flatten_path(path, tolerance)
    except ValueError as e:
        raise TessellationError(f"Malformed path: {e}", path=path) from e


def _triangulate(region) -> List[List[Tuple[float, float]]]:
    """Constrained Delaunay triangulation of a (multi)polygon region."""
    triangles = []
    if region is None or region.is_empty:
        return triangles
    for poly in shapely.get_parts(region):
        if poly.geom_type != 'Polygon' or poly.is_empty:
            continue
        result = shapely.constrained_delaunay_triangles(poly)
        for tri in shapely.get_parts(result):
            coords = np.asarray(tri.exterior.coords)[:3]
            triangles.append([(float(x), float(y)) for x, y in coords])
    return triangles


# ---------------------------------------------------------------------------
# Fill
# ---------------------------------------------------------------------------

def _fill_region(rings: Sequence[Polyline], fill_rule: FillRule):
    """Interior region of a set of closed rings under the given fill rule."""
    if not rings:
        return Polygon()

    # A single simple ring is its own interior under both rules
    if len(rings) == 1:
        ring = LinearRing(rings[0].coords())
        if ring.is_simple:
            polygon = Polygon(ring)
            return polygon if polygon.area > 0 else Polygon()

    # Node all rings against each other and classify the resulting faces
    lines = [LineString(pl.coords() + pl.coords()[:1]) for pl in rings]
    noded = unary_union(lines)
    faces = list(shapely.get_parts(shapely.polygonize(shapely.get_parts(noded))))
    faces = [f for f in faces if not f.is_empty and f.area > 0]
    if not faces:
        return Polygon()

    samples = torch.tensor(
        [f.representative_point().coords[0] for f in faces], dtype=torch.float64)
    winding = total_winding_numbers(samples, [pl.points for pl in rings])

    if fill_rule is FillRule.EVEN_ODD:
        keep = (winding % 2) != 0
    else:
        keep = winding != 0

    kept = [f for f, k in zip(faces, keep.tolist()) if k]
    if not kept:
        return Polygon()
    return unary_union(kept)


def tessellate_fill(
    path: Path,
    options: Optional[FillOptions] = None,
    vertex_constructor: Optional[Callable] = None,
) -> GeometryBuffers:
    """
    Tessellate the interior of a path.

    Every sub-path is treated as closed. Self-intersecting and overlapping
    sub-paths are resolved with options.fill_rule.

    Args:
        path: Path to fill
        options: FillOptions (defaults if None)
        vertex_constructor: Maps a FillVertex to a vertex record

    Returns:
        GeometryBuffers

    Raises:
        TessellationError: malformed path, bad options or library failure
    """
    options = options or FillOptions()
    _check_tolerance(options.tolerance, path)
    _check_path(path)

    polylines = _flatten(path, options.tolerance)
    rings = [pl for pl in polylines if pl.num_points >= 3]

    builder = BuffersBuilder(vertex_constructor)
    try:
        region = _fill_region(rings, options.fill_rule)
        triangles = _triangulate(region)
    except GEOSException as e:
        raise TessellationError(f"Fill tessellation failed: {e}", path=path) from e

    for p0, p1, p2 in triangles:
        builder.add_triangle(FillVertex(p0), FillVertex(p1), FillVertex(p2))

    geometry = builder.build()
    log.debug("fill: %d sub-paths -> %d vertices, %d triangles",
              len(polylines), geometry.num_vertices, geometry.num_triangles)
    return geometry


# ---------------------------------------------------------------------------
# Stroke
# ---------------------------------------------------------------------------

def _quad_segments(radius: float, tolerance: float) -> int:
    """Segments per quarter circle so that round joins/caps stay within tolerance."""
    if tolerance >= radius:
        return 1
    step = 2.0 * math.acos(1.0 - tolerance / radius)
    return max(1, math.ceil((math.pi / 2.0) / step))


def _stroke_region(polylines: Sequence[Polyline], options: StrokeOptions):
    half_width = options.line_width / 2.0
    quad_segs = _quad_segments(half_width, options.tolerance)

    outlines = []
    for pl in polylines:
        coords = pl.coords()
        if len(coords) < 2:
            continue
        if pl.is_closed and len(coords) >= 3:
            line = LineString(coords + coords[:1])
        else:
            line = LineString(coords)
        outlines.append(line.buffer(
            half_width,
            quad_segs=quad_segs,
            cap_style=options.line_cap.value,
            join_style=options.line_join.value,
            mitre_limit=options.miter_limit,
        ))

    if not outlines:
        return Polygon()
    return unary_union(outlines)


def tessellate_stroke(
    path: Path,
    options: Optional[StrokeOptions] = None,
    vertex_constructor: Optional[Callable] = None,
) -> GeometryBuffers:
    """
    Tessellate the outline of a path at options.line_width.

    Closed sub-paths are stroked as rings (joined at their start point),
    open ones get options.line_cap at both ends.

    Args:
        path: Path to stroke
        options: StrokeOptions (defaults if None)
        vertex_constructor: Maps a StrokeVertex to a vertex record

    Returns:
        GeometryBuffers

    Raises:
        TessellationError: malformed path, bad options or library failure
    """
    options = options or StrokeOptions()
    _check_tolerance(options.tolerance, path)
    if not (math.isfinite(options.line_width) and options.line_width > 0):
        raise TessellationError(f"line_width must be a finite positive number, got {options.line_width}", path=path)
    if not (math.isfinite(options.miter_limit) and options.miter_limit >= 1.0):
        raise TessellationError(f"miter_limit must be >= 1, got {options.miter_limit}", path=path)
    _check_path(path)

    polylines = _flatten(path, options.tolerance)

    builder = BuffersBuilder(vertex_constructor)
    try:
        region = _stroke_region(polylines, options)
        triangles = _triangulate(region)
    except GEOSException as e:
        raise TessellationError(f"Stroke tessellation failed: {e}", path=path) from e

    for p0, p1, p2 in triangles:
        builder.add_triangle(
            StrokeVertex(p0, options.line_width),
            StrokeVertex(p1, options.line_width),
            StrokeVertex(p2, options.line_width),
        )

    geometry = builder.build()
    log.debug("stroke: %d sub-paths -> %d vertices, %d triangles",
              len(polylines), geometry.num_vertices, geometry.num_triangles)
    return geometry

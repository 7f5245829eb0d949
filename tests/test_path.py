"""
Tests for path construction.

Covers the builder commands, closed shape helpers, winding reversal,
validation errors and the example shapes.
"""

import math

import pytest

from tessvg.errors import PathError
from tessvg.path import (
    BorderRadii,
    Close,
    CubicTo,
    ExampleShape,
    LineTo,
    MoveTo,
    Path,
    PathBuilder,
    QuadraticTo,
    Rect,
    Winding,
    build_example_path,
)


def endpoints(path):
    return [ev.to for ev in path if not isinstance(ev, Close)]


class TestPathBuilder:
    """Tests for the drawing commands."""

    def test_quadratic_subpath(self):
        """begin / quadratic / end(close) produces the expected events."""
        builder = PathBuilder()
        builder.begin((0, 0))
        builder.quadratic_bezier_to((60, 0), (90, 90))
        builder.end(close=True)
        path = builder.build()

        assert path.events == (
            MoveTo((0.0, 0.0)),
            QuadraticTo((60.0, 0.0), (90.0, 90.0)),
            Close(),
        )
        assert path.num_subpaths == 1

    def test_open_subpath_has_no_close(self):
        path = PathBuilder().begin((0, 0)).line_to((10, 0)).end().build()
        assert path.events == (MoveTo((0.0, 0.0)), LineTo((10.0, 0.0)))

    def test_cubic_and_points(self):
        path = (PathBuilder()
                .begin((0, 0))
                .cubic_bezier_to((1, 2), (3, 4), (5, 6))
                .close()
                .build())
        assert isinstance(path.events[1], CubicTo)
        assert path.points() == [(0.0, 0.0), (1.0, 2.0), (3.0, 4.0), (5.0, 6.0)]

    def test_multiple_subpaths(self):
        builder = PathBuilder()
        builder.add_polygon([(0, 0), (1, 0), (0, 1)])
        builder.add_polygon([(5, 5), (6, 5), (5, 6)], closed=False)
        path = builder.build()
        assert path.num_subpaths == 2
        assert len(path) == 4 + 3

    def test_path_is_immutable(self):
        path = Path.builder().add_polygon([(0, 0), (1, 0), (0, 1)]).build()
        with pytest.raises(Exception):
            path.events = ()

    def test_empty_path(self):
        path = PathBuilder().build()
        assert path.is_empty
        assert path.num_subpaths == 0


class TestValidation:
    """Tests for builder misuse and invalid shape parameters."""

    def test_line_before_begin(self):
        with pytest.raises(PathError):
            PathBuilder().line_to((1, 1))

    def test_double_begin(self):
        builder = PathBuilder().begin((0, 0))
        with pytest.raises(PathError):
            builder.begin((1, 1))

    def test_build_with_open_subpath(self):
        builder = PathBuilder().begin((0, 0)).line_to((1, 1))
        with pytest.raises(PathError):
            builder.build()

    def test_end_without_begin(self):
        with pytest.raises(PathError):
            PathBuilder().end()

    def test_negative_radius(self):
        with pytest.raises(PathError):
            PathBuilder().add_circle((0, 0), -1.0)

    def test_nan_radius(self):
        with pytest.raises(PathError):
            PathBuilder().add_circle((0, 0), float('nan'))

    def test_negative_size(self):
        with pytest.raises(PathError):
            PathBuilder().add_rectangle(Rect(0, 0, -5, 5))

    def test_negative_corner_radius(self):
        with pytest.raises(PathError):
            PathBuilder().add_rounded_rectangle(Rect(0, 0, 5, 5), BorderRadii(top_left=-1))

    def test_empty_polygon(self):
        with pytest.raises(PathError):
            PathBuilder().add_polygon([])

    def test_path_error_is_value_error(self):
        with pytest.raises(ValueError):
            PathBuilder().add_circle((0, 0), -1.0)


class TestClosedShapes:
    """Tests for circle, rectangle and polygon helpers."""

    def test_circle_structure(self):
        path = PathBuilder().add_circle((0, 0), 90.0).build()

        assert isinstance(path.events[0], MoveTo)
        assert all(isinstance(ev, CubicTo) for ev in path.events[1:5])
        assert isinstance(path.events[-1], Close)
        assert len(path) == 6

        for x, y in endpoints(path):
            assert abs(math.hypot(x, y) - 90.0) < 1e-9

    def test_circle_winding(self):
        """Negative winding traverses the same points in reverse order."""
        pos = PathBuilder().add_circle((0, 0), 90.0, Winding.POSITIVE).build()
        neg = PathBuilder().add_circle((0, 0), 90.0, Winding.NEGATIVE).build()

        assert endpoints(pos)[0] == endpoints(neg)[0] == (0.0, -90.0)
        assert endpoints(pos)[1] == (90.0, 0.0)
        assert endpoints(neg)[1] == (-90.0, 0.0)
        assert endpoints(neg) == list(reversed(endpoints(pos)))

    def test_reversed_controls(self):
        pos = PathBuilder().add_circle((0, 0), 10.0, Winding.POSITIVE).build()
        neg = PathBuilder().add_circle((0, 0), 10.0, Winding.NEGATIVE).build()
        first_pos = pos.events[1]
        last_neg = neg.events[4]
        assert (last_neg.ctrl1, last_neg.ctrl2) == (first_pos.ctrl2, first_pos.ctrl1)

    def test_rectangle(self):
        path = PathBuilder().add_rectangle(Rect(1, 2, 3, 4)).build()
        assert len(path) == 6
        assert set(endpoints(path)) == {(1.0, 2.0), (4.0, 2.0), (4.0, 6.0), (1.0, 6.0)}

    def test_rounded_rectangle(self):
        path = PathBuilder().add_rounded_rectangle(
            Rect(5, 5, 80, 80), BorderRadii.uniform(5)).build()

        lines = [ev for ev in path if isinstance(ev, LineTo)]
        cubics = [ev for ev in path if isinstance(ev, CubicTo)]
        assert len(lines) == 4
        assert len(cubics) == 4
        assert path.events[0] == MoveTo((10.0, 5.0))
        for x, y in path.points():
            assert 5.0 <= x <= 85.0
            assert 5.0 <= y <= 85.0

    def test_corner_radii_are_clamped(self):
        path = PathBuilder().add_rounded_rectangle(
            Rect(0, 0, 10, 20), BorderRadii.uniform(100)).build()
        for x, y in path.points():
            assert 0.0 <= x <= 10.0
            assert 0.0 <= y <= 20.0

    def test_polygon(self):
        path = PathBuilder().add_polygon([(45, 10), (80, 80), (10, 80)]).build()
        assert path.events == (
            MoveTo((45.0, 10.0)),
            LineTo((80.0, 80.0)),
            LineTo((10.0, 80.0)),
            Close(),
        )


class TestExampleShapes:
    """Tests for the fixed example shapes."""

    def test_names(self):
        assert [str(s) for s in ExampleShape] == ['Bezier', 'Circle', 'RoundRect', 'Polygon']

    def test_parse(self):
        assert ExampleShape.parse('RoundRect') is ExampleShape.ROUND_RECT
        assert ExampleShape.parse('round_rect') is ExampleShape.ROUND_RECT
        assert ExampleShape.parse('round-rect') is ExampleShape.ROUND_RECT
        assert ExampleShape.parse('bezier') is ExampleShape.BEZIER
        with pytest.raises(ValueError):
            ExampleShape.parse('hexagon')

    @pytest.mark.parametrize('shape', list(ExampleShape))
    def test_every_shape_is_closed(self, shape):
        path = build_example_path(shape)
        assert path.num_subpaths == 1
        assert isinstance(path.events[-1], Close)

    def test_bezier(self):
        path = build_example_path(ExampleShape.BEZIER)
        assert path.events[1] == QuadraticTo((60.0, 0.0), (90.0, 90.0))

    def test_polygon(self):
        path = build_example_path(ExampleShape.POLYGON)
        assert endpoints(path) == [(45.0, 10.0), (80.0, 80.0), (10.0, 80.0)]


if __name__ == '__main__':
    pytest.main([__file__, '-v'])

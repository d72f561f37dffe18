"""
Geometrie-Primitives: Point2D, BoundingBox2D, Line2D, Arc2D, PolyBezier
"""

import math

import numpy as np
import pytest

from curvekernel import (
    Bezier, Point2D, Line2D, Arc2D, BoundingBox2D, Interval, PathShape, PolyBezier,
    line_line_intersection, is_point_on_arc,
)


class TestPoint2D:

    def test_vector_operations(self):
        a = Point2D(1, 2)
        b = Point2D(3, 5)
        assert a + b == Point2D(4, 7)
        assert b - a == Point2D(2, 3)
        assert a * 2 == Point2D(2, 4)
        assert 2 * a == Point2D(2, 4)
        assert -a == Point2D(-1, -2)
        assert a.dot(b) == 13
        assert a.cross(b) == -1

    def test_numpy_scalars_become_floats(self):
        p = Point2D(np.float64(1.5), np.int64(2))
        assert type(p.x) is float and type(p.y) is float

    def test_of_accepts_tuples(self):
        assert Point2D.of((3, 4)).magnitude == pytest.approx(5)


class TestBoundingBox:

    def test_from_points(self):
        box = BoundingBox2D.from_points([Point2D(3, -1), Point2D(-2, 4), Point2D(0, 0)])
        assert box.min == Point2D(-2, -1)
        assert box.max == Point2D(3, 4)
        assert box.width == 5 and box.height == 5

    def test_touching_counts_as_intersection(self):
        a = BoundingBox2D(Point2D(0, 0), Point2D(1, 1))
        b = BoundingBox2D(Point2D(1, 0), Point2D(2, 1))
        c = BoundingBox2D(Point2D(1.5, 0), Point2D(2, 1))
        assert a.intersects(b)
        assert not a.intersects(c)

    def test_union(self):
        a = BoundingBox2D(Point2D(0, 0), Point2D(1, 1))
        b = BoundingBox2D(Point2D(-1, 0.5), Point2D(0.5, 3))
        u = a.union(b)
        assert u.min == Point2D(-1, 0) and u.max == Point2D(1, 3)


class TestPathShapes:
    """Gemeinsame Pfad-Schnittstelle"""

    def test_all_shapes_implement_protocol(self, arch_curve):
        shapes = [
            arch_curve,
            Line2D(Point2D(0, 0), Point2D(1, 0)),
            Arc2D(Point2D(0, 0), 1.0, 0.0, 90.0),
        ]
        for shape in shapes:
            assert isinstance(shape, PathShape)

    def test_line_break_and_position(self):
        line = Line2D(Point2D(0, 0), Point2D(10, 0))
        left, right = line.break_at(0.3)
        assert left.end.is_close(Point2D(3, 0))
        assert right.start.is_close(Point2D(3, 0))
        assert line.position(0.5) == Point2D(5, 0)

    def test_arc_degrees(self):
        arc = Arc2D(Point2D(0, 0), 2.0, 0.0, 90.0)
        assert arc.start_point.is_close(Point2D(2, 0))
        assert arc.end_point.is_close(Point2D(0, 2))
        assert arc.length == pytest.approx(math.pi)

    def test_arc_wraps_over_zero(self):
        arc = Arc2D(Point2D(0, 0), 1.0, 350.0, 10.0)
        assert arc.sweep_angle == pytest.approx(20)
        assert is_point_on_arc(Point2D(1, 0), arc)
        assert not is_point_on_arc(Point2D(-1, 0), arc)

    def test_arc_break(self):
        left, right = Arc2D(Point2D(0, 0), 1.0, 0.0, 90.0).break_at(0.5)
        assert left.end_angle == pytest.approx(45)
        assert right.start_angle == pytest.approx(45)

    def test_clone_copies_interval(self):
        line = Line2D(Point2D(0, 0), Point2D(1, 1), Interval(0.2, 0.4))
        copy = line.clone()
        copy.interval.start = 0.0
        assert line.interval.start == 0.2

    def test_arc_output_serializes_with_interval(self, arch_curve):
        """Bögen und Geraden aus to_arcs() tragen ihr Kurvenintervall ins Dictionary"""
        for shape in arch_curve.to_arcs(1.0):
            data = shape.to_dict()
            assert data["type"] in ("Arc2D", "Line2D")
            assert data["interval"] == [shape.interval.start, shape.interval.end]


class TestIntersectionPrimitives:

    def test_line_line(self):
        p = line_line_intersection(Line2D(Point2D(0, 0), Point2D(2, 2)), Line2D(Point2D(0, 2), Point2D(2, 0)))
        assert p.is_close(Point2D(1, 1))

    def test_parallel_lines(self):
        assert line_line_intersection(Line2D(Point2D(0, 0), Point2D(1, 0)),
                                      Line2D(Point2D(0, 1), Point2D(1, 1))) is None


class TestPolyBezier:
    """Kurvenverbund"""

    @pytest.fixture
    def square(self):
        corners = [(0, 0), (10, 0), (10, 10), (0, 10)]
        return PolyBezier([Bezier(corners[i], corners[(i + 1) % 4]) for i in range(4)])

    def test_closed_square(self, square):
        assert square.is_closed()
        assert len(square) == 4
        assert square.length == pytest.approx(40)

    def test_open_chain(self):
        poly = PolyBezier([Bezier((0, 0), (10, 0)), Bezier((10, 0), (10, 10))])
        assert not poly.is_closed()
        assert not PolyBezier().is_closed()

    def test_position_distributes_parameter(self, square):
        assert square.position(0.0) == Point2D(0, 0)
        assert square.position(0.375).is_close(Point2D(10, 5))
        assert square.position(1.0).is_close(Point2D(0, 0))

    def test_bbox(self, square):
        box = square.bbox()
        assert box.min == Point2D(0, 0) and box.max == Point2D(10, 10)

    def test_break_at(self, square):
        left, right = square.break_at(0.125)
        assert len(left) == 1 and len(right) == 4
        assert left[0].points[-1].is_close(Point2D(5, 0))

    def test_offset(self, square):
        offset = square.offset(1)
        assert len(offset) == 4
        assert offset[0].position(0.5).is_close(Point2D(5, 1))

    def test_svg_single_move(self, square):
        svg = square.to_svg()
        assert svg.startswith("M 0 0 C")
        assert svg.count("M") == 1
        assert svg.endswith("Z")

    def test_empty_position_raises(self):
        with pytest.raises(ValueError):
            PolyBezier().position(0.5)

    def test_clone(self, square):
        copy = square.clone()
        copy[0].translate((5, 5))
        assert square[0].points[0] == Point2D(0, 0)

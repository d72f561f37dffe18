"""
Schnittberechnung: Kurve/Linie, Kurve/Kurve, Selbstschnitt, Kurve/Kreis/Bogen
"""

import math

import pytest

from curvekernel.config.feature_flags import set_flag
from curvekernel import (
    Bezier, Point2D, Line2D, Circle2D, Arc2D,
    curve_curve_intersections, pair_iteration,
)


class TestCurveLine:
    """Wurzeln der ausgerichteten Kurve, gefiltert aufs Segment"""

    def test_vertical_line_through_apex(self, arch_curve):
        result = arch_curve.intersects_line(Line2D(Point2D(50, -10), Point2D(50, 200)))
        assert result == pytest.approx([0.5])

    def test_segment_above_curve_misses(self, arch_curve):
        assert arch_curve.intersects_line(Line2D(Point2D(50, 80), Point2D(50, 200))) == []

    def test_horizontal_line_two_hits(self, arch_curve):
        result = arch_curve.intersects_line(Line2D(Point2D(-10, 50), Point2D(110, 50)))
        expected = [(1 - math.sqrt(1 / 3)) / 2, (1 + math.sqrt(1 / 3)) / 2]
        assert result == pytest.approx(expected, abs=1e-9)

    def test_hits_lie_on_line(self, s_curve):
        line = Line2D(Point2D(0, 100), Point2D(100, 0))
        result = s_curve.intersects_line(line)
        assert result
        for t in result:
            assert line.distance_to_point(s_curve.position(t)) == pytest.approx(0.0, abs=1e-6)

    def test_quadratic_line(self, quadratic_curve):
        result = quadratic_curve.intersects_line(Line2D(Point2D(0, 25), Point2D(100, 25)))
        assert len(result) == 2
        for t in result:
            assert quadratic_curve.position(t).y == pytest.approx(25)

    def test_quartic_fallback(self, arch_curve):
        quartic = arch_curve.raise_order()
        result = quartic.intersects_line(Line2D(Point2D(-10, 50), Point2D(110, 50)))
        assert result == pytest.approx(arch_curve.intersects_line(Line2D(Point2D(-10, 50), Point2D(110, 50))), abs=1e-6)

    @pytest.mark.parametrize("points", [
        [(10, 20), (40, 90), (120, 70), (150, 35)],
        [(-37.5, 12.25), (5, 80), (60, 95.5), (91.3, 4.7)],
        [(0, 0), (30, -40), (70, -40), (100, 0)],
    ])
    def test_chord_hits_both_endpoints(self, points):
        """Sehne durch Start- und Endpunkt liefert t=0 und t=1"""
        curve = Bezier(*points)
        p0, p3 = curve.points[0], curve.points[-1]
        dx, dy = p3.x - p0.x, p3.y - p0.y
        chord = Line2D(Point2D(p0.x - dx / 2, p0.y - dy / 2), Point2D(p3.x + dx / 2, p3.y + dy / 2))
        assert curve.intersects_line(chord) == pytest.approx([0.0, 1.0], abs=1e-9)


class TestCurveCurve:
    """Bounding-Box Unterteilung"""

    @pytest.fixture
    def crossing_line(self):
        return Bezier((0, 60), (100, 60))

    def test_arch_and_line(self, arch_curve, crossing_line):
        result = arch_curve.intersects_curve(crossing_line)
        assert len(result) == 2

        # y(t) = 300 t (1-t) = 60
        ta = (1 - math.sqrt(0.2)) / 2
        xa = 300 * ta ** 2 - 200 * ta ** 3
        expected = [(ta, xa / 100), (1 - ta, 1 - xa / 100)]
        for (t1, t2), (e1, e2) in zip(result, expected):
            assert t1 == pytest.approx(e1, abs=2e-3)
            assert t2 == pytest.approx(e2, abs=2e-3)

    def test_hits_are_geometrically_close(self, arch_curve, s_curve):
        result = arch_curve.intersects_curve(s_curve)
        assert result
        for t1, t2 in result:
            assert arch_curve.position(t1).distance_to(s_curve.position(t2)) < 0.5

    def test_disjoint_curves(self, arch_curve):
        far = Bezier((0, 200), (50, 250), (100, 200))
        assert arch_curve.intersects_curve(far) == []

    def test_results_are_rounded(self, arch_curve, crossing_line):
        for t1, t2 in arch_curve.intersects_curve(crossing_line):
            assert t1 == round(t1, 5)
            assert t2 == round(t2, 5)

    def test_dispatch_to_curve(self, arch_curve, crossing_line):
        assert arch_curve.intersects(crossing_line) == arch_curve.intersects_curve(crossing_line)

    def test_pair_iteration_direct(self, arch_curve, crossing_line):
        left = arch_curve.split(0.5).left
        result = pair_iteration(left, crossing_line, 1e-4)
        assert len(result) == 1
        assert result[0][0] == pytest.approx((1 - math.sqrt(0.2)) / 2, abs=2e-4)

    def test_threshold_controls_precision(self, arch_curve, crossing_line):
        coarse = curve_curve_intersections(arch_curve.reduce(), crossing_line.reduce(), 1e-2)
        fine = curve_curve_intersections(arch_curve.reduce(), crossing_line.reduce(), 1e-4)
        ta = (1 - math.sqrt(0.2)) / 2
        assert abs(fine[0][0] - ta) <= abs(coarse[0][0] - ta) + 1e-4

    def test_debug_flag(self, arch_curve, crossing_line):
        set_flag("intersection_debug", True)
        assert len(arch_curve.intersects_curve(crossing_line)) == 2


class TestSelfIntersection:

    def test_arch_has_none(self, arch_curve):
        assert arch_curve.intersects_self() == []

    def test_loop_has_one(self, loop_curve):
        result = loop_curve.intersects_self()
        assert len(result) == 1
        # x(t) = x(1-t) und y(t) = y(1-t) für t (1-t) = 1/7
        ta = (1 - math.sqrt(3 / 7)) / 2
        t1, t2 = result[0]
        assert t1 == pytest.approx(ta, abs=2e-3)
        assert t2 == pytest.approx(1 - ta, abs=2e-3)

    def test_line_has_none(self):
        assert Bezier((0, 0), (100, 100)).intersects_self() == []


class TestCurveCircleArc:
    """Polynom |B(t) - c|² = r²"""

    def test_circle_two_hits(self, arch_curve):
        circle = Circle2D(Point2D(50, 0), 60)
        result = arch_curve.intersects_circle(circle)
        assert len(result) == 2
        for t in result:
            assert arch_curve.position(t).distance_to(circle.center) == pytest.approx(60, abs=1e-6)
        assert result[0] == pytest.approx(1 - result[1], abs=1e-7)

    def test_circle_miss(self, arch_curve):
        assert arch_curve.intersects_circle(Circle2D(Point2D(50, 0), 200)) == []

    def test_circle_through_endpoints(self, arch_curve):
        result = arch_curve.intersects(Circle2D(Point2D(50, 0), 50))
        assert result[0] == pytest.approx(0.0, abs=1e-6)
        assert result[-1] == pytest.approx(1.0, abs=1e-6)

    def test_arc_filters_angle_range(self, arch_curve):
        arc = Arc2D(Point2D(50, 0), 60, 0.0, 90.0)
        result = arch_curve.intersects_arc(arc)
        assert len(result) == 1
        assert result[0] > 0.5
        assert arch_curve.intersects(arc) == result

    def test_arc_other_side(self, arch_curve):
        arc = Arc2D(Point2D(50, 0), 60, 90.0, 180.0)
        result = arch_curve.intersects_arc(arc)
        assert len(result) == 1
        assert result[0] < 0.5

"""
Extrema, Bounding-Box, Überlappung und Wendepunkte
"""

import pytest

from curvekernel import Bezier


class TestExtrema:
    """Nullstellen der Ableitungen je Achse"""

    def test_quadratic_extrema(self, quadratic_curve):
        ext = quadratic_curve.extrema()
        assert ext.x == []
        assert ext.y == pytest.approx([0.5])
        assert ext.values == pytest.approx([0.5])

    def test_arch_extrema(self, arch_curve):
        ext = arch_curve.extrema()
        # y' = 0 bei 0.5; x' = 0 an den Enden, x'' = 0 bei 0.5
        assert ext.y == pytest.approx([0.5])
        assert ext.x == pytest.approx([0.0, 0.5, 1.0])
        assert ext.values == pytest.approx([0.0, 0.5, 1.0])

    def test_values_sorted_and_unique(self, s_curve):
        values = s_curve.extrema().values
        assert values == sorted(values)
        assert len(values) == len(set(values))

    def test_values_union_of_axes(self, s_curve):
        ext = s_curve.extrema()
        assert set(ext.values) == set(ext.x) | set(ext.y)

    def test_line_has_no_extrema(self):
        assert Bezier((0, 0), (100, 50)).extrema().values == []


class TestBoundingBox:
    """Box aus Endpunkten und Extrema"""

    def test_quadratic_bbox(self, quadratic_curve):
        box = quadratic_curve.bbox()
        assert (box.min.x, box.min.y) == pytest.approx((0, 0))
        assert (box.max.x, box.max.y) == pytest.approx((100, 50))

    def test_arch_bbox(self, arch_curve):
        box = arch_curve.bbox()
        assert (box.min.x, box.min.y) == pytest.approx((0, 0))
        assert (box.max.x, box.max.y) == pytest.approx((100, 75))

    def test_s_curve_bbox(self, s_curve):
        box = s_curve.bbox()
        assert (box.min.x, box.min.y) == pytest.approx((0, 0), abs=1e-9)
        assert (box.max.x, box.max.y) == pytest.approx((100, 100), abs=1e-9)

    def test_bbox_contains_samples(self, loop_curve):
        box = loop_curve.bbox()
        for i in range(101):
            assert box.contains_point(loop_curve.position(i / 100))

    def test_bbox_is_tight_for_loop(self, loop_curve):
        """Extremwerte werden von Kurvenpunkten erreicht"""
        box = loop_curve.bbox()
        xs = [loop_curve.position(i / 1000).x for i in range(1001)]
        assert box.min.x == pytest.approx(min(xs), abs=1e-2)
        assert box.max.x == pytest.approx(max(xs), abs=1e-2)


class TestOverlap:
    """Broad-Phase Prädikat"""

    def test_overlap_with_itself(self, arch_curve):
        assert Bezier.overlaps(arch_curve, arch_curve)

    def test_separate_curves(self, arch_curve):
        moved = arch_curve.clone()
        moved.translate((200, 0))
        assert not Bezier.overlaps(arch_curve, moved)

    def test_touching_boxes_overlap(self):
        a = Bezier((0, 0), (10, 0))
        b = Bezier((10, 0), (20, 0))
        assert Bezier.overlaps(a, b)


class TestInflections:

    def test_s_curve_inflection_at_half(self, s_curve):
        assert s_curve.inflections() == pytest.approx([0.5])

    def test_arch_has_no_inflection(self, arch_curve):
        assert arch_curve.inflections() == []

    def test_quadratic_has_none(self, quadratic_curve):
        assert quadratic_curve.inflections() == []


class TestDegenerateExtrema:
    """Rundungsrauschen in den Ableitungen erzeugt keine Schein-Extrema"""

    @pytest.mark.parametrize("start, end", [
        ((-406.14, -471.65), (335.77, -67.23)),
        ((262.28, -497.89), (-54.61, 221.54)),
        ((0.1, 0.7), (1e4 / 3, 2e4 / 7)),
        ((17, 17), (17, 250.3)),
    ])
    def test_promoted_lines_have_no_extrema(self, start, end):
        assert Bezier(start, end).extrema().values == []

    def test_line_reduces_to_single_segment(self):
        segments = Bezier((-406.14, -471.65), (335.77, -67.23)).reduce()
        assert len(segments) == 1
        assert (segments[0].t1, segments[0].t2) == (0.0, 1.0)

    def test_quartic_extrema_match_cubic(self, arch_curve, s_curve):
        """raise_order() ändert die Kurve nicht, also auch nicht Extrema und Box"""
        for curve in (arch_curve, s_curve):
            quartic = curve.raise_order()
            assert quartic.extrema().values
            box, quartic_box = curve.bbox(), quartic.bbox()
            assert (quartic_box.min.x, quartic_box.min.y) == pytest.approx((box.min.x, box.min.y), abs=1e-6)
            assert (quartic_box.max.x, quartic_box.max.y) == pytest.approx((box.max.x, box.max.y), abs=1e-6)

    def test_quartic_arch_has_top_extremum(self, arch_curve):
        ext = arch_curve.raise_order().extrema()
        assert any(t == pytest.approx(0.5, abs=1e-9) for t in ext.y)

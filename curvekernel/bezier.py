"""
CurveKernel - Bézier-Kurven (linear, quadratisch, kubisch)
==========================================================

Kurven-Modell mit gecachten Ableitungs-Kontrollpunkten, Auswertung
(Position, Tangente, Normale, Länge), de Casteljau Unterteilung,
Extrema/Bounding-Box sowie die Einstiegspunkte für Reduktion, Offset,
Schnittberechnung und Bogen-Approximation.

Verwendung:
    from curvekernel import Bezier

    curve = Bezier((0, 0), (0, 100), (100, 100), (100, 0))
    p = curve.position(0.5)
    left, right = curve.split(0.5)
    segments = curve.reduce()
"""

import math
from typing import Callable, List, Optional, Sequence, Tuple, Union

from loguru import logger

from .config.tolerances import Tolerances
from .geometry import (
    Point2D, Line2D, Circle2D, Arc2D, Interval, BoundingBox2D, Extrema, SplitResult,
)
from . import utils

# Hull-Indizes der linken/rechten Teilkurve (siehe hull())
_SPLIT_INDICES = {
    2: ([0, 3, 5], [5, 4, 2]),
    3: ([0, 4, 7, 9], [9, 8, 6, 3]),
}

PointLike = Union[Point2D, Tuple[float, float]]
Distance = Union[float, Callable[[float], float]]


class Bezier:
    """
    Bézier-Kurve der Ordnung 1-3 in 2D.

    Unveränderlich per Konvention: alle Operationen liefern neue Kurven.
    Einzige Ausnahme ist translate(), das die Punkte verschiebt und alle
    Caches neu berechnet.

    Attribute:
        points: order+1 Kontrollpunkte
        order: Polynomgrad
        t1, t2: Parameter-Intervall relativ zur Ursprungskurve
        dpoints: Ableitungs-Kontrollpunkte je Ableitungsstufe
        clockwise: Orientierung (Vorzeichen von angle(p0, p_last, p1))
        linear: Alle Punkte liegen auf der Sehne
        interval: Frei setzbares Intervall für Pfad-Verbünde
    """

    def __init__(self, *points: PointLike, t1: float = 0.0, t2: float = 1.0):
        if (len(points) == 1 and isinstance(points[0], (list, tuple)) and points[0]
                and not isinstance(points[0][0], (int, float))):
            points = tuple(points[0])

        if len(points) < 2 or len(points) > 4:
            raise ValueError(f"Bezier benötigt 2 bis 4 Kontrollpunkte, erhalten: {len(points)}")

        pts = [Point2D.of(p) for p in points]
        if len(pts) == 2:
            # Gerade als kubische Kurve: Kontrollpunkte auf 1/3 und 2/3
            p1, p2 = pts
            dx = (p2.x - p1.x) / 3
            dy = (p2.y - p1.y) / 3
            pts = [p1, Point2D(p1.x + dx, p1.y + dy), Point2D(p1.x + 2 * dx, p1.y + 2 * dy), p2]

        self._assign(pts, t1, t2)

    @classmethod
    def _raw(cls, points: Sequence[Point2D], t1: float = 0.0, t2: float = 1.0) -> 'Bezier':
        """Interner Konstruktor ohne Promotion/Validierung (z.B. Ordnung 4 nach raise_order)."""
        curve = cls.__new__(cls)
        curve._assign([Point2D.of(p) for p in points], t1, t2)
        return curve

    def _assign(self, points: List[Point2D], t1: float, t2: float) -> None:
        self.points: List[Point2D] = points
        self.order: int = len(points) - 1
        self.t1 = t1
        self.t2 = t2
        self.interval = Interval()
        self._update()

    @classmethod
    def from_coords(cls, *coords: float) -> 'Bezier':
        """Kurve aus flacher Koordinatenliste x0, y0, x1, y1, ..."""
        if len(coords) % 2 != 0:
            raise ValueError(f"Ungerade Anzahl Koordinaten: {len(coords)}")
        return cls(*[(coords[i], coords[i + 1]) for i in range(0, len(coords), 2)])

    # =========================================================================
    # Gecachte Ableitungen / Orientierung / Linearität
    # =========================================================================

    def _update(self) -> None:
        self._compute_derivative_points()
        self._compute_direction()
        self._check_linear()

    def _compute_derivative_points(self) -> None:
        self.dpoints: List[List[Point2D]] = []
        p = list(self.points)
        c = len(p) - 1
        while c > 0:
            level = [(p[j + 1] - p[j]) * c for j in range(c)]
            self.dpoints.append(level)
            p = level
            c -= 1

    def _compute_direction(self) -> None:
        self.clockwise = utils.angle(self.points[0], self.points[self.order], self.points[1]) > 0

    def _check_linear(self) -> None:
        aligned = utils.align(self.points, Line2D(self.points[0], self.points[self.order]))
        self.linear = all(abs(p.y) <= Tolerances.CURVE_LINEAR for p in aligned)

    # =========================================================================
    # Auswertung
    # =========================================================================

    def position(self, t: float) -> Point2D:
        """Punkt auf der Kurve bei t (0..1)"""
        if utils.approximately(t, 0):
            return self.points[0]
        if utils.approximately(t, 1):
            return self.points[self.order]

        p = self.points
        mt = 1 - t

        if self.order == 1:
            return Point2D(mt * p[0].x + t * p[1].x, mt * p[0].y + t * p[1].y)

        if self.order == 2:
            a = mt * mt
            b = mt * t * 2
            c = t * t
            return Point2D(a * p[0].x + b * p[1].x + c * p[2].x,
                           a * p[0].y + b * p[1].y + c * p[2].y)

        if self.order == 3:
            mt2 = mt * mt
            t2 = t * t
            a = mt2 * mt
            b = mt2 * t * 3
            c = mt * t2 * 3
            d = t * t2
            return Point2D(a * p[0].x + b * p[1].x + c * p[2].x + d * p[3].x,
                           a * p[0].y + b * p[1].y + c * p[2].y + d * p[3].y)

        # Höhere Ordnung: de Casteljau
        return self._de_casteljau(list(p), t)

    @staticmethod
    def _de_casteljau(pts: List[Point2D], t: float) -> Point2D:
        while len(pts) > 1:
            pts = [utils.lerp(t, pts[i], pts[i + 1]) for i in range(len(pts) - 1)]
        return pts[0]

    @classmethod
    def _blend(cls, pts: List[Point2D], t: float) -> Point2D:
        """Bernstein-Mischung einer Ableitungsstufe (ein Grad niedriger)"""
        mt = 1 - t
        if len(pts) == 1:
            return pts[0]
        if len(pts) == 2:
            return Point2D(mt * pts[0].x + t * pts[1].x, mt * pts[0].y + t * pts[1].y)
        if len(pts) == 3:
            a = mt * mt
            b = mt * t * 2
            c = t * t
            return Point2D(a * pts[0].x + b * pts[1].x + c * pts[2].x,
                           a * pts[0].y + b * pts[1].y + c * pts[2].y)
        return cls._de_casteljau(list(pts), t)

    def tangent(self, t: float) -> Point2D:
        """Tangente (erste Ableitung) bei t, nicht normiert"""
        return self._blend(self.dpoints[0], t)

    derivative = tangent

    def normal(self, t: float) -> Point2D:
        """
        Einheitsnormale (-dy, dx) bei t.

        Raises:
            ZeroDivisionError: Tangente hat Länge 0 (Spitze/degenerierter Endpunkt)
        """
        d = self.tangent(t)
        q = math.hypot(d.x, d.y)
        if q == 0:
            raise ZeroDivisionError(f"Normale bei t={t} undefiniert: Tangente hat Länge 0")
        return Point2D(-d.y / q, d.x / q)

    def curvature(self, t: float) -> float:
        """Vorzeichenbehaftete Krümmung bei t (0 für Geraden)"""
        d = self.tangent(t)
        if self.order < 2:
            return 0.0
        dd = self._blend(self.dpoints[1], t)
        denom = math.hypot(d.x, d.y) ** 3
        if denom < Tolerances.EPSILON_MATH:
            return 0.0
        return (d.x * dd.y - d.y * dd.x) / denom

    @property
    def length(self) -> float:
        """Bogenlänge (Gauss-Legendre Quadratur)"""
        return utils.arc_length(self.tangent)

    def raise_order(self) -> 'Bezier':
        """
        Grad-Erhöhung um eins (quadratisch -> kubisch, kubisch -> Ordnung 4).

        new[i] = (k-i)/k * p[i] + i/k * p[i-1] mit k = Anzahl Punkte,
        reelle Division (keine Ganzzahl-Kürzung der Koeffizienten).
        """
        p = self.points
        k = len(p)
        np_ = [p[0]]
        for i in range(1, k):
            pi = p[i]
            pim = p[i - 1]
            np_.append(Point2D((k - i) / k * pi.x + i / k * pim.x,
                               (k - i) / k * pi.y + i / k * pim.y))
        np_.append(p[k - 1])
        return Bezier._raw(np_, self.t1, self.t2)

    # =========================================================================
    # Unterteilung (de Casteljau)
    # =========================================================================

    def hull(self, t: float) -> List[Point2D]:
        """
        Alle Zwischenpunkte aller de Casteljau Iterationen bei t.

        Quadratisch: 6 Punkte ([0,1,2], [3,4], [5]),
        kubisch: 10 Punkte ([0,1,2,3], [4,5,6], [7,8], [9]).
        """
        p = list(self.points)
        q = list(p)
        while len(p) > 1:
            p = [utils.lerp(t, p[i], p[i + 1]) for i in range(len(p) - 1)]
            q.extend(p)
        return q

    def _split_points(self, q: List[Point2D]) -> Tuple[List[Point2D], List[Point2D]]:
        if self.order in _SPLIT_INDICES:
            left_idx, right_idx = _SPLIT_INDICES[self.order]
            return [q[i] for i in left_idx], [q[i] for i in right_idx]

        # Allgemein: erster bzw. letzter Punkt jeder Iteration
        left, right = [], []
        start = 0
        for size in range(self.order + 1, 0, -1):
            left.append(q[start])
            right.append(q[start + size - 1])
            start += size
        return left, list(reversed(right))

    def split(self, t: float) -> SplitResult:
        """Teilt die Kurve bei t in zwei Kurven, die zusammen das Original ergeben."""
        q = self.hull(t)
        left_pts, right_pts = self._split_points(q)
        left = Bezier._raw(left_pts,
                           utils.map_range(0, 0, 1, self.t1, self.t2),
                           utils.map_range(t, 0, 1, self.t1, self.t2))
        right = Bezier._raw(right_pts,
                            utils.map_range(t, 0, 1, self.t1, self.t2),
                            utils.map_range(1, 0, 1, self.t1, self.t2))
        return SplitResult(left, right, q)

    def split_range(self, t1: float, t2: float) -> 'Bezier':
        """Teilkurve über [t1, t2]: Split bei t1, rechte Hälfte bei skaliertem t2 teilen."""
        if t1 == 0 and t2 != 0:
            return self.split(t2).left
        if t2 == 1:
            return self.split(t1).right

        result = self.split(t1)
        t2 = utils.map_range(t2, t1, 1, 0, 1)
        return result.right.split(t2).left

    def break_at(self, t: float) -> Tuple['Bezier', 'Bezier']:
        """Links/Rechts-Paar (Pfad-Schnittstelle)"""
        result = self.split(t)
        return result.left, result.right

    def clone(self) -> 'Bezier':
        copy = Bezier._raw([Point2D(p.x, p.y) for p in self.points], self.t1, self.t2)
        copy.interval = Interval(self.interval.start, self.interval.end)
        return copy

    # =========================================================================
    # Extrema / Bounding-Box
    # =========================================================================

    def extrema(self) -> Extrema:
        """
        t-Werte der Extrema je Achse (Nullstellen der ersten, bei kubischen
        Kurven zusätzlich der zweiten Ableitung) sowie deren Vereinigung.
        """
        # Rauschschwelle an der Koordinatengröße, nicht an der Ableitung
        scale = max(max(abs(p.x), abs(p.y)) for p in self.points) * self.order
        first = self.dpoints[0]
        result_x = utils.droots([p.x for p in first], scale)
        result_y = utils.droots([p.y for p in first], scale)

        if self.order == 3:
            second = self.dpoints[1]
            result_x += utils.droots([p.x for p in second], scale)
            result_y += utils.droots([p.y for p in second], scale)

        rx = sorted(t for t in result_x if utils.between(t, 0, 1))
        ry = sorted(t for t in result_y if utils.between(t, 0, 1))
        return Extrema(x=rx, y=ry, values=sorted(set(rx) | set(ry)))

    def bbox(self) -> BoundingBox2D:
        """Achsparallele Bounding-Box aus Endpunkten und Extrema"""
        extrema = self.extrema()
        xs = [self.position(t).x for t in [0, 1] + extrema.x]
        ys = [self.position(t).y for t in [0, 1] + extrema.y]
        return BoundingBox2D(Point2D(min(xs), min(ys)), Point2D(max(xs), max(ys)))

    @staticmethod
    def overlaps(curve1: 'Bezier', curve2: 'Bezier') -> bool:
        """Bounding-Boxen überlappen (Broad-Phase, kein Schnittbeweis)"""
        return utils.bbox_overlap(curve1.bbox(), curve2.bbox())

    def inflections(self) -> List[float]:
        """t-Werte der Wendepunkte (nur kubisch)"""
        return utils.inflections(self.points)

    # =========================================================================
    # Einfachheit / Reduktion
    # =========================================================================

    def is_simple(self) -> bool:
        """
        Einfach = Kontrollpunkte kubischer Kurven auf derselben Seite der
        Sehne und Winkel zwischen den End-Normalen < 60°.
        """
        if self.order == 3:
            a1 = utils.angle(self.points[0], self.points[3], self.points[1])
            a2 = utils.angle(self.points[0], self.points[3], self.points[2])
            # Rundungsrauschen kollinearer Kontrollpunkte zählt als 0
            if abs(a1) < Tolerances.EPSILON_MATH:
                a1 = 0.0
            if abs(a2) < Tolerances.EPSILON_MATH:
                a2 = 0.0
            if (a1 > 0 and a2 < 0) or (a1 < 0 and a2 > 0):
                return False

        try:
            n1 = self.normal(0)
            n2 = self.normal(1)
        except ZeroDivisionError:
            logger.debug(f"[REDUCE] End-Normale undefiniert, nicht einfach: {self!r}")
            return False

        s = max(-1.0, min(1.0, n1.x * n2.x + n1.y * n2.y))
        return abs(math.acos(s)) < Tolerances.SIMPLE_MAX_NORMAL_ANGLE

    def reduce(self, step: Optional[float] = None) -> List['Bezier']:
        """Zerlegung in maximale einfache Teilkurven (siehe reduction.reduce_curve)"""
        from .reduction import reduce_curve
        return reduce_curve(self, step).segments

    # =========================================================================
    # Offset / Skalierung / Kontur
    # =========================================================================

    def offset_point(self, t: float, d: float) -> Point2D:
        """Kurvenpunkt bei t, um d entlang der Normalen verschoben"""
        c = self.position(t)
        n = self.normal(t)
        return Point2D(c.x + n.x * d, c.y + n.y * d)

    def offset(self, d: float) -> List['Bezier']:
        """Offset-Kurve im Abstand d als Folge von Kurven"""
        from .offsetting import offset_curve
        return offset_curve(self, d)

    def scale(self, d: Distance) -> Optional['Bezier']:
        """Skaliert eine einfache Kurve (None wenn nicht skalierbar)"""
        from .offsetting import scale_curve
        return scale_curve(self, d)

    def outline(self, d1: float, d2: Optional[float] = None,
                d3: Optional[float] = None, d4: Optional[float] = None):
        """Geschlossene Kontur (PolyBezier) im Abstand d1/d2, optional variabel bis d3/d4"""
        from .offsetting import outline_curve
        return outline_curve(self, d1, d2, d3, d4)

    # =========================================================================
    # Schnittberechnung
    # =========================================================================

    def intersects_line(self, line: Line2D) -> List[float]:
        """t-Werte der Schnitte mit dem Liniensegment"""
        from .intersection import curve_line_intersections
        return curve_line_intersections(self, line)

    def intersects_curve(self, other: 'Bezier',
                         threshold: Optional[float] = None) -> List[Tuple[float, float]]:
        """(t auf self, t auf other) Paare der Kurve/Kurve Schnitte"""
        from .intersection import curve_curve_intersections
        return curve_curve_intersections(self.reduce(), other.reduce(), threshold)

    def intersects_self(self, threshold: Optional[float] = None) -> List[Tuple[float, float]]:
        """Selbstschnitte als (t1, t2) Paare"""
        from .intersection import self_intersections
        return self_intersections(self, threshold)

    def intersects_circle(self, circle: Circle2D) -> List[float]:
        from .intersection import curve_circle_intersections
        return curve_circle_intersections(self, circle)

    def intersects_arc(self, arc: Arc2D) -> List[float]:
        from .intersection import curve_arc_intersections
        return curve_arc_intersections(self, arc)

    def intersects(self, other, threshold: Optional[float] = None):
        """
        Schnitt mit beliebigem Pfad-Primitiv.

        Returns:
            Line2D/Circle2D/Arc2D: Liste von t-Werten auf dieser Kurve
            Bezier: Liste von (t_self, t_other) Paaren
        """
        if isinstance(other, Bezier):
            return self.intersects_curve(other, threshold)
        if isinstance(other, Line2D):
            return self.intersects_line(other)
        if isinstance(other, Arc2D):
            return self.intersects_arc(other)
        if isinstance(other, Circle2D):
            return self.intersects_circle(other)
        raise TypeError(f"Schnitt mit {type(other).__name__} nicht unterstützt")

    # =========================================================================
    # Bogen-Approximation
    # =========================================================================

    def to_arcs(self, error_threshold: float) -> List[Union[Arc2D, Line2D]]:
        """Approximation durch Kreisbögen (Winkel in Grad), Fehler <= error_threshold"""
        from .arcs import approximate_arcs
        return approximate_arcs(self, error_threshold)

    def to_arc_shapes(self) -> List[Union[Arc2D, Line2D]]:
        """Bögen zwischen den Extrema, Genauigkeit relativ zur Kurvenlänge"""
        from .arcs import approximate_arcs_between_extrema
        return approximate_arcs_between_extrema(self)

    # =========================================================================
    # Transformation / Serialisierung
    # =========================================================================

    def translate(self, offset: PointLike) -> None:
        """
        Verschiebt die Kurve IN-PLACE und berechnet alle Caches neu
        (Ableitungen, Orientierung, Linearität).

        Nicht thread-safe für dieselbe Instanz.
        """
        offset = Point2D.of(offset)
        for i, p in enumerate(self.points):
            self.points[i] = Point2D(p.x + offset.x, p.y + offset.y)
        self._update()

    def align(self, start: PointLike, end: PointLike) -> 'Bezier':
        """Kurve so verschoben/gedreht, dass die Linie start-end auf der X-Achse liegt"""
        aligned = utils.align(self.points, Line2D(Point2D.of(start), Point2D.of(end)))
        return Bezier._raw(aligned, self.t1, self.t2)

    def to_svg(self) -> str:
        """SVG-Pfad: "M x0 y0 Q|C x1 y1 x2 y2 [x3 y3]" """
        p = self.points
        parts = ["M", _fmt(p[0].x), _fmt(p[0].y), "Q" if self.order == 2 else "C"]
        for pt in p[1:]:
            parts.append(_fmt(pt.x))
            parts.append(_fmt(pt.y))
        return " ".join(parts)

    def to_dict(self) -> dict:
        """Serialisiert zu Dictionary für JSON."""
        return {
            "type": "Bezier",
            "points": [[p.x, p.y] for p in self.points],
            "t1": self.t1,
            "t2": self.t2,
            "interval": [self.interval.start, self.interval.end],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Bezier':
        """
        Gegenstück zu to_dict(): Punkte unverändert übernommen, auch
        Ordnung 4 aus raise_order().
        """
        points = [Point2D(x, y) for x, y in data.get("points", [])]
        if not 2 <= len(points) <= 5:
            raise ValueError(f"Bezier benötigt 2 bis 5 Kontrollpunkte, erhalten: {len(points)}")
        curve = cls._raw(points, data.get("t1", 0.0), data.get("t2", 1.0))
        start, end = data.get("interval", [None, None])
        curve.interval = Interval(start, end)
        return curve

    def __str__(self):
        return self.to_svg()

    def __repr__(self):
        pts = ", ".join(repr(p) for p in self.points)
        return f"Bezier[{self.order}]({pts}, t=[{self.t1:.3f}, {self.t2:.3f}])"


def _fmt(value: float) -> str:
    """Zahl ohne überflüssige Nachkommastellen"""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text

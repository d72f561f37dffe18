"""
CurveKernel - Geometrie-Primitives
Punkte, Linien, Kreise, Bögen und die Wertetypen der Kurven-Algorithmen
"""

from dataclasses import dataclass, field
from typing import Optional, List, Tuple, Protocol, runtime_checkable
import math


@dataclass
class Point2D:
    """2D-Punkt bzw. 2D-Vektor - Grundbaustein aller Geometrie"""
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self):
        """
        FIREWALL: Wandelt alles sofort in native Python-Floats um.
        Schützt vor NumPy-Skalaren aus Wurzel-Lösern und Quadratur.
        """
        def _coerce_scalar(value, fallback=0.0):
            try:
                item_attr = getattr(value, "item", None)
                if callable(item_attr):
                    value = item_attr()
                return float(value)
            except (TypeError, ValueError):
                return fallback

        self.x = _coerce_scalar(self.x, 0.0)
        self.y = _coerce_scalar(self.y, 0.0)

    @classmethod
    def of(cls, value) -> 'Point2D':
        """Akzeptiert Point2D, (x, y)-Tupel oder Objekte mit x/y-Attributen."""
        if isinstance(value, Point2D):
            return value
        if hasattr(value, "x") and hasattr(value, "y"):
            return cls(value.x, value.y)
        x, y = value
        return cls(x, y)

    def __add__(self, other: 'Point2D') -> 'Point2D':
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point2D') -> 'Point2D':
        return Point2D(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> 'Point2D':
        return Point2D(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> 'Point2D':
        return Point2D(self.x / divisor, self.y / divisor)

    def __neg__(self) -> 'Point2D':
        return Point2D(-self.x, -self.y)

    def dot(self, other: 'Point2D') -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: 'Point2D') -> float:
        return self.x * other.y - self.y * other.x

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: 'Point2D') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def midpoint(self, other: 'Point2D') -> 'Point2D':
        return Point2D((self.x + other.x) / 2, (self.y + other.y) / 2)

    def is_close(self, other: 'Point2D', tolerance: float = 1e-6) -> bool:
        return self.distance_to(other) <= tolerance

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self):
        return f"P({self.x:.2f}, {self.y:.2f})"


@dataclass
class Interval:
    """Parameter-Intervall [start, end] auf der Ursprungskurve (veränderbar)"""
    start: Optional[float] = None
    end: Optional[float] = None

    @property
    def span(self) -> float:
        if self.start is None or self.end is None:
            return 0.0
        return self.end - self.start


@dataclass
class BoundingBox2D:
    """Achsparallele Bounding-Box (min/max Ecke)"""
    min: Point2D
    max: Point2D

    @classmethod
    def from_points(cls, points: List[Point2D]) -> 'BoundingBox2D':
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(Point2D(min(xs), min(ys)), Point2D(max(xs), max(ys)))

    @property
    def width(self) -> float:
        return self.max.x - self.min.x

    @property
    def height(self) -> float:
        return self.max.y - self.min.y

    def intersects(self, other: 'BoundingBox2D') -> bool:
        """Überlappung inklusive Berührung (Broad-Phase, kein Schnittbeweis)"""
        if self.max.x < other.min.x or other.max.x < self.min.x:
            return False
        if self.max.y < other.min.y or other.max.y < self.min.y:
            return False
        return True

    def contains_point(self, p: Point2D, tolerance: float = 1e-6) -> bool:
        return (self.min.x - tolerance <= p.x <= self.max.x + tolerance and
                self.min.y - tolerance <= p.y <= self.max.y + tolerance)

    def union(self, other: 'BoundingBox2D') -> 'BoundingBox2D':
        return BoundingBox2D(
            Point2D(min(self.min.x, other.min.x), min(self.min.y, other.min.y)),
            Point2D(max(self.max.x, other.max.x), max(self.max.y, other.max.y)),
        )

    def __repr__(self):
        return f"BBox({self.min} -> {self.max})"


@dataclass
class Extrema:
    """t-Werte der lokalen Extrema pro Achse plus sortierte Vereinigung"""
    x: List[float] = field(default_factory=list)
    y: List[float] = field(default_factory=list)
    values: List[float] = field(default_factory=list)


@dataclass
class SplitResult:
    """Ergebnis eines Splits: linke/rechte Teilkurve plus verwendete Hull"""
    left: 'object'
    right: 'object'
    span: List[Point2D] = field(default_factory=list)

    def __iter__(self):
        return iter((self.left, self.right))


@runtime_checkable
class PathShape(Protocol):
    """
    Minimale Schnittstelle aller Pfad-Primitive (Bezier, Linie, Bogen, Verbund).
    """
    interval: Interval

    def position(self, t: float) -> Point2D: ...

    @property
    def length(self) -> float: ...

    def break_at(self, t: float) -> Tuple['PathShape', 'PathShape']: ...

    def clone(self) -> 'PathShape': ...


@dataclass
class Line2D:
    """2D-Linie zwischen zwei Punkten"""
    start: Point2D
    end: Point2D
    interval: Interval = field(default_factory=Interval)

    @property
    def length(self) -> float:
        """Länge der Linie"""
        return self.start.distance_to(self.end)

    def point_at_parameter(self, t: float) -> Point2D:
        """Punkt auf der Linie bei Parameter t (0=start, 1=end)"""
        x = self.start.x + t * (self.end.x - self.start.x)
        y = self.start.y + t * (self.end.y - self.start.y)
        return Point2D(x, y)

    position = point_at_parameter

    def distance_to_point(self, p: Point2D) -> float:
        """Kürzester Abstand zu einem Punkt"""
        dx = self.end.x - self.start.x
        dy = self.end.y - self.start.y
        length_sq = dx*dx + dy*dy

        if length_sq < 1e-10:
            return self.start.distance_to(p)

        t = max(0, min(1, ((p.x - self.start.x)*dx + (p.y - self.start.y)*dy) / length_sq))
        proj = self.point_at_parameter(t)
        return proj.distance_to(p)

    def bbox(self) -> BoundingBox2D:
        return BoundingBox2D.from_points([self.start, self.end])

    def break_at(self, t: float) -> Tuple['Line2D', 'Line2D']:
        """Teilt die Linie bei t in zwei Linien"""
        mid = self.point_at_parameter(t)
        return Line2D(self.start, mid), Line2D(mid, self.end)

    def clone(self) -> 'Line2D':
        return Line2D(Point2D(self.start.x, self.start.y), Point2D(self.end.x, self.end.y),
                      Interval(self.interval.start, self.interval.end))

    def to_dict(self) -> dict:
        """Serialisiert zu Dictionary für JSON."""
        return {
            "type": "Line2D",
            "start_x": self.start.x,
            "start_y": self.start.y,
            "end_x": self.end.x,
            "end_y": self.end.y,
            "interval": [self.interval.start, self.interval.end],
        }

    def __repr__(self):
        return f"Line({self.start} -> {self.end})"


@dataclass
class Circle2D:
    """2D-Kreis"""
    center: Point2D
    radius: float = 10.0

    def __repr__(self):
        return f"Circle(center={self.center}, r={self.radius:.2f})"


@dataclass
class Arc2D:
    """2D-Kreisbogen, gegen den Uhrzeigersinn von start_angle nach end_angle

    Winkel in Grad (öffentliche Schnittstelle). Das Intervall verweist auf
    den Parameterbereich der Kurve, aus der der Bogen approximiert wurde.
    """
    center: Point2D
    radius: float = 10.0
    start_angle: float = 0.0    # Startwinkel in Grad
    end_angle: float = 90.0     # Endwinkel in Grad
    interval: Interval = field(default_factory=Interval)

    @property
    def start_point(self) -> Point2D:
        """Startpunkt des Bogens"""
        return self.point_at_parameter(0.0)

    @property
    def end_point(self) -> Point2D:
        """Endpunkt des Bogens"""
        return self.point_at_parameter(1.0)

    @property
    def sweep_angle(self) -> float:
        """Öffnungswinkel in Grad"""
        sweep = self.end_angle - self.start_angle
        while sweep < 0:
            sweep += 360
        return sweep

    @property
    def arc_length(self) -> float:
        """Bogenlänge"""
        return self.radius * math.radians(self.sweep_angle)

    @property
    def length(self) -> float:
        return self.arc_length

    def point_at_parameter(self, t: float) -> Point2D:
        """Punkt auf dem Bogen bei Parameter t (0=start, 1=end)"""
        angle = self.start_angle + t * self.sweep_angle
        rad = math.radians(angle)
        return Point2D(
            self.center.x + self.radius * math.cos(rad),
            self.center.y + self.radius * math.sin(rad)
        )

    position = point_at_parameter

    def break_at(self, t: float) -> Tuple['Arc2D', 'Arc2D']:
        """Teilt den Bogen bei t in zwei Bögen"""
        mid_angle = self.start_angle + t * self.sweep_angle
        return (Arc2D(self.center, self.radius, self.start_angle, mid_angle),
                Arc2D(self.center, self.radius, mid_angle, self.start_angle + self.sweep_angle))

    def clone(self) -> 'Arc2D':
        return Arc2D(Point2D(self.center.x, self.center.y), self.radius,
                     self.start_angle, self.end_angle,
                     Interval(self.interval.start, self.interval.end))

    def to_dict(self) -> dict:
        """Serialisiert zu Dictionary für JSON."""
        return {
            "type": "Arc2D",
            "center_x": self.center.x,
            "center_y": self.center.y,
            "radius": self.radius,
            "start_angle": self.start_angle,
            "end_angle": self.end_angle,
            "interval": [self.interval.start, self.interval.end],
        }

    def __repr__(self):
        return f"Arc(center={self.center}, r={self.radius:.2f}, {self.start_angle:.1f}°-{self.end_angle:.1f}°)"


# === Utility-Funktionen ===

def line_line_intersection(l1: Line2D, l2: Line2D) -> Optional[Point2D]:
    """Schnittpunkt zweier unendlicher Linien (oder None bei Parallelität)"""
    x1, y1 = l1.start.x, l1.start.y
    x2, y2 = l1.end.x, l1.end.y
    x3, y3 = l2.start.x, l2.start.y
    x4, y4 = l2.end.x, l2.end.y

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < 1e-10:
        return None  # Parallel

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom

    x = x1 + t * (x2 - x1)
    y = y1 + t * (y2 - y1)

    return Point2D(x, y)


def is_point_on_arc(point: Point2D, arc: Arc2D, tolerance: float = 1e-4) -> bool:
    """Prüft, ob ein Punkt winkeltechnisch auf dem Bogen liegt."""
    # 1. Radius-Check (Grobfilter)
    if abs(point.distance_to(arc.center) - arc.radius) > tolerance:
        return False

    # 2. Winkel berechnen (in Grad, da Arc2D Winkel in Grad speichert)
    angle = math.degrees(math.atan2(point.y - arc.center.y, point.x - arc.center.x))
    if angle < 0:
        angle += 360.0

    start = arc.start_angle % 360.0
    end = (arc.start_angle + arc.sweep_angle) % 360.0

    # Winkel-Toleranz in Grad
    angle_tol = math.degrees(tolerance)

    # 3. Bereichsprüfung (Handling für 0°-Übergang)
    if start <= end:
        return start - angle_tol <= angle <= end + angle_tol
    # Bogen geht über 0° hinweg (z.B. 350° bis 10°)
    return angle >= start - angle_tol or angle <= end + angle_tol

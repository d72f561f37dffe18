"""
CurveKernel - Mathematische Hilfsfunktionen
===========================================

Reine Funktionen ohne Zustand: Vergleiche mit Toleranz, Parameter-Mapping,
Ausrichtung von Punktlisten, geschlossene Wurzel-Löser (linear, quadratisch,
Cardano), Linienschnitt, Umkreis durch drei Punkte und Bogenlänge per
Gauss-Legendre Quadratur.
"""

import math
from functools import lru_cache
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from numpy.polynomial import polynomial as P

from .config.tolerances import Tolerances
from .geometry import Point2D, Line2D, BoundingBox2D, line_line_intersection

TAU = 2 * math.pi
QUART = math.pi / 2


def approximately(a: float, b: float, precision: Optional[float] = None) -> bool:
    """|a - b| <= precision (Standard: Tolerances.EPSILON)"""
    return abs(a - b) <= (Tolerances.EPSILON if precision is None else precision)


def between(v: float, lo: float, hi: float) -> bool:
    """lo <= v <= hi, Grenzen mit Toleranz"""
    return (lo <= v <= hi) or approximately(v, lo) or approximately(v, hi)


def map_range(v: float, ds: float, de: float, ts: float, te: float) -> float:
    """Bildet v linear von [ds, de] auf [ts, te] ab."""
    d1 = de - ds
    d2 = te - ts
    v2 = v - ds
    r = v2 / d1
    return ts + d2 * r


def lerp(r: float, v1: Point2D, v2: Point2D) -> Point2D:
    return Point2D(v1.x + r * (v2.x - v1.x), v1.y + r * (v2.y - v1.y))


def angle(o: Point2D, v1: Point2D, v2: Point2D) -> float:
    """Vorzeichenbehafteter Winkel (rad) von o->v1 nach o->v2"""
    dx1 = v1.x - o.x
    dy1 = v1.y - o.y
    dx2 = v2.x - o.x
    dy2 = v2.y - o.y
    cross = dx1 * dy2 - dy1 * dx2
    dot = dx1 * dx2 + dy1 * dy2
    return math.atan2(cross, dot)


def align(points: Sequence[Point2D], line: Line2D) -> List[Point2D]:
    """
    Verschiebt und dreht die Punkte so, dass line.start im Ursprung liegt
    und die Linie auf der positiven X-Achse.
    """
    tx, ty = line.start.x, line.start.y
    a = -math.atan2(line.end.y - ty, line.end.x - tx)
    cos_a = math.cos(a)
    sin_a = math.sin(a)
    return [
        Point2D((p.x - tx) * cos_a - (p.y - ty) * sin_a,
                (p.x - tx) * sin_a + (p.y - ty) * cos_a)
        for p in points
    ]


def crt(v: float) -> float:
    """Reelle Kubikwurzel (auch für negative Werte)"""
    if v < 0:
        return -math.pow(-v, 1.0 / 3.0)
    return math.pow(v, 1.0 / 3.0)


def _negligible(value: float, scale: float) -> bool:
    """value liegt im Rundungsrauschen von Größen der Ordnung scale"""
    return abs(value) <= Tolerances.EPSILON_MATH * max(1.0, scale)


def power_coefficients(values: Sequence[float]) -> np.ndarray:
    """Bernstein-Koeffizienten -> Monom-Koeffizienten (aufsteigend)"""
    n = len(values) - 1
    coeffs = np.zeros(n + 1)
    for k in range(n + 1):
        s = sum((-1) ** (k - i) * math.comb(k, i) * values[i] for i in range(k + 1))
        coeffs[k] = math.comb(n, k) * s
    return coeffs


def unique_sorted(values: Sequence[float]) -> List[float]:
    """Sortiert, Werte innerhalb EPSILON zusammengefasst"""
    result: List[float] = []
    for v in sorted(values):
        if not result or not approximately(result[-1], v):
            result.append(v)
    return result


def unit_roots(coeffs: np.ndarray, scale: Optional[float] = None) -> List[float]:
    """
    Reelle Nullstellen eines Monom-Polynoms in [0, 1] (numpy).

    Führende Koeffizienten im Rauschen von scale (Standard: größter
    Koeffizient) werden abgeschnitten.
    """
    if scale is None:
        scale = max((abs(c) for c in coeffs), default=0.0)
    coeffs = P.polytrim(coeffs, Tolerances.EPSILON_MATH * max(1.0, scale))
    if len(coeffs) < 2:
        return []
    result = []
    for r in P.polyroots(coeffs):
        if abs(r.imag) > Tolerances.EPSILON:
            continue
        result.append(float(r.real))
    return unique_sorted(_unit_interval(result))


def droots(p: Sequence[float], scale: Optional[float] = None) -> List[float]:
    """
    Nullstellen einer Ableitungs-Kontrollpunktfolge (Bernstein-Form).

    Zwei Werte: lineare Lösung, drei Werte: quadratische Lösung, mehr
    Werte (Ableitung einer Kurve nach raise_order): numpy.
    Komplexe Lösungen werden verworfen.

    scale ist die Größenordnung, gegen die Differenzen als Rauschen gelten
    (Standard: größter Wert in p). Für Ableitungsstufen die Koordinaten-
    Größe der Kurve übergeben, sonst erzeugen Rundungsfehler bei Geraden
    Schein-Nullstellen.
    """
    if scale is None:
        scale = max((abs(v) for v in p), default=0.0)

    if len(p) == 3:
        a, b, c = p
        d = a - 2 * b + c
        if not _negligible(d, scale):
            disc = b * b - a * c
            if disc < 0:
                return []
            m1 = -math.sqrt(disc)
            m2 = -a + b
            v1 = -(m1 + m2) / d
            v2 = -(-m1 + m2) / d
            return [v1, v2]
        if not _negligible(b - c, scale):
            return [(2 * b - c) / (2 * (b - c))]
        return []

    if len(p) == 2:
        a, b = p
        if not _negligible(a - b, scale):
            return [a / (a - b)]
        return []

    if len(p) > 3:
        return unit_roots(power_coefficients(p), scale)

    return []


def _unit_interval(values) -> List[float]:
    """Werte in [0, 1] mit Toleranz, auf [0, 1] geklemmt"""
    return [min(1.0, max(0.0, t)) for t in values if between(t, 0, 1)]


def roots(points: Sequence[Point2D], line: Optional[Line2D] = None) -> List[float]:
    """
    t-Werte, an denen die Kurve die (unendliche) Linie schneidet.

    Die Kurve wird an der Linie ausgerichtet, danach sind es die Nullstellen
    der y-Komponente: linear/quadratisch geschlossen, kubisch nach Cardano.
    """
    if line is None:
        line = Line2D(Point2D(0, 0), Point2D(1, 0))
    order = len(points) - 1
    aligned = align(points, line)

    if order == 1:
        a, b = aligned[0].y, aligned[1].y
        if a == b:
            return []
        return _unit_interval([a / (a - b)])

    if order == 2:
        a = aligned[0].y
        b = aligned[1].y
        c = aligned[2].y
        d = a - 2 * b + c
        if d != 0:
            disc = b * b - a * c
            if disc < 0:
                return []
            m1 = -math.sqrt(disc)
            m2 = -a + b
            v1 = -(m1 + m2) / d
            v2 = -(-m1 + m2) / d
            return _unit_interval((v1, v2))
        if b != c:
            return _unit_interval([(2 * b - c) / (2 * b - 2 * c)])
        return []

    pa = aligned[0].y
    pb = aligned[1].y
    pc = aligned[2].y
    pd = aligned[3].y

    d = -pa + 3 * pb - 3 * pc + pd
    a = 3 * pa - 6 * pb + 3 * pc
    b = -3 * pa + 3 * pb
    c = pa

    if approximately(d, 0):
        # keine kubische Kurve
        if approximately(a, 0):
            # auch keine quadratische
            if approximately(b, 0):
                return []
            return _unit_interval([-c / b])
        disc = b * b - 4 * a * c
        if disc < 0:
            return []
        q = math.sqrt(disc)
        a2 = 2 * a
        return _unit_interval(((q - b) / a2, (-b - q) / a2))

    a /= d
    b /= d
    c /= d

    p = (3 * b - a * a) / 3
    p3 = p / 3
    q = (2 * a * a * a - 9 * a * b + 27 * c) / 27
    q2 = q / 2
    discriminant = q2 * q2 + p3 * p3 * p3

    if discriminant < 0:
        mp3 = -p / 3
        mp33 = mp3 * mp3 * mp3
        r = math.sqrt(mp33)
        t = -q / (2 * r)
        cosphi = -1 if t < -1 else (1 if t > 1 else t)
        phi = math.acos(cosphi)
        crtr = crt(r)
        t1 = 2 * crtr
        x1 = t1 * math.cos(phi / 3) - a / 3
        x2 = t1 * math.cos((phi + TAU) / 3) - a / 3
        x3 = t1 * math.cos((phi + 2 * TAU) / 3) - a / 3
        return _unit_interval((x1, x2, x3))

    if discriminant == 0:
        u1 = crt(-q2) if q2 < 0 else -crt(q2)
        x1 = 2 * u1 - a / 3
        x2 = -u1 - a / 3
        return _unit_interval((x1, x2))

    sd = math.sqrt(discriminant)
    u1 = crt(-q2 + sd)
    v1 = crt(q2 + sd)
    return _unit_interval([u1 - v1 - a / 3])


def lli4(p1: Point2D, p2: Point2D, p3: Point2D, p4: Point2D) -> Optional[Point2D]:
    """Schnitt der unendlichen Linien p1-p2 und p3-p4 (None bei Parallelität)"""
    return line_line_intersection(Line2D(p1, p2), Line2D(p3, p4))


def circle_from_points(p1: Point2D, p2: Point2D, p3: Point2D) -> Optional[Tuple[Point2D, float, float, float]]:
    """
    Umkreis durch drei Punkte.

    Returns:
        (center, radius, start, end) mit Winkeln in Radiant, start < end und
        gegen den Uhrzeigersinn über p2. Start kann bei p3 liegen, wenn die
        Punkte im Uhrzeigersinn laufen. None bei kollinearen Punkten.
    """
    dx1 = p2.x - p1.x
    dy1 = p2.y - p1.y
    dx2 = p3.x - p2.x
    dy2 = p3.y - p2.y

    # Sehnen um 90° gedreht
    dx1p = dx1 * math.cos(QUART) - dy1 * math.sin(QUART)
    dy1p = dx1 * math.sin(QUART) + dy1 * math.cos(QUART)
    dx2p = dx2 * math.cos(QUART) - dy2 * math.sin(QUART)
    dy2p = dx2 * math.sin(QUART) + dy2 * math.cos(QUART)

    # Sehnen-Mittelpunkte
    m1 = p1.midpoint(p2)
    m2 = p2.midpoint(p3)

    center = lli4(m1, Point2D(m1.x + dx1p, m1.y + dy1p), m2, Point2D(m2.x + dx2p, m2.y + dy2p))
    if center is None:
        return None
    radius = center.distance_to(p1)

    s = math.atan2(p1.y - center.y, p1.x - center.x)
    m = math.atan2(p2.y - center.y, p2.x - center.x)
    e = math.atan2(p3.y - center.y, p3.x - center.x)

    if s < e:
        if s > m or m > e:
            s += TAU
        if s > e:
            s, e = e, s
    else:
        if e < m < s:
            s, e = e, s
        else:
            e += TAU

    return center, radius, s, e


@lru_cache(maxsize=8)
def _gauss_legendre(order: int) -> Tuple[np.ndarray, np.ndarray]:
    return np.polynomial.legendre.leggauss(order)


def arc_length(derivative: Callable[[float], Point2D],
               order: Optional[int] = None) -> float:
    """
    Bogenlänge über [0, 1] per Gauss-Legendre Quadratur von |B'(t)|.
    """
    nodes, weights = _gauss_legendre(order or Tolerances.LENGTH_QUADRATURE_ORDER)
    z = 0.5
    total = 0.0
    for node, weight in zip(nodes, weights):
        d = derivative(z * node + z)
        total += weight * math.hypot(d.x, d.y)
    return z * float(total)


def inflections(points: Sequence[Point2D]) -> List[float]:
    """t-Werte der Wendepunkte einer kubischen Kurve (leer für niedrigere Ordnung)"""
    if len(points) < 4:
        return []

    p = align(points, Line2D(points[0], points[-1]))
    a = p[2].x * p[1].y
    b = p[3].x * p[1].y
    c = p[1].x * p[2].y
    d = p[3].x * p[2].y
    v1 = 18 * (-3 * a + 2 * b + 3 * c - d)
    v2 = 18 * (3 * a - b - 3 * c)
    v3 = 18 * (c - a)

    if approximately(v1, 0):
        if not approximately(v2, 0):
            t = -v3 / v2
            if 0 <= t <= 1:
                return [t]
        return []

    trm = v2 * v2 - 4 * v1 * v3
    if trm < 0:
        return []
    sq = math.sqrt(trm)
    d2 = 2 * v1

    if approximately(d2, 0):
        return []

    return [r for r in ((sq - v2) / d2, -(v2 + sq) / d2) if 0 <= r <= 1]


def bbox_overlap(b1: BoundingBox2D, b2: BoundingBox2D) -> bool:
    """Bounding-Box Prädikat (reine Funktion zweier Boxen)"""
    return b1.intersects(b2)


def make_line(p1: Point2D, p2: Point2D):
    """Gerade als kubische Kurve (Kontrollpunkte auf 1/3 und 2/3)"""
    from .bezier import Bezier
    return Bezier(p1, p2)

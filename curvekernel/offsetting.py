"""
CurveKernel - Skalierung, Offset und Kontur
===========================================

Skalierung einer einfachen Kurve über einen Pivot (Schnitt der
End-Normalen), Offset-Kurven aus reduzierten Segmenten und geschlossene
Konturen ("Outline") aus Vorwärts-/Rückwärts-Offsets mit Endkappen.
"""

from typing import Callable, List, Optional, Union, TYPE_CHECKING

from loguru import logger

from .config.feature_flags import is_enabled
from .config.tolerances import Tolerances
from .geometry import Point2D
from .poly_bezier import PolyBezier
from .utils import lli4, make_line, map_range

if TYPE_CHECKING:
    from .bezier import Bezier

Distance = Union[float, Callable[[float], float]]


def _translate_linear(curve: 'Bezier', distance_fn: Callable[[float], float]) -> Optional['Bezier']:
    """Lineare Kurve exakt entlang ihrer (konstanten) Normalen verschieben."""
    from .bezier import Bezier

    try:
        n = curve.normal(0)
    except ZeroDivisionError:
        logger.warning(f"[SCALE] Degenerierte Kurve ohne Richtung: {curve!r}")
        return None
    order = curve.order
    points = [
        Point2D(p.x + n.x * distance_fn(i / order), p.y + n.y * distance_fn(i / order))
        for i, p in enumerate(curve.points)
    ]
    return Bezier._raw(points, curve.t1, curve.t2)


def scale_curve(curve: 'Bezier', d: Distance) -> Optional['Bezier']:
    """
    Skaliert eine (einfache) Kurve um den Abstand d.

    d ist entweder ein konstanter Abstand oder eine Funktion t -> Abstand.
    Quadratische Kurven werden vorher auf kubisch angehoben.

    Returns:
        Neue Kurve oder None, wenn die End-Normalen parallel sind (kein Pivot)
        bzw. eine Normale undefiniert ist.
    """
    from .bezier import Bezier

    distance_fn = d if callable(d) else None

    if curve.order < 3:
        return scale_curve(curve.raise_order(), d)
    if curve.order > 3:
        logger.warning(f"[SCALE] Ordnung {curve.order} wird nicht unterstützt")
        return None

    order = curve.order
    r1 = distance_fn(0) if distance_fn else d
    r2 = distance_fn(1) if distance_fn else d

    try:
        n0 = curve.normal(0)
        n1 = curve.normal(1)
    except ZeroDivisionError:
        if is_enabled("scale_debug"):
            logger.debug(f"[SCALE] Normale undefiniert: {curve!r}")
        return None

    c0 = curve.position(0)
    c1 = curve.position(1)
    reach = Tolerances.SCALE_NORMAL_DISTANCE
    v0 = Point2D(c0.x + n0.x * reach, c0.y + n0.y * reach)
    v1 = Point2D(c1.x + n1.x * reach, c1.y + n1.y * reach)

    pivot = lli4(v0, c0, v1, c1)
    if pivot is None:
        if is_enabled("scale_debug"):
            logger.debug(f"[SCALE] Kein Pivot (parallele Normalen): {curve!r}")
        return None

    points = curve.points
    np_ = list(points)
    np_[0] = Point2D(points[0].x + r1 * n0.x, points[0].y + r1 * n0.y)
    np_[order] = Point2D(points[order].x + r2 * n1.x, points[order].y + r2 * n1.y)

    if distance_fn is None:
        # Kontrollpunkte auf den Strahlen Pivot -> Original-Kontrollpunkt,
        # Richtung durch die Tangente am neuen Endpunkt
        for t in (0, 1):
            p = np_[t * order]
            tan = curve.tangent(t)
            q = lli4(p, Point2D(p.x + tan.x, p.y + tan.y), pivot, points[t + 1])
            if q is None:
                if is_enabled("scale_debug"):
                    logger.debug(f"[SCALE] Tangente parallel zum Pivot-Strahl bei t={t}")
                return None
            np_[t + 1] = q
    else:
        for t in (0, 1):
            p = points[t + 1]
            ov = p - pivot
            m = ov.magnitude
            if m == 0:
                return None
            rc = distance_fn((t + 1) / order)
            if not curve.clockwise:
                rc = -rc
            np_[t + 1] = Point2D(p.x + rc * ov.x / m, p.y + rc * ov.y / m)

    return Bezier._raw(np_, curve.t1, curve.t2)


def offset_curve(curve: 'Bezier', d: float) -> List['Bezier']:
    """
    Offset-Kurve im Abstand d.

    Lineare Kurven werden exakt verschoben, alle anderen erst reduziert
    und dann segmentweise skaliert. Nicht skalierbare Segmente fehlen im
    Ergebnis (mit Warnung).
    """
    if curve.linear:
        moved = _translate_linear(curve, lambda _t: d)
        return [moved] if moved is not None else []

    result = []
    for segment in curve.reduce():
        scaled = _scale_segment(segment, d)
        if scaled is None:
            logger.warning(f"[SCALE] Segment t=[{segment.t1:.4f}, {segment.t2:.4f}] nicht skalierbar, übersprungen")
            continue
        result.append(scaled)
    return result


def _linear_distance(s: float, e: float, total_length: float,
                     accumulated: float, segment_length: float) -> Callable[[float], float]:
    """Abstand linear über die Bogenlänge von s (Kurvenanfang) nach e (Kurvenende)"""
    f1 = accumulated / total_length
    f2 = (accumulated + segment_length) / total_length
    delta = e - s
    return lambda v: map_range(v, 0, 1, s + f1 * delta, s + f2 * delta)


def _scale_segment(segment: 'Bezier', d: Distance) -> Optional['Bezier']:
    if segment.linear:
        return _translate_linear(segment, d if callable(d) else (lambda _t: d))
    return scale_curve(segment, d)


def _reverse(curve: 'Bezier') -> 'Bezier':
    from .bezier import Bezier
    return Bezier._raw(list(reversed(curve.points)), curve.t2, curve.t1)


def outline_curve(curve: 'Bezier', d1: float, d2: Optional[float] = None,
                  d3: Optional[float] = None, d4: Optional[float] = None) -> Optional[PolyBezier]:
    """
    Geschlossene Kontur um die Kurve.

    Args:
        d1: Abstand der Vorwärts-Seite (Normalen-Richtung)
        d2: Abstand der Rückwärts-Seite (Standard: d1)
        d3, d4: Abstände am Kurvenende für linear veränderliche Breite
                (d1 -> d3 vorwärts, d2 -> d4 rückwärts)

    Returns:
        PolyBezier [Startkappe, Vorwärts..., Endkappe, Rückwärts...]
        oder None, wenn kein Segment skaliert werden konnte.
    """
    d2 = d1 if d2 is None else d2
    graduated = d3 is not None or d4 is not None
    if graduated:
        d3 = d1 if d3 is None else d3
        d4 = d2 if d4 is None else d4

    reduced = curve.reduce()
    total_length = curve.length if graduated else 0.0
    accumulated = 0.0

    forward: List['Bezier'] = []
    backward: List['Bezier'] = []

    for segment in reduced:
        if graduated and total_length > 0:
            segment_length = segment.length
            fwd_dist = _linear_distance(d1, d3, total_length, accumulated, segment_length)
            bwd_dist = _linear_distance(-d2, -d4, total_length, accumulated, segment_length)
            accumulated += segment_length
        else:
            fwd_dist = d1
            bwd_dist = -d2

        fwd = _scale_segment(segment, fwd_dist)
        bwd = _scale_segment(segment, bwd_dist)
        if fwd is None or bwd is None:
            logger.warning(f"[SCALE] Kontur: Segment t=[{segment.t1:.4f}, {segment.t2:.4f}] nicht skalierbar")
            continue
        forward.append(fwd)
        backward.append(bwd)

    if not forward:
        logger.warning("[SCALE] Kontur: kein Segment skalierbar")
        return None

    backward = [_reverse(s) for s in reversed(backward)]

    fs = forward[0].points[0]
    fe = forward[-1].points[-1]
    bs = backward[-1].points[-1]
    be = backward[0].points[0]

    start_cap = make_line(bs, fs)
    end_cap = make_line(fe, be)

    if is_enabled("scale_debug"):
        logger.debug(f"[SCALE] Kontur: {len(forward)} + {len(backward)} Segmente + 2 Kappen")

    return PolyBezier([start_cap] + forward + [end_cap] + backward)

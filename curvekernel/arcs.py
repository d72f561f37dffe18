"""
CurveKernel - Kreisbogen-Approximation
======================================

Zerlegt eine Kurve in Kreisbögen (bzw. Geraden bei kollinearen Stützpunkten).

Pro Bogen wird ausgehend von t_s der größte Endparameter t_e gesucht,
für den der Kreis durch B(t_s), B(t_m), B(t_e) die Kurve bei 25% und 75%
innerhalb der Fehlerschwelle trifft:
- Treffer:   t_e vergrößern (um die halbe Spanne, maximal bis 1)
- Verfehlt:  t_e = t_m
- Abbruch:   vorheriger Kandidat gut, aktueller schlecht

Intern wird in Radiant gerechnet, die ausgegebenen Arc2D tragen Grad.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Union, TYPE_CHECKING

from loguru import logger

from .config.feature_flags import is_enabled
from .config.tolerances import Tolerances
from .geometry import Point2D, Line2D, Arc2D, Interval
from .utils import approximately, circle_from_points

if TYPE_CHECKING:
    from .bezier import Bezier

ArcShape = Union[Arc2D, Line2D]

_ERROR_RATIOS = (0.25, 0.75)


@dataclass
class _ArcFit:
    """Kandidaten-Bogen in Radiant (gegen den Uhrzeigersinn, start < end)"""
    center: Point2D
    radius: float
    start: float
    end: float

    def position(self, ratio: float) -> Point2D:
        a = self.start + ratio * (self.end - self.start)
        return Point2D(self.center.x + self.radius * math.cos(a),
                       self.center.y + self.radius * math.sin(a))

    def to_arc2d(self, interval: Interval) -> Arc2D:
        return Arc2D(self.center, self.radius, math.degrees(self.start), math.degrees(self.end), interval)


@dataclass
class _Candidate:
    shape: Union[_ArcFit, Line2D]
    t_end: float
    error: float


def _is_reversed(arc: _ArcFit, start_point: Point2D) -> bool:
    """Bogen läuft gegen die Kurvenrichtung: Kurvenstart liegt am Bogenende."""
    return arc.position(1).distance_to(start_point) < arc.position(0).distance_to(start_point)


def _fit_error(curve: 'Bezier', t_s: float, t_e: float,
               shape: Union[_ArcFit, Line2D], reversed_: bool) -> float:
    error = 0.0
    for ratio in _ERROR_RATIOS:
        on_curve = curve.position(t_s + (t_e - t_s) * ratio)
        on_shape = shape.position(1 - ratio if reversed_ else ratio)
        error += on_shape.distance_to(on_curve)
    return error


def _largest_fit(curve: 'Bezier', t_s: float, t_limit: float, threshold: float) -> _Candidate:
    """Größter Bogen ab t_s (höchstens bis t_limit) mit Fehler <= threshold."""
    debug = is_enabled("arc_fit_debug")
    p1 = curve.position(t_s)
    t_e = t_limit

    best: Optional[_Candidate] = None
    last: Optional[_Candidate] = None
    prev_good = False

    for iteration in range(Tolerances.ARC_MAX_ITERATIONS):
        t_m = (t_s + t_e) / 2
        p2 = curve.position(t_m)
        p3 = curve.position(t_e)

        geometry = circle_from_points(p1, p2, p3)
        if geometry is None:
            shape: Union[_ArcFit, Line2D] = Line2D(p1, p3)
            error = _fit_error(curve, t_s, t_e, shape, False)
        else:
            center, radius, start, end = geometry
            shape = _ArcFit(center, radius, start, end)
            error = _fit_error(curve, t_s, t_e, shape, _is_reversed(shape, p1))

        good = error <= threshold
        last = _Candidate(shape, t_e, error)

        if debug:
            logger.debug(f"[ARCS] #{iteration} t=[{t_s:.5f}, {t_e:.5f}] Fehler={error:.6f} ok={good}")

        if good:
            best = last
            if t_e >= t_limit:
                break
            t_e = min(t_limit, t_e + (t_e - t_s) / 2)
        else:
            if prev_good:
                break
            t_e = t_m
        prev_good = good

    if best is None:
        # Kein gültiger Bogen: Gerade über das zuletzt geprüfte Intervall
        line = Line2D(p1, curve.position(last.t_end))
        best = _Candidate(line, last.t_end, _fit_error(curve, t_s, last.t_end, line, False))
        logger.warning(f"[ARCS] Kein Bogen ab t={t_s:.5f} innerhalb Fehler {threshold}, "
                       f"Gerade bis t={last.t_end:.5f} (Fehler {best.error:.6f})")
    return best


def _to_shape(candidate: _Candidate, t_s: float) -> ArcShape:
    interval = Interval(t_s, candidate.t_end)
    if isinstance(candidate.shape, _ArcFit):
        return candidate.shape.to_arc2d(interval)
    return Line2D(candidate.shape.start, candidate.shape.end, interval)


def _approximate_span(curve: 'Bezier', t_start: float, t_limit: float,
                      threshold: float) -> List[ArcShape]:
    shapes: List[ArcShape] = []
    t_s = t_start
    for _ in range(Tolerances.ARC_MAX_SEGMENTS):
        if t_s >= t_limit or approximately(t_s, t_limit):
            break
        candidate = _largest_fit(curve, t_s, t_limit, threshold)
        shapes.append(_to_shape(candidate, t_s))
        t_s = candidate.t_end
    else:
        logger.warning(f"[ARCS] Maximale Bogenanzahl {Tolerances.ARC_MAX_SEGMENTS} erreicht "
                       f"bei t={t_s:.5f}, Ergebnis unvollständig")
    return shapes


def approximate_arcs(curve: 'Bezier', error_threshold: float) -> List[ArcShape]:
    """
    Kreisbogen-Approximation der gesamten Kurve.

    Args:
        curve: Eingangskurve
        error_threshold: Summe der Abstände bei 25% und 75% je Bogen

    Returns:
        Lückenlose Folge von Arc2D (Grad) bzw. Line2D, jeweils mit
        Intervall im Parameterraum der Kurve

    Raises:
        ValueError: negative Fehlerschwelle
    """
    if error_threshold < 0:
        raise ValueError(f"Fehlerschwelle muss >= 0 sein: {error_threshold}")
    shapes = _approximate_span(curve, 0.0, 1.0, error_threshold)
    logger.debug(f"[ARCS] {len(shapes)} Bögen (Fehler <= {error_threshold})")
    return shapes


def approximate_arcs_between_extrema(curve: 'Bezier') -> List[ArcShape]:
    """
    Bögen je Abschnitt zwischen den Extrema; Fehlerschwelle relativ zur
    Kurvenlänge, skaliert mit der Abschnittsspanne.
    """
    accuracy = curve.length * Tolerances.ARC_RELATIVE_ACCURACY

    values = [t for t in curve.extrema().values if 0.0 < t < 1.0]
    breakpoints = [0.0] + values + [1.0]

    shapes: List[ArcShape] = []
    for t_s, t_e in zip(breakpoints, breakpoints[1:]):
        if approximately(t_s, t_e):
            continue
        shapes.extend(_approximate_span(curve, t_s, t_e, accuracy * (t_e - t_s)))
    return shapes


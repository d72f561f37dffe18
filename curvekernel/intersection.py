"""
CurveKernel - Schnittberechnung
===============================

- Kurve/Linie: Wurzeln der an der Linie ausgerichteten Kurve, gefiltert
  auf das Liniensegment
- Kurve/Kurve: Bounding-Box Unterteilung reduzierter Segmente bis beide
  Parameter-Spannen unter der Schwelle liegen
- Selbstschnitt: Segment i gegen Segmente i+2 ...
- Kurve/Kreis, Kurve/Bogen: Polynom |B(t) - c|² = r² (numpy)

Alle t-Werte liegen im Parameterraum der jeweiligen Eingangskurve.
"""

from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

from numpy.polynomial import polynomial as P
from loguru import logger

from .config.feature_flags import is_enabled
from .config.tolerances import Tolerances
from .geometry import Line2D, Circle2D, Arc2D, is_point_on_arc
from .utils import align, bbox_overlap, power_coefficients, roots, unique_sorted, unit_roots

if TYPE_CHECKING:
    from .bezier import Bezier

IntersectionPair = Tuple[float, float]


# =============================================================================
# Kurve / Linie
# =============================================================================

def curve_line_intersections(curve: 'Bezier', line: Line2D) -> List[float]:
    """
    t-Werte, an denen die Kurve das Liniensegment schneidet.

    Kandidaten sind die Wurzeln der unendlichen Linie; behalten werden nur
    Positionen innerhalb der Bounding-Box des Segments.
    """
    if curve.order <= 3:
        candidates = roots(curve.points, line)
    else:
        aligned = align(curve.points, line)
        candidates = unit_roots(power_coefficients([p.y for p in aligned]))

    box = line.bbox()
    result = [t for t in candidates if box.contains_point(curve.position(t))]
    return unique_sorted(result)


# =============================================================================
# Kurve / Kreis, Kurve / Bogen
# =============================================================================

def curve_circle_intersections(curve: 'Bezier', circle: Circle2D) -> List[float]:
    """t-Werte mit |B(t) - center| = radius"""
    x = power_coefficients([p.x for p in curve.points])
    y = power_coefficients([p.y for p in curve.points])
    x = P.polysub(x, [circle.center.x])
    y = P.polysub(y, [circle.center.y])
    f = P.polysub(P.polyadd(P.polymul(x, x), P.polymul(y, y)), [circle.radius ** 2])

    candidates = unit_roots(f)
    tol = max(Tolerances.CURVE_LINEAR, circle.radius * Tolerances.EPSILON)
    return [t for t in candidates
            if abs(curve.position(t).distance_to(circle.center) - circle.radius) <= tol]


def curve_arc_intersections(curve: 'Bezier', arc: Arc2D) -> List[float]:
    """Kreisschnitte, gefiltert auf den Winkelbereich des Bogens"""
    circle = Circle2D(arc.center, arc.radius)
    tol = max(Tolerances.CURVE_LINEAR, arc.radius * Tolerances.EPSILON)
    return [t for t in curve_circle_intersections(curve, circle)
            if is_point_on_arc(curve.position(t), arc, tol)]


# =============================================================================
# Kurve / Kurve
# =============================================================================

def _mid(curve: 'Bezier') -> float:
    return round((curve.t1 + curve.t2) / 2, Tolerances.INTERSECTION_ROUNDING)


def _cluster(pairs: List[IntersectionPair], threshold: float) -> List[IntersectionPair]:
    """Paare, die in beiden Parametern näher als threshold liegen, zusammenfassen"""
    result: List[IntersectionPair] = []
    for pair in sorted(pairs):
        if any(abs(pair[0] - k[0]) <= threshold and abs(pair[1] - k[1]) <= threshold for k in result):
            continue
        result.append(pair)
    return result


def pair_iteration(c1: 'Bezier', c2: 'Bezier', threshold: Optional[float] = None) -> List[IntersectionPair]:
    """
    Unterteilt ein Kurvenpaar mit überlappenden Bounding-Boxen, bis beide
    Parameter-Spannen unter threshold liegen.

    Arbeitet mit einer expliziten Arbeitsliste pro Ebene; Tiefe und
    Paar-Anzahl sind begrenzt (deckungsgleiche Kurven).
    """
    threshold = Tolerances.CURVE_INTERSECTION_THRESHOLD if threshold is None else threshold
    debug = is_enabled("intersection_debug")

    pending = [(c1, c2)]
    results: List[IntersectionPair] = []
    depth = 0

    while pending:
        if depth >= Tolerances.CURVE_INTERSECTION_MAX_DEPTH:
            logger.warning(f"[INTERSECT] Maximale Tiefe {depth} erreicht, {len(pending)} Paare ungelöst")
            break
        if len(pending) > Tolerances.CURVE_INTERSECTION_MAX_PAIRS:
            logger.warning(f"[INTERSECT] {len(pending)} Kandidaten-Paare (deckungsgleiche Kurven?), Abbruch")
            break

        next_level = []
        for a, b in pending:
            if (a.t2 - a.t1) < threshold and (b.t2 - b.t1) < threshold:
                results.append((_mid(a), _mid(b)))
                continue

            la, ra = a.split(0.5)
            lb, rb = b.split(0.5)
            for x, y in ((la, lb), (la, rb), (ra, rb), (ra, lb)):
                if bbox_overlap(x.bbox(), y.bbox()):
                    next_level.append((x, y))

        pending = next_level
        depth += 1

    if debug:
        logger.debug(f"[INTERSECT] Tiefe {depth}: {len(results)} Rohtreffer")
    return _cluster(results, threshold)


def curve_curve_intersections(segments1: Sequence['Bezier'], segments2: Sequence['Bezier'],
                              threshold: Optional[float] = None) -> List[IntersectionPair]:
    """Alle Segmentpaare mit überlappenden Boxen iterativ auflösen."""
    threshold = Tolerances.CURVE_INTERSECTION_THRESHOLD if threshold is None else threshold

    pairs = []
    for l in segments1:
        for r in segments2:
            if bbox_overlap(l.bbox(), r.bbox()):
                pairs.append((l, r))

    results: List[IntersectionPair] = []
    for l, r in pairs:
        results.extend(pair_iteration(l, r, threshold))

    return _cluster(results, threshold)


def self_intersections(curve: 'Bezier', threshold: Optional[float] = None) -> List[IntersectionPair]:
    """Selbstschnitte: reduzierte Segmente gegen alle nicht benachbarten Nachfolger"""
    threshold = Tolerances.CURVE_INTERSECTION_THRESHOLD if threshold is None else threshold
    reduced = curve.reduce()

    results: List[IntersectionPair] = []
    for i in range(len(reduced) - 2):
        left = reduced[i:i + 1]
        right = reduced[i + 2:]
        results.extend(curve_curve_intersections(left, right, threshold))

    return _cluster(results, threshold)

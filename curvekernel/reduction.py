"""
CurveKernel - Reduktion in einfache Segmente
============================================

Zwei Durchgänge:
1. Grob-Zerlegung an den Extrema (Snapping nahe 0/1, Randwerte ergänzen)
2. Jedes Grob-Segment schrittweise abtasten und maximal lange einfache
   Teilstücke ausgeben

Die Schrittweite wird als ganzzahliger Zähler geführt, damit sich keine
Rundungsfehler aufsummieren und t2 nie über 1 hinausläuft.
"""

from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

from loguru import logger

from .config.feature_flags import is_enabled
from .config.tolerances import Tolerances
from .utils import approximately, map_range

if TYPE_CHECKING:
    from .bezier import Bezier


@dataclass
class ReductionResult:
    """
    Ergebnis einer Reduktion.

    complete=False bedeutet: ein Grob-Segment ließ sich auch mit einem
    einzelnen Schritt nicht mehr einfach darstellen. segments enthält dann
    das bis covered_until (Parameter der Eingangskurve) erzeugte Teilergebnis.
    """
    segments: List['Bezier'] = field(default_factory=list)
    complete: bool = True
    covered_until: float = 1.0

    @property
    def success(self) -> bool:
        return self.complete

    def __len__(self):
        return len(self.segments)


def _extrema_breakpoints(curve: 'Bezier') -> List[float]:
    values = []
    for t in curve.extrema().values:
        if approximately(t, 0):
            t = 0.0
        elif approximately(t, 1):
            t = 1.0
        values.append(t)

    if not values or values[0] != 0.0:
        values.insert(0, 0.0)
    if values[-1] != 1.0:
        values.append(1.0)
    return values


def split_at_extrema(curve: 'Bezier') -> List['Bezier']:
    """Erster Durchgang: Teilkurven zwischen aufeinanderfolgenden Extrema."""
    values = _extrema_breakpoints(curve)
    segments = []

    t1 = values[0]
    for t2 in values[1:]:
        if approximately(t1, t2):
            continue
        segment = curve.split_range(t1, t2)
        segment.t1 = t1
        segment.t2 = t2
        segments.append(segment)
        t1 = t2

    return segments


def reduce_curve(curve: 'Bezier', step: Optional[float] = None) -> ReductionResult:
    """
    Zerlegt eine Kurve in eine Folge einfacher Teilkurven.

    Die Intervalle (t1, t2) der Segmente liegen im Parameterraum der
    Eingangskurve und schließen lückenlos aneinander an.

    Args:
        curve: Eingangskurve
        step: Abtast-Schrittweite im lokalen Parameterraum eines Grob-Segments

    Returns:
        ReductionResult (bei Abbruch mit complete=False und Teilergebnis)

    Raises:
        ValueError: step nicht in (0, 1)
    """
    step = Tolerances.REDUCE_STEP if step is None else step
    if not (0.0 < step < 1.0):
        raise ValueError(f"Reduktions-Schrittweite muss in (0, 1) liegen: {step}")

    debug = is_enabled("reduce_debug")
    coarse_segments = split_at_extrema(curve)
    if debug:
        logger.debug(f"[REDUCE] {len(coarse_segments)} Grob-Segmente an den Extrema")

    result = ReductionResult()

    for coarse in coarse_segments:
        i1 = 0
        t1 = 0.0
        finished = False

        while not finished:
            i2 = i1 + 1
            while True:
                t2 = min(i2 * step, 1.0)
                segment = coarse.split_range(t1, t2)

                if not segment.is_simple():
                    i2 -= 1
                    if i2 <= i1:
                        # Ein einzelner Schritt ist bereits nicht einfach
                        covered = map_range(t1, 0, 1, coarse.t1, coarse.t2)
                        logger.warning(
                            f"[REDUCE] Abbruch bei t={covered:.4f}: Segment ab lokal "
                            f"t={t1:.4f} auch mit Schrittweite {step} nicht einfach"
                        )
                        result.complete = False
                        result.covered_until = covered
                        return result

                    t2 = i2 * step
                    segment = coarse.split_range(t1, t2)
                    segment.t1 = map_range(t1, 0, 1, coarse.t1, coarse.t2)
                    segment.t2 = map_range(t2, 0, 1, coarse.t1, coarse.t2)
                    result.segments.append(segment)
                    i1 = i2
                    t1 = t2
                    break

                if t2 >= 1.0:
                    finished = True
                    break
                i2 += 1

        if not approximately(t1, 1.0):
            segment = coarse.split_range(t1, 1.0)
            segment.t1 = map_range(t1, 0, 1, coarse.t1, coarse.t2)
            segment.t2 = coarse.t2
            result.segments.append(segment)
        elif result.segments:
            # Rest unterhalb der Toleranz: letztes Segment bis zum Grob-Ende strecken
            result.segments[-1].t2 = coarse.t2

    if debug:
        logger.debug(f"[REDUCE] {len(result.segments)} einfache Segmente")
    return result

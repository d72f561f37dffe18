"""
CurveKernel - Zentralisierte Toleranz-Konfiguration
===================================================

Alle Toleranzen und Iterations-Grenzen der Kurven-Algorithmen an einem Ort.

Toleranz-Philosophie:
- Parameter-Vergleiche (t-Werte): 1e-6 - Snapping auf 0/1
- Linearitäts-Test: 1e-4 - Abstand zur Sehne im ausgerichteten Frame
- Reduktion: Schrittweite 0.01 im lokalen Parameterraum
- Iterative Verfahren: immer mit fester Obergrenze

Verwendung:
    from curvekernel.config.tolerances import Tolerances

    # Direkt als Klassenvariablen
    eps = Tolerances.EPSILON

    # Oder via Convenience-Funktionen
    from curvekernel.config.tolerances import curve_epsilon
    eps = curve_epsilon()
"""

import math


class Tolerances:
    """
    Zentrale Toleranz-Konstanten für CurveKernel.

    Kategorien:
    - EPSILON / COMPARE_*: Numerische Vergleiche
    - CURVE_*: Kurven-Modell (Linearität, Intersection)
    - REDUCE_* / SIMPLE_*: Zerlegung in einfache Segmente
    - SCALE_*: Offset/Skalierung
    - ARC_*: Kreisbogen-Approximation
    - LENGTH_*: Numerische Integration
    """

    # =========================================================================
    # Mathematische Epsilon-Werte (Numerische Stabilität)
    # =========================================================================

    # Parameter-Vergleich ("ist t praktisch 0 oder 1?")
    EPSILON = 1e-6

    # Vermeidet Division durch Null
    EPSILON_MATH = 1e-12

    # Punkt-Vergleich (sind zwei Punkte "gleich"?)
    COMPARE_POINT = 1e-6

    # =========================================================================
    # Kurven-Modell
    # =========================================================================

    # Maximale Abweichung von der Sehne, ab der eine Kurve nicht mehr linear ist
    CURVE_LINEAR = 1e-4

    # Konvergenz-Schwelle für Kurve/Kurve Schnitt (Parameter-Spanne)
    CURVE_INTERSECTION_THRESHOLD = 1e-3

    # Maximale Unterteilungstiefe beim Kurve/Kurve Schnitt
    # 2^-40 liegt weit unter jeder sinnvollen Schwelle
    CURVE_INTERSECTION_MAX_DEPTH = 40

    # Maximale Anzahl offener Kandidaten-Paare pro Ebene (deckungsgleiche Kurven)
    CURVE_INTERSECTION_MAX_PAIRS = 4096

    # Nachkommastellen der gemeldeten t-Werte (Deduplizierung)
    INTERSECTION_ROUNDING = 5

    # =========================================================================
    # Reduktion (einfache Segmente)
    # =========================================================================

    # Schrittweite beim Abtasten eines Grob-Segments
    REDUCE_STEP = 0.01

    # Maximaler Winkel zwischen den End-Normalen eines einfachen Segments
    SIMPLE_MAX_NORMAL_ANGLE = math.pi / 3  # 60°

    # =========================================================================
    # Offset/Skalierung
    # =========================================================================

    # Länge der Hilfsstrahlen entlang der End-Normalen (Pivot-Bestimmung)
    SCALE_NORMAL_DISTANCE = 10.0

    # =========================================================================
    # Kreisbogen-Approximation
    # =========================================================================

    # Bisektions-Schritte pro Bogen (Sicherheitsgrenze)
    ARC_MAX_ITERATIONS = 100

    # Maximale Anzahl Bögen pro Kurve
    ARC_MAX_SEGMENTS = 10000

    # Relative Genauigkeit von to_arc_shapes() (Anteil der Kurvenlänge)
    ARC_RELATIVE_ACCURACY = 0.01

    # =========================================================================
    # Numerische Integration
    # =========================================================================

    # Stützstellen der Gauss-Legendre Quadratur für die Bogenlänge
    LENGTH_QUADRATURE_ORDER = 24


# =============================================================================
# Convenience-Funktionen
# =============================================================================

def curve_epsilon() -> float:
    """Gibt die Standard-Parameter-Toleranz zurück."""
    return Tolerances.EPSILON


def reduce_step() -> float:
    """Gibt die Standard-Schrittweite der Reduktion zurück."""
    return Tolerances.REDUCE_STEP


def intersection_threshold() -> float:
    """Gibt die Standard-Schwelle für Kurve/Kurve Schnitte zurück."""
    return Tolerances.CURVE_INTERSECTION_THRESHOLD


# =============================================================================
# Toleranz-Validierung (für Debugging)
# =============================================================================

def validate_tolerances():
    """
    Validiert dass alle Toleranzen sinnvolle Werte haben.
    Nützlich für Tests und Debugging.
    """
    issues = []

    # Reduktions-Schritt muss in (0, 1) liegen, sonst gibt es keine Segmente
    if not (0.0 < Tolerances.REDUCE_STEP < 1.0):
        issues.append(f"REDUCE_STEP außerhalb sinnvoller Grenzen: {Tolerances.REDUCE_STEP}")

    # Linearitäts-Test sollte nicht strenger als der Parameter-Vergleich sein
    if Tolerances.CURVE_LINEAR < Tolerances.EPSILON:
        issues.append(f"CURVE_LINEAR ({Tolerances.CURVE_LINEAR}) strenger als EPSILON ({Tolerances.EPSILON})")

    if not (0.0 < Tolerances.SIMPLE_MAX_NORMAL_ANGLE < math.pi):
        issues.append(f"SIMPLE_MAX_NORMAL_ANGLE außerhalb (0, π): {Tolerances.SIMPLE_MAX_NORMAL_ANGLE}")

    if Tolerances.ARC_MAX_ITERATIONS < 1:
        issues.append(f"ARC_MAX_ITERATIONS muss positiv sein: {Tolerances.ARC_MAX_ITERATIONS}")

    if Tolerances.CURVE_INTERSECTION_MAX_DEPTH < 1:
        issues.append(f"CURVE_INTERSECTION_MAX_DEPTH muss positiv sein: {Tolerances.CURVE_INTERSECTION_MAX_DEPTH}")

    return issues


# Automatische Validierung beim Import (nur Warnung, kein Fehler)
_validation_issues = validate_tolerances()
if _validation_issues:
    from loguru import logger
    for issue in _validation_issues:
        logger.warning(f"Toleranz-Validierung: {issue}")

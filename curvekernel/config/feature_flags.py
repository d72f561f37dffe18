"""
CurveKernel - Feature Flags
===========================

Feature Flags ermöglichen das gezielte Zuschalten von Debug-Ausgaben
einzelner Algorithmen, ohne den Log-Level global zu ändern.
"""

from typing import Dict

# Feature Flag Registry
# =====================
# Die Flags unten sind für aktives Debugging.

FEATURE_FLAGS: Dict[str, bool] = {
    # Debug-Modi
    "reduce_debug": False,  # Reduktion: jedes emittierte Segment loggen ([REDUCE])
    "scale_debug": False,  # Skalierung: Pivot und verschobene Punkte ([SCALE])
    "intersection_debug": False,  # Kurve/Kurve Konvergenz pro Tiefe ([INTERSECT])
    "arc_fit_debug": False,  # Bogen-Bisektion pro Iteration ([ARCS], sehr verbose)
}


def is_enabled(flag: str) -> bool:
    """
    Prüft ob ein Feature-Flag aktiviert ist.

    Args:
        flag: Name des Feature-Flags

    Returns:
        True wenn aktiviert, False wenn nicht aktiviert oder unbekannt
    """
    return FEATURE_FLAGS.get(flag, False)


def set_flag(flag: str, value: bool) -> None:
    """
    Setzt ein Feature-Flag zur Laufzeit.
    Nützlich für Tests und Debugging.

    Args:
        flag: Name des Feature-Flags
        value: Neuer Wert
    """
    FEATURE_FLAGS[flag] = value


def get_all_flags() -> Dict[str, bool]:
    """Gibt alle Feature-Flags zurück."""
    return FEATURE_FLAGS.copy()

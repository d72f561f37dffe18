import pytest

from curvekernel.config.feature_flags import set_flag


# Global Feature Flag Defaults - Single Source of Truth for Test Isolation
# ========================================================================
# WICHTIG: Jeder Test muss mit sauberen Feature-Flags starten.
# Diese Defaults müssen mit config/feature_flags.py synchron gehalten werden.
FEATURE_FLAG_DEFAULTS = {
    # Debug-Modi
    "reduce_debug": False,
    "scale_debug": False,
    "intersection_debug": False,
    "arc_fit_debug": False,
}


@pytest.fixture(autouse=True)
def _global_feature_flag_isolation():
    """
    Globale Feature-Flag-Isolation.

    Stellt sicher, dass jeder Test mit sauberen, deterministischen
    Feature-Flags startet. Verhindert Leakage von Debug-Flags, die
    einzelne Tests einschalten.
    """
    # Pre-Test: Alle Flags auf Defaults zurücksetzen
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)

    yield

    # Post-Test: Alle Flags auf Defaults zurücksetzen (cleanup)
    for key, value in FEATURE_FLAG_DEFAULTS.items():
        set_flag(key, value)


@pytest.fixture
def arch_curve():
    """Kubischer Bogen ohne Selbstschnitt: (0,0) (0,100) (100,100) (100,0)"""
    from curvekernel import Bezier
    return Bezier((0, 0), (0, 100), (100, 100), (100, 0))


@pytest.fixture
def s_curve():
    """S-förmige kubische Kurve mit Wendepunkt"""
    from curvekernel import Bezier
    return Bezier((0, 0), (100, 0), (0, 100), (100, 100))


@pytest.fixture
def loop_curve():
    """Kubische Kurve mit Schleife (ein Selbstschnitt)"""
    from curvekernel import Bezier
    return Bezier((0, 0), (150, 100), (-50, 100), (100, 0))


@pytest.fixture
def quadratic_curve():
    from curvekernel import Bezier
    return Bezier((0, 0), (50, 100), (100, 0))

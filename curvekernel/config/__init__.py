"""
CurveKernel - Configuration Module
==================================

Zentrale Konfiguration für alle globalen Einstellungen.
"""

from .tolerances import Tolerances, curve_epsilon, reduce_step, intersection_threshold
from .feature_flags import is_enabled, set_flag, get_all_flags, FEATURE_FLAGS

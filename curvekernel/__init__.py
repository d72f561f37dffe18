"""
CurveKernel - 2D Bézier-Kurven Modul
"""

from .config.version import VERSION as __version__

from .geometry import (
    Point2D, Line2D, Circle2D, Arc2D, Interval, BoundingBox2D, Extrema, SplitResult,
    PathShape, line_line_intersection, is_point_on_arc,
)

from .bezier import Bezier

from .poly_bezier import PolyBezier

from .reduction import reduce_curve, split_at_extrema, ReductionResult

from .offsetting import scale_curve, offset_curve, outline_curve

from .intersection import (
    curve_line_intersections, curve_curve_intersections, self_intersections,
    curve_circle_intersections, curve_arc_intersections, pair_iteration
)

from .arcs import approximate_arcs, approximate_arcs_between_extrema

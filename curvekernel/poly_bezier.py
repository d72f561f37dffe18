"""
CurveKernel - Zusammengesetzte Kurve (PolyBezier)
Geordnete Folge von Bézier-Kurven, z.B. das Ergebnis von outline()
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, TYPE_CHECKING

from .config.tolerances import Tolerances
from .geometry import Point2D, BoundingBox2D, Interval

if TYPE_CHECKING:
    from .bezier import Bezier


@dataclass
class PolyBezier:
    """Kurvenverbund; der Parameter t verteilt sich gleichmäßig auf die Kurven."""
    curves: List['Bezier'] = field(default_factory=list)
    interval: Interval = field(default_factory=Interval)

    def add_curve(self, curve: 'Bezier') -> None:
        self.curves.append(curve)

    def __len__(self):
        return len(self.curves)

    def __iter__(self) -> Iterator['Bezier']:
        return iter(self.curves)

    def __getitem__(self, index: int) -> 'Bezier':
        return self.curves[index]

    @property
    def length(self) -> float:
        return sum(c.length for c in self.curves)

    def _locate(self, t: float) -> Tuple[int, float]:
        n = len(self.curves)
        if n == 0:
            raise ValueError("PolyBezier enthält keine Kurven")
        t = max(0.0, min(1.0, t))
        index = min(int(t * n), n - 1)
        return index, t * n - index

    def position(self, t: float) -> Point2D:
        index, local = self._locate(t)
        return self.curves[index].position(local)

    def bbox(self) -> Optional[BoundingBox2D]:
        box = None
        for curve in self.curves:
            b = curve.bbox()
            box = b if box is None else box.union(b)
        return box

    def is_closed(self, tolerance: Optional[float] = None) -> bool:
        """Endpunkt jeder Kurve = Startpunkt der nächsten, letzte schließt an erste an."""
        if not self.curves:
            return False
        tol = Tolerances.COMPARE_POINT if tolerance is None else tolerance
        for current, following in zip(self.curves, self.curves[1:] + self.curves[:1]):
            if not current.points[-1].is_close(following.points[0], tol):
                return False
        return True

    def offset(self, d: float) -> 'PolyBezier':
        result = PolyBezier()
        for curve in self.curves:
            for piece in curve.offset(d):
                result.add_curve(piece)
        return result

    def break_at(self, t: float) -> Tuple['PolyBezier', 'PolyBezier']:
        index, local = self._locate(t)
        left, right = self.curves[index].break_at(local)
        return (PolyBezier(self.curves[:index] + [left]),
                PolyBezier([right] + self.curves[index + 1:]))

    def clone(self) -> 'PolyBezier':
        return PolyBezier([c.clone() for c in self.curves],
                          Interval(self.interval.start, self.interval.end))

    def to_svg(self) -> str:
        """Ein SVG-Pfad; "M" nur für die erste Kurve, "Z" wenn geschlossen"""
        parts = []
        for i, curve in enumerate(self.curves):
            svg = curve.to_svg()
            if i > 0:
                # "M x y " der Folgekurven entfernen
                svg = svg.split(" ", 3)[3]
            parts.append(svg)
        if parts and self.is_closed():
            parts.append("Z")
        return " ".join(parts)

    def to_dict(self) -> dict:
        return {"type": "PolyBezier", "curves": [c.to_dict() for c in self.curves]}

    def __repr__(self):
        return f"PolyBezier({len(self.curves)} curves)"

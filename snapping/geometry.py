"""
NodeSnap - Geometrie-Primitives
Koordinaten und Extents in Karteneinheiten der Projektion.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

Coordinate = Tuple[float, float]

# Koordinate, die nie matcht (weder Prädikate noch Distanz-Test)
NAN_COORDINATE: Coordinate = (math.nan, math.nan)


def as_coordinate(value: Optional[Sequence[float]]) -> Coordinate:
    """
    Wandelt eine beliebige (x, y)-Sequenz in ein Float-Tupel um.
    Fehlende oder kaputte Werte werden zur NaN-Koordinate.
    """
    if value is None:
        return NAN_COORDINATE
    try:
        return (float(value[0]), float(value[1]))
    except (TypeError, ValueError, IndexError):
        return NAN_COORDINATE


def is_finite(coordinate: Optional[Sequence[float]]) -> bool:
    if coordinate is None:
        return False
    x, y = as_coordinate(coordinate)
    return math.isfinite(x) and math.isfinite(y)


def squared_distance(a: Coordinate, b: Coordinate) -> float:
    """Quadrierte Distanz; NaN-Eingaben ergeben +inf."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    d2 = dx * dx + dy * dy
    return d2 if not math.isnan(d2) else math.inf


def distance(a: Coordinate, b: Coordinate) -> float:
    return math.sqrt(squared_distance(a, b))


@dataclass
class Extent:
    """
    Achsenparallele Bounding-Box (min_x, min_y, max_x, max_y).

    Mutable, weil die Knoten-Suche den Extent während der Iteration
    schrumpft und der Spatial Index ihn bei jedem Schritt neu liest.
    """
    min_x: float = -math.inf
    min_y: float = -math.inf
    max_x: float = math.inf
    max_y: float = math.inf

    @classmethod
    def unbounded(cls) -> 'Extent':
        return cls()

    @classmethod
    def around(cls, x: float, y: float, half_width: float) -> 'Extent':
        return cls(x - half_width, y - half_width, x + half_width, y + half_width)

    @classmethod
    def of_point(cls, coordinate: Coordinate) -> 'Extent':
        x, y = coordinate
        return cls(x, y, x, y)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Coordinate:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def intersects(self, other: 'Extent') -> bool:
        # Berührung zählt als Schnitt (geschlossene Intervalle)
        return (self.min_x <= other.max_x and self.max_x >= other.min_x
                and self.min_y <= other.max_y and self.max_y >= other.min_y)

    def contains_xy(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def contains(self, other: 'Extent') -> bool:
        return (self.min_x <= other.min_x and other.max_x <= self.max_x
                and self.min_y <= other.min_y and other.max_y <= self.max_y)

    def shrink_to(self, x: float, y: float, half_width: float) -> None:
        """Setzt den Extent in-place auf das Quadrat um (x, y)."""
        self.min_x = x - half_width
        self.min_y = y - half_width
        self.max_x = x + half_width
        self.max_y = y + half_width

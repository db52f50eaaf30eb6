"""
NodeSnap - Koordinaten-Prädikate

Bausteine für at_start_fn / at_end_fn der Zeichen-Strategien.
None oder nicht-endliche Koordinaten matchen nie.
"""

from typing import Callable, Iterable, Optional, Sequence

from config.tolerances import Tolerances
from snapping.geometry import Coordinate, as_coordinate, is_finite, squared_distance


def always(coordinate: Optional[Coordinate] = None) -> bool:
    return True


def never(coordinate: Optional[Coordinate] = None) -> bool:
    return False


def at_coordinate(target: Sequence[float],
                  tolerance: float = Tolerances.COMPARE_POINT) -> Callable[[Optional[Coordinate]], bool]:
    """Matches coordinates within tolerance (map units) of target."""
    return at_any_coordinate([target], tolerance)


def at_any_coordinate(targets: Iterable[Sequence[float]],
                      tolerance: float = Tolerances.COMPARE_POINT) -> Callable[[Optional[Coordinate]], bool]:
    points = [as_coordinate(t) for t in targets]
    tol2 = tolerance * tolerance

    def matches(coordinate: Optional[Coordinate] = None) -> bool:
        if not is_finite(coordinate):
            return False
        c = as_coordinate(coordinate)
        return any(squared_distance(c, p) <= tol2 for p in points)

    return matches

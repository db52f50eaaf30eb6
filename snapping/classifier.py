"""
NodeSnap - Snapping-Klassifikation
Bewertet die aktuelle Mausposition gegen den nächsten Knoten.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from snapping.geometry import NAN_COORDINATE, Coordinate, as_coordinate, distance
from snapping.node_source import Node
from snapping.state import RangeState

AtCoordinateFn = Callable[[Optional[Coordinate]], bool]
CoordinateToPixel = Callable[[Coordinate], Sequence[float]]


@dataclass(frozen=True)
class SnappingInfo:
    """Snapping possibilities of one mouse position."""
    mouse_coordinate: Coordinate  # Kopie der Event-Koordinate
    snapped_coordinate: Coordinate
    start: bool  # in snapping range of a starting point
    end: bool  # in snapping range of an end point


def pixel_distance(a: Coordinate, b: Coordinate, coordinate_to_pixel: CoordinateToPixel) -> float:
    """Screen distance between two map coordinates; +inf if either is unusable."""
    return distance(as_coordinate(coordinate_to_pixel(a)), as_coordinate(coordinate_to_pixel(b)))


def classify(mouse_coordinate: Optional[Sequence[float]],
             closest_node: Optional[Node],
             resolution: float,
             coordinate_to_pixel: CoordinateToPixel,
             at_start_fn: AtCoordinateFn,
             at_end_fn: AtCoordinateFn,
             state: RangeState) -> SnappingInfo:
    """
    Calculate the snapping information for the current mouse coordinate.

    A latched range stays active until the node leaves the resolution, which
    keeps the boundary from flickering. Start has precedence over the end
    predicate: a node matching both is classified as start only. A latched
    end range is not cleared by a start match, so both flags can be set.
    """
    mouse = as_coordinate(mouse_coordinate)
    closest = closest_node.first_coordinate if closest_node is not None else NAN_COORDINATE

    at_start = state.in_start_range or bool(at_start_fn(closest))
    # Der End-Latch bleibt auch bei einem Start-Treffer aktiv
    at_end = state.in_end_range or (not at_start and bool(at_end_fn(closest)))

    snapping = pixel_distance(mouse, closest, coordinate_to_pixel) <= resolution

    return SnappingInfo(
        mouse_coordinate=mouse,
        snapped_coordinate=closest if snapping else mouse,
        start=at_start and snapping,
        end=at_end and snapping,
    )

"""
NodeSnap - Nearest-Node-Suche
Findet den nächsten nicht ausgeschlossenen Knoten zu einer Koordinate.
"""

import math
from typing import AbstractSet, Hashable, Optional

from snapping.geometry import Coordinate, Extent, as_coordinate, is_finite
from snapping.node_source import Node, SpatialCollection


def find_closest_node(coordinate: Coordinate,
                      nodes: SpatialCollection,
                      excluded_ids: AbstractSet[Hashable] = frozenset()) -> Optional[Node]:
    """
    Returns the node closest to coordinate, skipping every node whose id is
    in excluded_ids, or None if no eligible node exists.

    The search extent starts unbounded and shrinks to the square around the
    query point each time the minimum distance improves; the collection reads
    the live extent, so later candidates outside it are never visited.

    Equidistant nodes: the first one in the collection's iteration order wins,
    because a candidate must strictly improve the minimum.
    """
    if not is_finite(coordinate):
        return None

    x, y = as_coordinate(coordinate)
    closest_node: Optional[Node] = None
    min_squared_distance = math.inf
    extent = Extent.unbounded()

    def visit(node: Node):
        nonlocal closest_node, min_squared_distance
        if node.node_id in excluded_ids:
            return None

        previous = min_squared_distance
        min_squared_distance = node.closest_point_refine(x, y, min_squared_distance)

        if min_squared_distance < previous:
            closest_node = node
            extent.shrink_to(x, y, math.sqrt(min_squared_distance))
        return None

    nodes.for_each_in_extent(extent, visit)
    return closest_node

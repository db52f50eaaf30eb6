"""
NodeSnap - Knoten-Quelle
Mutable Sammlung der Punkt-Features, an die beim Digitalisieren gefangen wird.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Iterator, Optional, Protocol, Sequence

from loguru import logger

from config.feature_flags import is_enabled
from snapping.geometry import Coordinate, Extent, as_coordinate, is_finite
from snapping.quadtree import QuadTree


@dataclass(frozen=True)
class Node:
    """Punkt-Feature mit stabiler Identität. Wird von der Engine nie verändert."""
    node_id: Hashable
    coordinate: Coordinate

    @property
    def first_coordinate(self) -> Coordinate:
        return self.coordinate

    @property
    def extent(self) -> Extent:
        return Extent.of_point(self.coordinate)

    def closest_point_refine(self, x: float, y: float, min_squared_distance: float) -> float:
        """
        Returns the squared distance from (x, y) to this node if it is strictly
        smaller than min_squared_distance, otherwise min_squared_distance.
        NaN never counts as an improvement.
        """
        dx = self.coordinate[0] - x
        dy = self.coordinate[1] - y
        d2 = dx * dx + dy * dy
        if d2 < min_squared_distance:
            return d2
        return min_squared_distance


class SpatialCollection(Protocol):
    """Contract the nearest-node search consumes."""

    def for_each_in_extent(self, extent: Extent, visit: Callable[[Node], object]) -> object:
        ...


class NodeSource:
    """
    Node collection backed by a QuadTree.

    Nodes with non-finite coordinates are kept in the registry but never
    indexed, so they are never visited by extent queries.
    """

    def __init__(self, nodes: Optional[Sequence[Node]] = None):
        self._nodes: Dict[Hashable, Node] = {}
        self._index = QuadTree()
        for node in nodes or ():
            self._register(node)

    # ==================== MUTATION ====================

    def add_node(self, node_id: Hashable, coordinate: Sequence[float]) -> Node:
        if node_id in self._nodes:
            raise ValueError(f"Node {node_id!r} already exists")
        node = Node(node_id, as_coordinate(coordinate))
        self._register(node)
        return node

    def remove_node(self, node_id: Hashable) -> Node:
        node = self._nodes.pop(node_id)  # KeyError für unbekannte IDs
        if is_finite(node.coordinate):
            self._index.remove(node, node.extent)
        return node

    def move_node(self, node_id: Hashable, coordinate: Sequence[float]) -> Node:
        self.remove_node(node_id)
        return self.add_node(node_id, coordinate)

    def clear(self):
        self._nodes.clear()
        self._index.clear()

    def _register(self, node: Node):
        self._nodes[node.node_id] = node
        if is_finite(node.coordinate):
            self._index.insert(node, node.extent)
        else:
            logger.warning(f"Node {node.node_id!r} has non-finite coordinate {node.coordinate}, not indexed")

    # ==================== QUERIES ====================

    def get(self, node_id: Hashable) -> Optional[Node]:
        return self._nodes.get(node_id)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))

    def iter_in_extent(self, extent: Extent) -> Iterator[Node]:
        """
        Yields nodes intersecting extent. The extent is read lazily, so an
        in-place shrink during iteration prunes the remaining work.
        """
        if is_enabled("snapping_spatial_index"):
            yield from self._index.query(extent)
            return

        # Linearer Scan in Einfügereihenfolge
        for node in list(self._nodes.values()):
            if is_finite(node.coordinate) and extent.contains_xy(*node.coordinate):
                yield node

    def for_each_in_extent(self, extent: Extent, visit: Callable[[Node], object]) -> object:
        """
        Calls visit for every node in extent. Stops early and returns the
        result if visit returns a truthy value.
        """
        for node in self.iter_in_extent(extent):
            result = visit(node)
            if result:
                return result
        return None

"""
NodeSnap - Spatial Indexing (Quadtree)
Provides O(log n) spatial queries for the nearest-node search.
"""

from typing import Iterator, List, Optional, Set

from config.tolerances import Tolerances
from snapping.geometry import Extent


class QuadTree:
    """
    Root wrapper for the Quadtree.
    Handles dynamic resizing and interface.
    """
    def __init__(self, bounds: Optional[Extent] = None,
                 max_items=Tolerances.QUADTREE_MAX_ITEMS,
                 max_depth=Tolerances.QUADTREE_MAX_DEPTH):
        self.max_items = max_items
        self.max_depth = max_depth
        self.root = QuadTreeNode(bounds, max_items, max_depth, depth=0) if bounds is not None else None
        self._count = 0

    @property
    def bounds(self) -> Optional[Extent]:
        return self.root.bounds if self.root is not None else None

    def __len__(self) -> int:
        return self._count

    def insert(self, item, bounds: Extent):
        """
        Insert an item into the tree.
        :param item: The indexed object (e.g. a Node)
        :param bounds: The Extent of the item (degenerate for points)
        """
        if self.root is None:
            cx, cy = bounds.center
            self.root = QuadTreeNode(
                Extent.around(cx, cy, Tolerances.QUADTREE_INITIAL_HALF_SIZE),
                self.max_items, self.max_depth, depth=0,
            )
        if not self.root.bounds.contains(bounds):
            self._grow(bounds)
        self.root.insert(item, bounds)
        self._count += 1

    def remove(self, item, bounds: Extent) -> bool:
        """
        Removes an item inserted with the given bounds.
        Returns False if the item was not found.
        """
        if self.root is None:
            return False
        removed = self.root.remove(item, bounds)
        if removed:
            self._count -= 1
        return removed

    def query(self, range_rect: Extent) -> Iterator:
        """
        Yields items whose bounds intersect with range_rect.

        range_rect is re-read at every step, so shrinking it in-place while
        consuming the iterator prunes the remaining traversal.
        """
        if self.root is None:
            return iter(())
        return self.root.query(range_rect, set())

    def clear(self, bounds: Optional[Extent] = None):
        """Resets the tree with new bounds."""
        self.root = QuadTreeNode(bounds, self.max_items, self.max_depth, depth=0) if bounds is not None else None
        self._count = 0

    def _grow(self, bounds: Extent):
        # Root verdoppeln bis das neue Item hineinpasst, dann alles neu einfügen
        old = self.root.bounds
        min_x = min(old.min_x, bounds.min_x)
        min_y = min(old.min_y, bounds.min_y)
        max_x = max(old.max_x, bounds.max_x)
        max_y = max(old.max_y, bounds.max_y)
        half = max(max_x - min_x, max_y - min_y)
        cx, cy = (min_x + max_x) / 2, (min_y + max_y) / 2

        entries = list(self.root.entries())
        self.root = QuadTreeNode(Extent.around(cx, cy, half), self.max_items, self.max_depth, depth=0)
        for it, bd in entries:
            self.root.insert(it, bd)


class QuadTreeNode:
    def __init__(self, bounds: Extent, max_items, max_depth, depth):
        self.bounds = bounds
        self.max_items = max_items
        self.max_depth = max_depth
        self.depth = depth
        # Stores tuples of (item, item_bounds)
        self.items = []
        self.children: Optional[List['QuadTreeNode']] = None

    def insert(self, item, item_bounds: Extent):
        if not self.bounds.intersects(item_bounds):
            return False

        # If we are at capacity and not at max depth, split and push down
        if len(self.items) >= self.max_items and self.depth < self.max_depth:
            if not self.children:
                self._subdivide()
                old_items = self.items
                self.items = []
                for it, bd in old_items:
                    self._insert_into_children(it, bd)
            self._insert_into_children(item, item_bounds)
            return True

        if self.children:
            self._insert_into_children(item, item_bounds)
        else:
            self.items.append((item, item_bounds))
        return True

    def _insert_into_children(self, item, item_bounds):
        # Items on a split line go into every touching child; query() dedupes.
        placed = False
        for child in self.children:
            if child.bounds.intersects(item_bounds):
                child.insert(item, item_bounds)
                placed = True

        if not placed:
            self.items.append((item, item_bounds))

    def _subdivide(self):
        x, y = self.bounds.min_x, self.bounds.min_y
        hw, hh = self.bounds.width / 2, self.bounds.height / 2
        depth = self.depth + 1

        self.children = [
            QuadTreeNode(Extent(x, y, x + hw, y + hh), self.max_items, self.max_depth, depth),
            QuadTreeNode(Extent(x + hw, y, x + 2 * hw, y + hh), self.max_items, self.max_depth, depth),
            QuadTreeNode(Extent(x, y + hh, x + hw, y + 2 * hh), self.max_items, self.max_depth, depth),
            QuadTreeNode(Extent(x + hw, y + hh, x + 2 * hw, y + 2 * hh), self.max_items, self.max_depth, depth),
        ]

    def remove(self, item, item_bounds: Extent) -> bool:
        if not self.bounds.intersects(item_bounds):
            return False

        removed = False
        for i, (it, _bd) in enumerate(self.items):
            if it is item:
                del self.items[i]
                removed = True
                break

        if self.children:
            for child in self.children:
                removed = child.remove(item, item_bounds) or removed
        return removed

    def entries(self) -> Iterator:
        seen: Set[int] = set()
        stack = [self]
        while stack:
            node = stack.pop()
            for it, bd in node.items:
                if id(it) not in seen:
                    seen.add(id(it))
                    yield it, bd
            if node.children:
                stack.extend(reversed(node.children))

    def query(self, range_rect: Extent, seen: Set[int]) -> Iterator:
        # Fast rejection
        if not self.bounds.intersects(range_rect):
            return

        for item, item_bounds in self.items:
            if id(item) in seen:
                continue
            if range_rect.intersects(item_bounds):
                seen.add(id(item))
                yield item

        if self.children:
            for child in self.children:
                yield from child.query(range_rect, seen)

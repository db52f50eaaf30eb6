"""
NodeSnap - Verbundene Knoten

Knoten, die bereits mit der aktuell gezeichneten Form verbunden sind, dürfen
nicht mehr fangen.
"""

from typing import FrozenSet, Hashable, Iterable, Set


class ConnectedNodes:
    """Exclusion provider for the nearest-node search."""

    def __init__(self, node_ids: Iterable[Hashable] = ()):
        self._ids: Set[Hashable] = set(node_ids)

    def connect(self, node_id: Hashable):
        self._ids.add(node_id)

    def disconnect(self, node_id: Hashable):
        self._ids.discard(node_id)

    def clear(self):
        self._ids.clear()

    def current_exclusions(self) -> FrozenSet[Hashable]:
        # Snapshot, damit spätere Änderungen eine laufende Suche nicht beeinflussen
        return frozenset(self._ids)

    def __contains__(self, node_id) -> bool:
        return node_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"ConnectedNodes({sorted(map(repr, self._ids))})"

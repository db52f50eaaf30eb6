"""
NodeSnap - Snapping Engine
Fang-Logik für das interaktive Digitalisieren von Knoten-Netzen.
"""

from snapping.geometry import Coordinate, Extent, NAN_COORDINATE
from snapping.node_source import Node, NodeSource, SpatialCollection
from snapping.search import find_closest_node
from snapping.state import RangeState, SnapEvent, SnapStateMachine
from snapping.classifier import SnappingInfo, classify
from snapping.events import MapPointerEvent, SnappingPointerEvent
from snapping.signals import SignalChannel, Subscription
from snapping.store import SnappingStore
from snapping.exclusions import ConnectedNodes
from snapping.view import MapView
from snapping.monitor import SnappingMonitor

__all__ = [
    'Coordinate', 'Extent', 'NAN_COORDINATE',
    'Node', 'NodeSource', 'SpatialCollection',
    'find_closest_node',
    'RangeState', 'SnapEvent', 'SnapStateMachine',
    'SnappingInfo', 'classify',
    'MapPointerEvent', 'SnappingPointerEvent',
    'SignalChannel', 'Subscription',
    'SnappingStore', 'ConnectedNodes', 'MapView',
    'SnappingMonitor',
]

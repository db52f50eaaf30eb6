"""
NodeSnap - Snapping-Monitor

Ermittelt die Snapping-Möglichkeiten der aktuellen Mausposition und meldet
Änderungen per Signal:

1. Nearest-Node-Suche (verbundene Knoten ausgeschlossen)
2. Klassifikation gegen den Fangradius und die Start/End-Prädikate
3. State-Machine mit Latches -> geordnete Event-Folge

Eine Instanz wird von mehreren Zeichen-Strategien geteilt; beim Wechsel der
Strategie muss reset() aufgerufen werden.
"""

from typing import AbstractSet, Callable, Hashable, Optional, Protocol

from loguru import logger

from config.feature_flags import is_enabled
from snapping.classifier import AtCoordinateFn, CoordinateToPixel, classify
from snapping.events import MapPointerEvent, SnappingPointerEvent
from snapping.geometry import Coordinate
from snapping.node_source import SpatialCollection
from snapping.predicates import always
from snapping.search import find_closest_node
from snapping.signals import SignalChannel, SnappingSignals, Subscription
from snapping.state import RangeState, SnapEvent, SnapStateMachine


class ExclusionProvider(Protocol):
    def current_exclusions(self) -> AbstractSet[Hashable]:
        ...


class ResolutionProvider(Protocol):
    def current_resolution(self) -> float:
        ...


class SnappingMonitor:
    """
    Facade over search, classification and state machine.

    Signals (SignalChannel attributes):
        move_at_start: fires as long as the mouse moves within range of a starting point
        move_at_end: fires as long as the mouse moves within range of an end point
        move_outside: fires as long as the mouse moves outside of any range
        snap_in_start / snap_out_start: mouse enters / leaves range of a starting point
        snap_in_end / snap_out_end: mouse enters / leaves range of an end point
    """

    def __init__(self,
                 nodes: SpatialCollection,
                 exclusions: ExclusionProvider,
                 store: ResolutionProvider,
                 coordinate_to_pixel: CoordinateToPixel):
        self._nodes = nodes
        self._exclusions = exclusions
        self._store = store
        self._to_pixel = coordinate_to_pixel
        self._machine = SnapStateMachine()
        self._signals = SnappingSignals()

        self.move_at_start: SignalChannel = self._signals.channel(SnapEvent.MOVE_AT_START)
        self.move_at_end: SignalChannel = self._signals.channel(SnapEvent.MOVE_AT_END)
        self.move_outside: SignalChannel = self._signals.channel(SnapEvent.MOVE_OUTSIDE)
        self.snap_in_start: SignalChannel = self._signals.channel(SnapEvent.SNAP_IN_START)
        self.snap_out_start: SignalChannel = self._signals.channel(SnapEvent.SNAP_OUT_START)
        self.snap_in_end: SignalChannel = self._signals.channel(SnapEvent.SNAP_IN_END)
        self.snap_out_end: SignalChannel = self._signals.channel(SnapEvent.SNAP_OUT_END)

    @property
    def range_state(self) -> RangeState:
        """Copy of the current latches (diagnostics only)"""
        return self._machine.state.copy()

    def subscribe(self, event: SnapEvent, handler: Callable) -> Subscription:
        return self._signals.channel(event).subscribe(handler)

    def reset(self):
        """
        Reset the monitor to its initial state without emitting exit signals,
        so a newly activated strategy never starts with the latches of the
        previous one.
        """
        self._machine.reset()
        if is_enabled("snapping_debug"):
            logger.debug("[SNAP] reset")

    def update(self,
               event: MapPointerEvent,
               at_start_fn: AtCoordinateFn,
               at_end_fn: Optional[AtCoordinateFn] = None) -> Coordinate:
        """
        Pass pointer move events into the monitor for analysis.

        :param event: pointer event of the host map surface
        :param at_start_fn: whether a node coordinate is a valid starting point
        :param at_end_fn: whether a node coordinate is a valid end point, defaults to always true
        :return: the snapped coordinate (node coordinate or raw mouse coordinate)
        """
        if at_end_fn is None:
            at_end_fn = always

        # Alle Kollaborateure vor der State-Mutation befragen: ein Fehler
        # lässt die Latches unverändert.
        excluded = self._exclusions.current_exclusions()
        resolution = self._store.current_resolution()
        closest = find_closest_node(event.coordinate, self._nodes, excluded)
        info = classify(event.coordinate, closest, resolution, self._to_pixel,
                        at_start_fn, at_end_fn, self._machine.state)

        events = self._machine.advance(info)

        if is_enabled("snapping_debug"):
            node_id = closest.node_id if closest is not None else None
            logger.debug(f"[SNAP] node={node_id!r} info={info} events={[e.value for e in events]}")

        payload = SnappingPointerEvent.merge(event, info)
        for snap_event in events:
            self._signals.publish(snap_event, payload)

        return info.snapped_coordinate

    def __repr__(self) -> str:
        state = self._machine.state
        return (f"SnappingMonitor(in_start_range={state.in_start_range}, "
                f"in_end_range={state.in_end_range})")

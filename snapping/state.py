"""
NodeSnap - Snap-State-Machine

Zwei unabhängige Latches (Start-Bereich, End-Bereich) machen aus dem
kontinuierlichen Distanz-Signal eine saubere Folge von Ein-/Austritts- und
Move-Events:

- Austritte werden vor Eintritten gemeldet
- Eintritte vor genau einem Move-Event
- Ein-/Austritte sind flankengetriggert, Move-Events pegelgetriggert
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class SnapEvent(Enum):
    """Signale des Snapping-Monitors"""
    MOVE_AT_START = "move_at_start"
    MOVE_AT_END = "move_at_end"
    MOVE_OUTSIDE = "move_outside"
    SNAP_IN_START = "snap_in_start"
    SNAP_OUT_START = "snap_out_start"
    SNAP_IN_END = "snap_in_end"
    SNAP_OUT_END = "snap_out_end"


MOVE_EVENTS = frozenset({SnapEvent.MOVE_AT_START, SnapEvent.MOVE_AT_END, SnapEvent.MOVE_OUTSIDE})
ENTRY_EVENTS = frozenset({SnapEvent.SNAP_IN_START, SnapEvent.SNAP_IN_END})
EXIT_EVENTS = frozenset({SnapEvent.SNAP_OUT_START, SnapEvent.SNAP_OUT_END})


@dataclass
class RangeState:
    """Latch state of one drawing session"""
    in_start_range: bool = False
    in_end_range: bool = False

    def copy(self) -> 'RangeState':
        return RangeState(self.in_start_range, self.in_end_range)


class SnapStateMachine:
    """
    Owns a RangeState and converts successive SnappingInfo values into an
    ordered list of SnapEvents.
    """

    def __init__(self):
        self._state = RangeState()

    @property
    def state(self) -> RangeState:
        return self._state

    def reset(self):
        """Clears both latches without producing exit events."""
        self._state = RangeState()

    def advance(self, info) -> List[SnapEvent]:
        """
        Determine the new state from the given SnappingInfo.

        At most one exit event is produced; start is checked first, mirroring
        the start precedence of the classification.
        """
        state = self._state
        events: List[SnapEvent] = []

        if state.in_start_range and not info.start:
            events.append(SnapEvent.SNAP_OUT_START)
            state.in_start_range = False
        elif state.in_end_range and not info.end:
            events.append(SnapEvent.SNAP_OUT_END)
            state.in_end_range = False

        if info.start:
            if not state.in_start_range:
                events.append(SnapEvent.SNAP_IN_START)
                state.in_start_range = True
            events.append(SnapEvent.MOVE_AT_START)
        elif info.end:
            if not state.in_end_range:
                events.append(SnapEvent.SNAP_IN_END)
                state.in_end_range = True
            events.append(SnapEvent.MOVE_AT_END)
        else:
            events.append(SnapEvent.MOVE_OUTSIDE)

        return events

    def __repr__(self) -> str:
        return (f"SnapStateMachine(in_start_range={self._state.in_start_range}, "
                f"in_end_range={self._state.in_end_range})")

"""
NodeSnap - Pointer-Events
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from snapping.classifier import SnappingInfo
from snapping.geometry import Coordinate


@dataclass
class MapPointerEvent:
    """Pointer event delivered by the host map surface."""
    type: str = "pointermove"
    coordinate: Optional[Sequence[float]] = None  # Karteneinheiten
    pixel: Optional[Sequence[float]] = None
    original_event: Any = None  # z.B. QMouseEvent des Hosts


@dataclass(frozen=True)
class SnappingPointerEvent:
    """A MapPointerEvent enriched with the SnappingInfo that triggered a signal."""
    type: str
    coordinate: Optional[Sequence[float]]
    pixel: Optional[Sequence[float]]
    original_event: Any
    mouse_coordinate: Coordinate
    snapped_coordinate: Coordinate
    start: bool
    end: bool

    @classmethod
    def merge(cls, event: MapPointerEvent, info: SnappingInfo) -> 'SnappingPointerEvent':
        return cls(
            type=event.type,
            coordinate=event.coordinate,
            pixel=event.pixel,
            original_event=event.original_event,
            mouse_coordinate=info.mouse_coordinate,
            snapped_coordinate=info.snapped_coordinate,
            start=info.start,
            end=info.end,
        )

"""
NodeSnap - Snapping-Store

Hält den Fangradius (Resolution) in Pixel. Der Monitor liest ihn bei jedem
update() neu, damit Änderungen aus dem UI sofort greifen.
"""

import math

from loguru import logger
from PySide6.QtCore import QObject, Signal

from config.tolerances import Tolerances, snap_resolution


class SnappingStore(QObject):
    """
    Signals:
        resolution_changed: Emittiert wenn sich der Fangradius ändert
    """

    resolution_changed = Signal(float)

    def __init__(self, resolution: float = Tolerances.SNAP_RESOLUTION_PX):
        super().__init__()
        self._resolution = self._validated(resolution)

    @staticmethod
    def _validated(value) -> float:
        px = float(value)
        if not math.isfinite(px) or px < 0.0:
            raise ValueError(f"Snapping resolution must be a finite, non-negative pixel distance, got {value!r}")
        clamped = max(Tolerances.SNAP_RESOLUTION_PX_MIN, min(Tolerances.SNAP_RESOLUTION_PX_MAX, px))
        if clamped != px:
            logger.warning(f"Snapping resolution {px}px clamped to {clamped}px")
        return clamped

    @property
    def resolution(self) -> float:
        """Fangradius in Pixel"""
        return self._resolution

    @resolution.setter
    def resolution(self, value: float):
        px = self._validated(value)
        if px != self._resolution:
            self._resolution = px
            self.resolution_changed.emit(px)

    def current_resolution(self) -> float:
        """Fangradius in Pixel, wie ihn der Monitor pro update() abfragt"""
        return self._resolution

    def reset(self):
        """Setzt den Fangradius auf den Default zurück"""
        self.resolution = snap_resolution()

    def __repr__(self) -> str:
        return f"SnappingStore(resolution={self._resolution}px)"

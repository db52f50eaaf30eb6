"""
NodeSnap - Kartenansicht

Projektion zwischen Karteneinheiten und Bildschirm-Pixeln.
Pixel-y wächst nach unten, Karten-y nach oben.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from snapping.geometry import Coordinate, as_coordinate


@dataclass
class MapView:
    """View state of the host map surface."""
    center: Coordinate = (0.0, 0.0)
    resolution: float = 1.0  # Karteneinheiten pro Pixel
    size: Tuple[float, float] = (800.0, 600.0)  # Pixel
    rotation: float = 0.0  # Radians

    def __post_init__(self):
        self.center = as_coordinate(self.center)
        self.set_resolution(self.resolution)

    def set_resolution(self, value: float):
        res = float(value)
        if not math.isfinite(res) or res <= 0.0:
            raise ValueError(f"Map resolution must be positive and finite, got {value!r}")
        self.resolution = res

    def coordinate_to_pixel(self, coordinate: Sequence[float]) -> Coordinate:
        """Non-finite coordinates yield a non-finite pixel."""
        x, y = as_coordinate(coordinate)
        dx = (x - self.center[0]) / self.resolution
        dy = (y - self.center[1]) / self.resolution
        cos_r, sin_r = math.cos(self.rotation), math.sin(self.rotation)
        rx = dx * cos_r + dy * sin_r
        ry = -dx * sin_r + dy * cos_r
        return (self.size[0] / 2 + rx, self.size[1] / 2 - ry)

    def pixel_to_coordinate(self, pixel: Sequence[float]) -> Coordinate:
        px, py = as_coordinate(pixel)
        rx = px - self.size[0] / 2
        ry = self.size[1] / 2 - py
        cos_r, sin_r = math.cos(self.rotation), math.sin(self.rotation)
        dx = rx * cos_r - ry * sin_r
        dy = rx * sin_r + ry * cos_r
        return (self.center[0] + dx * self.resolution, self.center[1] + dy * self.resolution)

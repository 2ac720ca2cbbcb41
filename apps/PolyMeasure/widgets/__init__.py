"""Widgets package for PolyMeasure."""

from .map_canvas import MapCanvas
from .control_panel import ControlPanel

__all__ = [
    "MapCanvas",
    "ControlPanel",
]

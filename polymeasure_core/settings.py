"""Interaction and measurement constants."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class InteractionSettings:
    """
    Tunable constants shared by the state machine, capabilities and hover probe.

    Pixel tolerances are radii; ``hover_tolerance_sq`` is the squared form the
    hover search compares against.
    """
    hover_tolerance_px: float = 6.0
    select_hit_tolerance_px: float = 5.0
    excluded_append_pointer_types: Tuple[str, ...] = ("touch",)
    # Web Mercator sphere, so projected and geodesic lengths agree at the equator
    sphere_radius_m: float = 6378137.0
    default_distance_unit: str = "km"
    default_angle_unit: str = "deg"

    @property
    def hover_tolerance_sq(self) -> float:
        return self.hover_tolerance_px * self.hover_tolerance_px


DEFAULT_SETTINGS = InteractionSettings()

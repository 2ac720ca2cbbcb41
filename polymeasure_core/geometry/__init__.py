"""Geometry module for PolyMeasure core."""

from .measurement import (
    Measurement,
    bearing,
    interior_angle,
    last_segment_measurement,
    destination_point,
    segment_length,
)
from .projection import to_lonlat, from_lonlat
from .units import DistanceUnit, AngleUnit

__all__ = [
    "Measurement",
    "bearing",
    "interior_angle",
    "last_segment_measurement",
    "destination_point",
    "segment_length",
    "to_lonlat",
    "from_lonlat",
    "DistanceUnit",
    "AngleUnit",
]

"""Display strings for measurements."""

from __future__ import annotations

import math
from typing import Optional

from polymeasure_core.geometry.measurement import Measurement
from polymeasure_core.geometry.units import AngleUnit, DistanceUnit, from_degrees, from_meters

NOT_AVAILABLE = "N/A"


def _missing(value: Optional[float]) -> bool:
    return value is None or math.isnan(value)


def format_distance(measurement: Measurement, unit: DistanceUnit) -> str:
    if not measurement.valid or _missing(measurement.distance_meters):
        return NOT_AVAILABLE
    return f"{from_meters(measurement.distance_meters, unit):.2f} {DistanceUnit(unit).value}"


def format_azimuth(measurement: Measurement, unit: AngleUnit) -> str:
    if not measurement.valid or _missing(measurement.azimuth_degrees):
        return NOT_AVAILABLE
    if AngleUnit(unit) is AngleUnit.DEGREES:
        return f"{measurement.azimuth_degrees:.2f}°"
    return f"{from_degrees(measurement.azimuth_degrees, unit):.4f} rad"


def format_hover_angle(angle: Optional[float], unit: AngleUnit) -> str:
    if _missing(angle):
        return NOT_AVAILABLE
    if AngleUnit(unit) is AngleUnit.DEGREES:
        return f"{angle:.1f}°"
    return f"{from_degrees(angle, unit):.4f} rad"


def input_distance_text(measurement: Measurement, unit: DistanceUnit) -> str:
    """Numeric field text for the segment length; empty unless positive."""
    if not measurement.valid or measurement.distance_meters <= 0.0:
        return ""
    return f"{from_meters(measurement.distance_meters, unit):.2f}"


def input_angle_text(measurement: Measurement, unit: AngleUnit) -> str:
    if not measurement.valid:
        return ""
    if AngleUnit(unit) is AngleUnit.DEGREES:
        return f"{measurement.azimuth_degrees:.2f}"
    return f"{from_degrees(measurement.azimuth_degrees, unit):.4f}"

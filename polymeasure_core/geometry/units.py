"""
Distance and angle unit conversions.

Internally all distances are metres and all angles are degrees. The UI works
in kilometres or miles, and degrees or radians.
"""

from enum import Enum
import math
from typing import Union

from ..errors import InvalidNumericInputError

METERS_TO_KM = 0.001
METERS_TO_MILES = 0.000621371
DEGREES_TO_RADIANS = math.pi / 180.0
RADIANS_TO_DEGREES = 180.0 / math.pi


class DistanceUnit(str, Enum):
    """Display units for distances."""
    KILOMETERS = "km"
    MILES = "mi"

    def toggled(self) -> "DistanceUnit":
        return DistanceUnit.MILES if self is DistanceUnit.KILOMETERS else DistanceUnit.KILOMETERS


class AngleUnit(str, Enum):
    """Display units for angles."""
    DEGREES = "deg"
    RADIANS = "rad"

    def toggled(self) -> "AngleUnit":
        return AngleUnit.RADIANS if self is AngleUnit.DEGREES else AngleUnit.DEGREES


def _distance_unit(unit: Union[str, DistanceUnit]) -> DistanceUnit:
    try:
        return DistanceUnit(unit)
    except ValueError as exc:
        raise InvalidNumericInputError(f"Unknown distance unit: {unit!r}") from exc


def _angle_unit(unit: Union[str, AngleUnit]) -> AngleUnit:
    try:
        return AngleUnit(unit)
    except ValueError as exc:
        raise InvalidNumericInputError(f"Unknown angle unit: {unit!r}") from exc


def meters_factor(unit: Union[str, DistanceUnit]) -> float:
    """Return the multiplier converting metres into ``unit``."""
    return METERS_TO_KM if _distance_unit(unit) is DistanceUnit.KILOMETERS else METERS_TO_MILES


def to_meters(value: float, unit: Union[str, DistanceUnit]) -> float:
    return value / meters_factor(unit)


def from_meters(meters: float, unit: Union[str, DistanceUnit]) -> float:
    return meters * meters_factor(unit)


def to_degrees(value: float, unit: Union[str, AngleUnit]) -> float:
    if _angle_unit(unit) is AngleUnit.DEGREES:
        return value
    return value * RADIANS_TO_DEGREES


def from_degrees(degrees: float, unit: Union[str, AngleUnit]) -> float:
    if _angle_unit(unit) is AngleUnit.DEGREES:
        return degrees
    return degrees * DEGREES_TO_RADIANS


def normalize_degrees(degrees: float) -> float:
    """Wrap an angle into [0, 360)."""
    wrapped = math.fmod(degrees, 360.0)
    if wrapped < 0.0:
        wrapped += 360.0
    # fmod of a tiny negative value can round up to exactly 360
    return 0.0 if wrapped >= 360.0 else wrapped


def parse_number(value) -> float:
    """
    Parse a numeric field value.

    Accepts numbers or strings (surrounding whitespace allowed). Raises
    InvalidNumericInputError for anything that is not a finite number.
    """
    if isinstance(value, bool):
        raise InvalidNumericInputError(f"Not a number: {value!r}")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError) as exc:
        raise InvalidNumericInputError(f"Not a number: {value!r}") from exc
    if not math.isfinite(number):
        raise InvalidNumericInputError(f"Not a finite number: {value!r}")
    return number

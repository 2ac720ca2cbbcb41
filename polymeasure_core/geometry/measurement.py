"""
Segment measurement on the map plane.

Definitions:
- bearing/azimuth: clockwise angle from the plane's "up" (north) axis,
  atan2(dx, dy), normalized into [0, 360)
- interior angle: turn at a vertex between its two adjacent segments, folded
  into [0, 180]
- distance: geodesic length on a sphere of radius ``sphere_radius_m`` between
  the lon/lat of the two map coordinates

All functions are pure. Malformed input never raises from the measuring
functions; it yields NaN (angles) or an indeterminate Measurement.
"""

from dataclasses import dataclass
from functools import lru_cache
import math
from numbers import Real
from typing import Sequence, Tuple

import numpy as np
from pyproj import Geod

from ..errors import InvalidNumericInputError, MalformedGeometryError
from ..settings import DEFAULT_SETTINGS
from .projection import from_lonlat, to_lonlat
from .units import normalize_degrees

Coordinate = Tuple[float, float]
Line = Sequence[Coordinate]


@dataclass(frozen=True)
class Measurement:
    """
    Distance and azimuth of the last segment of a line.

    ``valid`` is False for an indeterminate measurement (fewer than two usable
    coordinates); such a measurement reports zero for both values.
    """
    distance_meters: float = 0.0
    azimuth_degrees: float = 0.0
    valid: bool = False

    @classmethod
    def indeterminate(cls) -> "Measurement":
        return cls(0.0, 0.0, False)


@lru_cache(maxsize=4)
def _sphere(radius_m: float) -> Geod:
    return Geod(a=radius_m, f=0.0)


def is_valid_coordinate(coord) -> bool:
    """True for a sequence of at least two finite real numbers."""
    if coord is None or isinstance(coord, (str, bytes)):
        return False
    try:
        if len(coord) < 2:
            return False
        x, y = coord[0], coord[1]
    except (TypeError, KeyError, IndexError):
        return False
    for value in (x, y):
        if isinstance(value, bool) or not isinstance(value, (Real, np.number)):
            return False
        if not math.isfinite(float(value)):
            return False
    return True


def as_coordinate(coord) -> Coordinate:
    """Return ``coord`` as a plain (x, y) float tuple, or raise MalformedGeometryError."""
    if not is_valid_coordinate(coord):
        raise MalformedGeometryError(f"Malformed coordinate: {coord!r}")
    return float(coord[0]), float(coord[1])


def bearing(a, b) -> float:
    """Azimuth from ``a`` to ``b`` in degrees [0, 360), or NaN for malformed input."""
    if not (is_valid_coordinate(a) and is_valid_coordinate(b)):
        return math.nan
    dx = float(b[0]) - float(a[0])
    dy = float(b[1]) - float(a[1])
    azimuth = math.degrees(math.atan2(dx, dy))
    if azimuth < 0.0:
        azimuth += 360.0
    return 0.0 if azimuth >= 360.0 else azimuth


def interior_angle(prev, vertex, nxt) -> float:
    """Angle at ``vertex`` between segments to ``prev`` and ``nxt``, in [0, 180]."""
    to_prev = bearing(vertex, prev)
    to_next = bearing(vertex, nxt)
    if math.isnan(to_prev) or math.isnan(to_next):
        return math.nan
    diff = abs(to_next - to_prev) % 360.0
    return min(diff, 360.0 - diff)


def segment_length(a, b, radius_m: float = DEFAULT_SETTINGS.sphere_radius_m) -> float:
    """Geodesic length in metres between two map coordinates."""
    lon1, lat1 = to_lonlat(as_coordinate(a))
    lon2, lat2 = to_lonlat(as_coordinate(b))
    _, _, distance = _sphere(radius_m).inv(lon1, lat1, lon2, lat2)
    return float(distance)


def last_segment_measurement(
    line, radius_m: float = DEFAULT_SETTINGS.sphere_radius_m
) -> Measurement:
    """
    Measure the final segment of ``line``.

    Only the last two coordinates are read; anything earlier in the line has
    no influence on the result.
    """
    try:
        if line is None or len(line) < 2:
            return Measurement.indeterminate()
        second_last, last = line[-2], line[-1]
    except (TypeError, KeyError, IndexError):
        return Measurement.indeterminate()

    azimuth = bearing(second_last, last)
    if math.isnan(azimuth):
        return Measurement.indeterminate()
    try:
        distance = segment_length(second_last, last, radius_m)
    except (MalformedGeometryError, ValueError):
        return Measurement.indeterminate()
    if math.isnan(distance):
        return Measurement.indeterminate()
    return Measurement(distance, azimuth, True)


def destination_point(
    origin,
    distance_meters: float,
    bearing_degrees: float,
    radius_m: float = DEFAULT_SETTINGS.sphere_radius_m,
) -> Coordinate:
    """
    Project ``origin`` by ``distance_meters`` along ``bearing_degrees``.

    Raises:
        MalformedGeometryError: origin is not a usable coordinate
        InvalidNumericInputError: distance is not positive or values are not finite
        ProjectionError: origin or destination cannot be projected
    """
    start = as_coordinate(origin)
    if not (math.isfinite(distance_meters) and math.isfinite(bearing_degrees)):
        raise InvalidNumericInputError("Distance and bearing must be finite numbers")
    if distance_meters <= 0.0:
        raise InvalidNumericInputError(f"Distance must be positive, got {distance_meters}")

    azimuth = normalize_degrees(bearing_degrees)
    lon, lat = to_lonlat(start)
    end_lon, end_lat, _ = _sphere(radius_m).fwd(lon, lat, azimuth, distance_meters)
    return from_lonlat((end_lon, end_lat))


def copy_line(line) -> list:
    """Deep copy of a line as a list of (x, y) float tuples."""
    return [as_coordinate(coord) for coord in line]


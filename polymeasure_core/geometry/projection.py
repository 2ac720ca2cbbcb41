"""
Map plane <-> geographic coordinate conversion.

Map coordinates are Web Mercator metres (EPSG:3857); geographic coordinates
are (longitude, latitude) in degrees (EPSG:4326), always x-first.
"""

from functools import lru_cache
import math
from typing import Tuple

from pyproj import Transformer, ProjError

from ..errors import ProjectionError

MAP_CRS = "EPSG:3857"
GEOGRAPHIC_CRS = "EPSG:4326"


@lru_cache(maxsize=1)
def _to_lonlat_transformer() -> Transformer:
    return Transformer.from_crs(MAP_CRS, GEOGRAPHIC_CRS, always_xy=True)


@lru_cache(maxsize=1)
def _from_lonlat_transformer() -> Transformer:
    return Transformer.from_crs(GEOGRAPHIC_CRS, MAP_CRS, always_xy=True)


def _checked(pair: Tuple[float, float], source: Tuple[float, float]) -> Tuple[float, float]:
    if not (math.isfinite(pair[0]) and math.isfinite(pair[1])):
        raise ProjectionError(f"Coordinate {source!r} has no finite projection")
    return float(pair[0]), float(pair[1])


def to_lonlat(coord) -> Tuple[float, float]:
    """Convert a map coordinate to (lon, lat) degrees."""
    try:
        return _checked(_to_lonlat_transformer().transform(coord[0], coord[1]), coord)
    except ProjError as exc:
        raise ProjectionError(f"Cannot project {coord!r} to lon/lat: {exc}") from exc


def from_lonlat(lonlat) -> Tuple[float, float]:
    """Convert (lon, lat) degrees to a map coordinate."""
    try:
        return _checked(_from_lonlat_transformer().transform(lonlat[0], lonlat[1]), lonlat)
    except ProjError as exc:
        raise ProjectionError(f"Cannot project {lonlat!r} to map plane: {exc}") from exc

"""Hovered vertex angle search."""

import math
from typing import Callable, Iterable, Optional, Sequence

import numpy as np

from ..geometry.measurement import Coordinate, interior_angle


def find_hovered_angle(
    lines: Iterable[Sequence[Coordinate]],
    pointer_pixel,
    to_pixel: Callable[[Coordinate], Optional[Sequence[float]]],
    tolerance_sq: float,
) -> Optional[float]:
    """
    Interior angle at the first interior vertex within tolerance of the pointer.

    Lines and vertices are scanned in order and the first match wins.
    Endpoints are never candidates. Vertices that cannot be projected to a
    pixel are skipped. Returns None when nothing matches.
    """
    px, py = float(pointer_pixel[0]), float(pointer_pixel[1])
    for coords in lines:
        if len(coords) < 3:
            continue
        interior = coords[1:-1]
        pixels = np.full((len(interior), 2), np.nan)
        for row, coord in enumerate(interior):
            pixel = to_pixel(coord)
            if pixel is not None:
                pixels[row] = pixel[0], pixel[1]
        dist_sq = (pixels[:, 0] - px) ** 2 + (pixels[:, 1] - py) ** 2
        # NaN rows (unprojectable) compare False
        matches = np.flatnonzero(dist_sq <= tolerance_sq)
        if matches.size == 0:
            continue
        i = int(matches[0]) + 1
        angle = interior_angle(coords[i - 1], coords[i], coords[i + 1])
        return None if math.isnan(angle) else angle
    return None

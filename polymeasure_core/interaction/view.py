"""
Map view protocol.

The rendering surface knows how map coordinates land on screen pixels. The
interaction code only ever asks it these questions.
"""

from typing import Callable, Iterable, List, Optional, Protocol, Tuple

from ..model.feature import Feature

Pixel = Tuple[float, float]
Projector = Callable[[object], Optional[Pixel]]


class MapView(Protocol):
    def pixel_from_coordinate(self, coord) -> Optional[Pixel]:
        """Pixel of ``coord`` inside the viewport, or None when off-screen."""

    def coordinate_from_pixel(self, pixel) -> Optional[Tuple[float, float]]:
        """Map coordinate under ``pixel``, or None."""

    def features_at_pixel(self, pixel, tolerance_px: float) -> List[Feature]:
        """Features whose geometry passes within ``tolerance_px`` of ``pixel``."""


def distance_to_segment_sq(point: Pixel, start: Pixel, end: Pixel) -> float:
    """Squared pixel distance from ``point`` to the segment ``start``-``end``."""
    sx, sy = start
    ex, ey = end
    px, py = point
    dx, dy = ex - sx, ey - sy
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        t = 0.0
    else:
        t = max(0.0, min(1.0, ((px - sx) * dx + (py - sy) * dy) / length_sq))
    cx, cy = sx + t * dx, sy + t * dy
    return (px - cx) ** 2 + (py - cy) ** 2


def hit_test(
    project: Projector, features: Iterable[Feature], pixel: Pixel, tolerance_px: float
) -> List[Feature]:
    """
    Features (in iteration order) whose polyline passes within tolerance of ``pixel``.

    ``project`` must not clip to the viewport: a segment crossing the screen
    with both endpoints off-screen is still hit.
    """
    tolerance_sq = tolerance_px * tolerance_px
    hits = []
    for feature in features:
        pixels = [project(coord) for coord in feature.coordinates]
        for start, end in zip(pixels, pixels[1:]):
            if start is None or end is None:
                continue
            if distance_to_segment_sq(pixel, start, end) <= tolerance_sq:
                hits.append(feature)
                break
    return hits

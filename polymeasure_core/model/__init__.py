"""Data model for PolyMeasure core."""

from .feature import Feature, MIN_LINE_POINTS, validate_line

__all__ = [
    "Feature",
    "MIN_LINE_POINTS",
    "validate_line",
]

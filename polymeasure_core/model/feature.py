"""
Line features.

A Feature is an open polyline with an opaque identity. Two features compare
equal only if they are the same object, so selection and style lookups are
never confused by two lines that happen to share coordinates.
"""

from dataclasses import dataclass, field
import itertools
from typing import List, Tuple

from ..errors import MalformedGeometryError
from ..geometry.measurement import Coordinate, as_coordinate

MIN_LINE_POINTS = 2

_feature_ids = itertools.count(1)


def validate_line(line) -> List[Coordinate]:
    """
    Return ``line`` as a fresh list of float tuples.

    Raises MalformedGeometryError when the line is missing, holds a
    malformed coordinate, or has fewer than two points.
    """
    if line is None:
        raise MalformedGeometryError("Line is missing")
    try:
        coords = [as_coordinate(coord) for coord in line]
    except TypeError as exc:
        raise MalformedGeometryError(f"Line is not a coordinate sequence: {line!r}") from exc
    if len(coords) < MIN_LINE_POINTS:
        raise MalformedGeometryError(
            f"A line needs at least {MIN_LINE_POINTS} points, got {len(coords)}"
        )
    return coords


@dataclass(eq=False)
class Feature:
    """A finalized polyline."""
    _coordinates: List[Coordinate]
    feature_id: int = field(default_factory=lambda: next(_feature_ids))

    @classmethod
    def from_line(cls, line) -> "Feature":
        return cls(validate_line(line))

    @property
    def coordinates(self) -> List[Coordinate]:
        """Copy of the line; mutate through ``set_coordinates``."""
        return list(self._coordinates)

    def set_coordinates(self, line) -> None:
        self._coordinates = validate_line(line)

    def __len__(self) -> int:
        return len(self._coordinates)

    def __repr__(self) -> str:
        return f"Feature(id={self.feature_id}, points={len(self._coordinates)})"

    def as_tuple(self) -> Tuple[Coordinate, ...]:
        return tuple(self._coordinates)

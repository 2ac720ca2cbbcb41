"""Constrained drawing that extends an existing line."""

from __future__ import annotations

from typing import List, Optional, Sequence

from PySide6.QtCore import QObject

from polymeasure_core.errors import MalformedGeometryError
from polymeasure_core.geometry.measurement import copy_line

from .base import CapabilityKind
from .line_draw import Coordinate, LineDrawCapability


class AppendDrawCapability(LineDrawCapability):
    """
    Draws new trailing vertices for an existing line.

    The sketch is seeded with ``seed`` (by default the last coordinate of
    ``backup``) as its first vertex, so the user never has to click the
    existing endpoint. Every emitted geometry is ``backup + sketch[1:]``:
    the full extended line.
    """

    kind = CapabilityKind.APPEND_DRAW

    def __init__(
        self,
        backup: Sequence[Sequence[float]],
        seed: Optional[Sequence[float]] = None,
        excluded_pointer_types: Sequence[str] = ("touch",),
        parent: QObject | None = None,
    ) -> None:
        super().__init__(excluded_pointer_types, parent)
        self._backup: tuple = tuple(copy_line(backup))
        if not self._backup:
            raise MalformedGeometryError("Cannot append to an empty line")
        start = self._backup[-1] if seed is None else (float(seed[0]), float(seed[1]))
        self._vertices = [start]

    @property
    def backup(self) -> tuple:
        return self._backup

    def new_points(self) -> List[Coordinate]:
        """Clicked vertices after the seed."""
        return list(self._vertices[1:])

    def committed_coordinates(self) -> List[Coordinate]:
        return list(self._backup) + self.new_points()

    def sketch_coordinates(self) -> List[Coordinate]:
        live = list(self._vertices)
        if self._cursor is not None:
            live.append(self._cursor)
        return list(self._backup) + live[1:]

    def overlay_coordinates(self) -> List[Coordinate]:
        live = list(self._vertices)
        if self._cursor is not None:
            live.append(self._cursor)
        return live

    def finish(self) -> Optional[List[Coordinate]]:
        """Complete the append; the manager decides whether anything was added."""
        coords = self.committed_coordinates()
        self._clear_sketch()
        self.sketch_finished.emit(coords)
        return coords

    def abort(self) -> None:
        self._clear_sketch()
        self.sketch_aborted.emit()

    def _clear_sketch(self) -> None:
        self._vertices = self._vertices[:1]
        self._cursor = None
        self._press_pixel = None
        self.overlay_changed.emit()

"""Free line drawing."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from PySide6.QtCore import QObject, Signal

from polymeasure_core.interaction.events import PointerAction, PointerEvent

from .base import Capability, CapabilityKind

Coordinate = Tuple[float, float]


class LineDrawCapability(Capability):
    """
    Click-to-add polyline sketching.

    A left click (press and release without moving more than
    ``CLICK_TOLERANCE`` pixels) adds a vertex. Moving the pointer after the
    first vertex drags a rubber-band vertex so the live segment can be
    measured. A double click or ``finish()`` completes the sketch.

    Signals:
        sketch_started: first vertex placed (coordinates)
        sketch_changed: sketch geometry changed (coordinates)
        sketch_finished: sketch completed (committed coordinates)
        sketch_aborted: sketch discarded
    """

    kind = CapabilityKind.DRAW

    sketch_started = Signal(object)
    sketch_changed = Signal(object)
    sketch_finished = Signal(object)
    sketch_aborted = Signal()

    CLICK_TOLERANCE = 4  # pixels between press and release for a click

    def __init__(
        self,
        excluded_pointer_types: Sequence[str] = (),
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._excluded_pointer_types = tuple(excluded_pointer_types)
        self._vertices: List[Coordinate] = []
        self._cursor: Optional[Coordinate] = None
        self._press_pixel: Optional[Tuple[float, float]] = None

    # Geometry
    def has_started(self) -> bool:
        return bool(self._vertices)

    def vertices(self) -> List[Coordinate]:
        """Clicked vertices, without the rubber-band vertex."""
        return list(self._vertices)

    def committed_coordinates(self) -> List[Coordinate]:
        """The geometry that ``finish()`` would produce."""
        return self.vertices()

    def sketch_coordinates(self) -> List[Coordinate]:
        """Live geometry including the rubber-band vertex."""
        coords = self.vertices()
        if coords and self._cursor is not None:
            coords.append(self._cursor)
        return coords

    def overlay_coordinates(self) -> List[Coordinate]:
        return self.sketch_coordinates()

    # Programmatic control
    def add_vertex(self, coordinate: Sequence[float]) -> None:
        vertex = (float(coordinate[0]), float(coordinate[1]))
        first = not self._vertices
        self._vertices.append(vertex)
        self._cursor = None
        if first:
            self.sketch_started.emit(self.sketch_coordinates())
        self._emit_changed()

    def move_cursor(self, coordinate: Sequence[float]) -> None:
        if not self._vertices:
            return
        self._cursor = (float(coordinate[0]), float(coordinate[1]))
        self._emit_changed()

    def finish(self) -> Optional[List[Coordinate]]:
        """
        Complete the sketch. Returns the committed coordinates, or None when
        there were too few points and the sketch was aborted instead.
        """
        coords = self.committed_coordinates()
        if len(coords) < 2:
            self.abort()
            return None
        self._reset()
        self.sketch_finished.emit(coords)
        return coords

    def abort(self) -> None:
        self._reset()
        self.sketch_aborted.emit()

    def on_detached(self) -> None:
        self._reset()
        super().on_detached()

    def _reset(self) -> None:
        self._vertices = []
        self._cursor = None
        self._press_pixel = None
        self.overlay_changed.emit()

    def _emit_changed(self) -> None:
        self.sketch_changed.emit(self.sketch_coordinates())
        self.overlay_changed.emit()

    # Pointer handling
    def accepts(self, event: PointerEvent) -> bool:
        return event.pointer_type not in self._excluded_pointer_types

    def handle_event(self, event: PointerEvent) -> bool:
        if not self.accepts(event):
            return False

        if event.action is PointerAction.MOVE:
            if event.dragging:
                return False
            self.move_cursor(event.coordinate)
            return False

        if event.button != 1:
            return False

        if event.action is PointerAction.DOUBLE_CLICK:
            self._press_pixel = None
            self.finish()
            return True

        if event.action is PointerAction.PRESS:
            self._press_pixel = event.pixel
            return True

        if event.action is PointerAction.RELEASE:
            press = self._press_pixel
            self._press_pixel = None
            if press is None:
                return False
            moved = math.hypot(event.pixel[0] - press[0], event.pixel[1] - press[1])
            if moved > self.CLICK_TOLERANCE:
                return False
            self.add_vertex(event.coordinate)
            return True

        return False

"""Feature selection and vertex dragging."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from polymeasure_core.errors import MalformedGeometryError
from polymeasure_core.interaction.events import PointerAction, PointerEvent
from polymeasure_core.model.feature import Feature

from ..state.feature_registry import FeatureRegistry
from .base import Capability, CapabilityKind

logger = logging.getLogger(__name__)


class SelectModifyCapability(Capability):
    """
    Click to select a feature, drag a vertex of the selected feature to move it.

    Vertices are never inserted. Dragging writes through the registry so the
    feature is re-rendered live.

    Signals:
        selection_changed: clicked feature, or None for a click on empty map
        modify_finished: (feature, coordinates) when a vertex drag ends
    """

    kind = CapabilityKind.SELECT_MODIFY

    selection_changed = Signal(object)
    modify_finished = Signal(object, object)

    CLICK_TOLERANCE = 4

    def __init__(
        self,
        registry: FeatureRegistry,
        hit_tolerance_px: float = 5.0,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._registry = registry
        self._hit_tolerance_px = hit_tolerance_px
        self._selected: Optional[Feature] = None
        self._drag_index: Optional[int] = None
        self._press_pixel: Optional[Tuple[float, float]] = None

    @property
    def selected(self) -> Optional[Feature]:
        return self._selected

    def set_selected(self, feature: Optional[Feature]) -> None:
        """Programmatic selection; does not emit ``selection_changed``."""
        self._selected = feature
        self._drag_index = None

    def set_active(self, active: bool) -> None:
        super().set_active(active)
        if not active:
            self._drag_index = None
            self._press_pixel = None

    def _vertex_at(self, pixel) -> Optional[int]:
        if self._selected is None or self.view is None:
            return None
        best_index, best_dist = None, math.inf
        for index, coord in enumerate(self._selected.coordinates):
            vertex_pixel = self.view.pixel_from_coordinate(coord)
            if vertex_pixel is None:
                continue
            dist = math.hypot(vertex_pixel[0] - pixel[0], vertex_pixel[1] - pixel[1])
            if dist <= self._hit_tolerance_px and dist < best_dist:
                best_index, best_dist = index, dist
        return best_index

    def _move_vertex(self, coordinate) -> List[tuple]:
        coords = self._selected.coordinates
        coords[self._drag_index] = (float(coordinate[0]), float(coordinate[1]))
        try:
            self._registry.update_line(self._selected, coords)
        except MalformedGeometryError as exc:
            logger.warning("Vertex move rejected: %s", exc)
        return self._selected.coordinates

    def handle_event(self, event: PointerEvent) -> bool:
        if event.button not in (0, 1):
            return False

        if event.action is PointerAction.PRESS:
            self._press_pixel = event.pixel
            self._drag_index = self._vertex_at(event.pixel)
            return True

        if event.action is PointerAction.MOVE:
            if self._drag_index is None or not event.dragging:
                return False
            self._move_vertex(event.coordinate)
            return True

        if event.action is PointerAction.RELEASE:
            press = self._press_pixel
            self._press_pixel = None
            if self._drag_index is not None:
                moved = press is None or math.hypot(
                    event.pixel[0] - press[0], event.pixel[1] - press[1]
                ) > self.CLICK_TOLERANCE
                if moved:
                    coords = self._move_vertex(event.coordinate)
                    self._drag_index = None
                    self.modify_finished.emit(self._selected, coords)
                    return True
                self._drag_index = None
            if press is None:
                return False
            self._select_at(event.pixel)
            return True

        return False

    def _select_at(self, pixel) -> None:
        if self.view is None:
            return
        hits = [
            feature
            for feature in self.view.features_at_pixel(pixel, self._hit_tolerance_px)
            if feature in self._registry
        ]
        feature = hits[0] if hits else None
        if feature is self._selected:
            return
        self._selected = feature
        self.selection_changed.emit(feature)

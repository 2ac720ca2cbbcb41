"""Hovered vertex angle reporting."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject

from polymeasure_core.interaction.hover import find_hovered_angle
from polymeasure_core.interaction.modes import Idle
from polymeasure_core.interaction.view import MapView
from polymeasure_core.settings import DEFAULT_SETTINGS, InteractionSettings

from ..state.feature_registry import FeatureRegistry
from ..state.interaction_manager import InteractionManager
from ..state.measurement_state import MeasurementState


class HoverProbe(QObject):
    """
    Reports the interior angle under the pointer while Idle.

    Read-only: the only thing it writes is ``MeasurementState.hovered_angle``.
    Leaving Idle clears the hovered angle immediately.
    """

    def __init__(
        self,
        view: MapView,
        registry: FeatureRegistry,
        manager: InteractionManager,
        measurements: MeasurementState,
        settings: InteractionSettings = DEFAULT_SETTINGS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._view = view
        self._registry = registry
        self._manager = manager
        self._measurements = measurements
        self._tolerance_sq = settings.hover_tolerance_sq

        self._manager.mode_changed.connect(self._on_mode_changed)
        self._registry.feature_removed.connect(lambda _feature: self.clear())

    def probe(self, pixel, dragging: bool = False) -> Optional[float]:
        """Look for a vertex near ``pixel`` and publish its angle (or None)."""
        angle = None
        if isinstance(self._manager.mode, Idle) and not dragging and pixel is not None:
            angle = find_hovered_angle(
                (feature.coordinates for feature in self._registry),
                pixel,
                self._view.pixel_from_coordinate,
                self._tolerance_sq,
            )
        self._measurements.set_hovered_angle(angle)
        return angle

    def clear(self) -> None:
        self._measurements.set_hovered_angle(None)

    def _on_mode_changed(self, mode) -> None:
        if not isinstance(mode, Idle):
            self.clear()

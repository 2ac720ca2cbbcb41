"""Shared test setup: headless Qt and small builders for the interaction stack."""

import math
import os

import pytest

from polymeasure_core.interaction.view import hit_test

# Widgets and QApplication need a platform plugin even without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


def ensure_app():
    """Return the running QApplication, creating one when needed."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


class AffineMapView:
    """
    Map view with a uniform scale and a flipped y axis (screen y grows
    downward). ``viewport`` is the (width, height) in pixels; coordinates
    outside it have no pixel.
    """

    def __init__(self, features_provider=lambda: [], scale=1.0, origin=(0.0, 0.0), viewport=None):
        self._features_provider = features_provider
        self.scale = scale
        self.origin = (float(origin[0]), float(origin[1]))
        self.viewport = viewport

    def project(self, coord):
        try:
            x, y = float(coord[0]), float(coord[1])
        except (TypeError, ValueError, IndexError):
            return None
        px = (x - self.origin[0]) * self.scale
        py = (self.origin[1] - y) * self.scale
        if not (math.isfinite(px) and math.isfinite(py)):
            return None
        return (px, py)

    def pixel_from_coordinate(self, coord):
        pixel = self.project(coord)
        if pixel is None or self.viewport is None:
            return pixel
        width, height = self.viewport
        if not (0.0 <= pixel[0] <= width and 0.0 <= pixel[1] <= height):
            return None
        return pixel

    def coordinate_from_pixel(self, pixel):
        return (
            self.origin[0] + pixel[0] / self.scale,
            self.origin[1] - pixel[1] / self.scale,
        )

    def features_at_pixel(self, pixel, tolerance_px):
        return hit_test(self.project, self._features_provider(), pixel, tolerance_px)


class Stack:
    """Registry, measurement state, surface and manager wired over an affine view."""

    def __init__(self, scale=0.1, origin=(-1000.0, 3000.0)):
        from apps.PolyMeasure.app.capabilities.base import CapabilitySurface
        from apps.PolyMeasure.app.state.feature_registry import FeatureRegistry
        from apps.PolyMeasure.app.state.interaction_manager import InteractionManager
        from apps.PolyMeasure.app.state.measurement_state import MeasurementState

        ensure_app()
        self.registry = FeatureRegistry()
        self.view = AffineMapView(self.registry.features, scale=scale, origin=origin)
        self.measurements = MeasurementState()
        self.surface = CapabilitySurface(self.view)
        self.manager = InteractionManager(self.surface, self.registry, self.measurements)
        self.declined = []
        self.manager.operation_declined.connect(self.declined.append)

    def click(self, coordinate, button=1):
        """Press and release at ``coordinate`` through the surface."""
        from polymeasure_core.interaction.events import PointerAction, PointerEvent

        pixel = self.view.pixel_from_coordinate(coordinate)
        self.surface.dispatch(PointerEvent(PointerAction.PRESS, pixel, tuple(coordinate), button))
        self.surface.dispatch(PointerEvent(PointerAction.RELEASE, pixel, tuple(coordinate), button))

    def move(self, coordinate, dragging=False):
        from polymeasure_core.interaction.events import PointerAction, PointerEvent

        pixel = self.view.pixel_from_coordinate(coordinate)
        self.surface.dispatch(
            PointerEvent(PointerAction.MOVE, pixel, tuple(coordinate), 0, dragging=dragging)
        )

    def draw_line(self, coords):
        """Draw and finish a line; returns the created feature."""
        self.manager.start_drawing()
        for coord in coords:
            self.click(coord)
        self.manager.finish_drawing()
        return self.registry.features()[-1]

    def select(self, feature):
        if not self.manager.is_editing:
            self.manager.toggle_edit_mode()
        self.manager.select(feature)


@pytest.fixture
def stack():
    return Stack()

"""
Interactive map canvas.

Features:
- Renders finalized lines, the selected line and in-progress sketches
- Translates matplotlib mouse events into pointer events for the attached
  capabilities
- Implements the MapView queries (coordinate <-> pixel, feature hit-test)
  through the axes data transform
- Pan with the middle mouse button, zoom with the scroll wheel, Fit View
"""

from typing import List, Optional, Tuple

import numpy as np

from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QToolButton
from PySide6.QtCore import Qt, Signal, QTimer

import matplotlib
matplotlib.use('QtAgg')
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from polymeasure_core.interaction.events import PointerAction, PointerEvent
from polymeasure_core.interaction.modes import Appending, Drawing, Editing
from polymeasure_core.interaction.view import hit_test
from polymeasure_core.model.feature import Feature

from ..app.capabilities.base import CapabilitySurface
from ..app.state.feature_registry import FeatureRegistry


class MapCanvas(QWidget):
    """
    Map plane view for drawing and editing polylines.

    Pixels are matplotlib display coordinates of the canvas. Map coordinates
    are Web Mercator metres.

    Signals:
        pointer_moved: (pixel, dragging) for every pointer move inside the map
        pointer_left: pointer left the map area
    """

    pointer_moved = Signal(object, bool)
    pointer_left = Signal()

    DEFAULT_EXTENT = 5000.0  # metres shown around the origin on startup
    LINE_COLOR = '#89b4fa'
    SELECTED_COLOR = '#f9e2af'
    SKETCH_COLOR = '#f38ba8'

    def __init__(self, registry: FeatureRegistry, parent=None):
        super().__init__(parent)

        self.registry = registry
        self.surface = CapabilitySurface(self, self)

        self._selected: Optional[Feature] = None
        self._pan_start: Optional[Tuple[float, float]] = None
        self._buttons_down = set()
        self._last_pointer: Optional[Tuple[Tuple[float, float], Tuple[float, float]]] = None

        self._setup_ui()
        self._setup_plot()
        self._connect_events()
        self._setup_redraw_throttle()

        self.registry.feature_added.connect(lambda _f: self.schedule_redraw())
        self.registry.feature_removed.connect(self._on_feature_removed)
        self.registry.feature_changed.connect(lambda _f: self.schedule_redraw())
        self.surface.overlay_changed.connect(self.schedule_redraw)

    def _setup_redraw_throttle(self):
        """Limit redraw frequency while sketching or dragging."""
        self._redraw_timer = QTimer(self)
        self._redraw_timer.setSingleShot(True)
        self._redraw_timer.setInterval(33)
        self._redraw_timer.timeout.connect(self.update_plot)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        toolbar = QHBoxLayout()
        toolbar.setContentsMargins(4, 4, 4, 2)
        toolbar.setSpacing(4)

        fit_btn = QToolButton()
        fit_btn.setText("⤢")
        fit_btn.setToolTip("Fit View")
        fit_btn.setFixedSize(28, 24)
        fit_btn.clicked.connect(self.fit_view)
        toolbar.addWidget(fit_btn)

        # Pan via middle mouse button, zoom via scroll wheel
        toolbar.addStretch()

        self.coords_label = QLabel("X: --, Y: --")
        self.coords_label.setStyleSheet("color: #a6adc8; font-size: 11px;")
        toolbar.addWidget(self.coords_label)

        layout.addLayout(toolbar)

        self.figure = Figure(figsize=(8, 6), dpi=100, facecolor='#1e1e2e')
        self.canvas = FigureCanvas(self.figure)
        self.canvas.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        layout.addWidget(self.canvas, stretch=1)

    def _setup_plot(self):
        self.ax = self.figure.add_subplot(111)
        self.ax.set_xlim(-self.DEFAULT_EXTENT, self.DEFAULT_EXTENT)
        self.ax.set_ylim(-self.DEFAULT_EXTENT, self.DEFAULT_EXTENT)
        self.update_plot()

    def _style_axes(self):
        self.ax.set_facecolor('#1e1e2e')
        for spine in self.ax.spines.values():
            spine.set_color('#45475a')
        self.ax.tick_params(colors='#a6adc8', labelsize=8)
        self.ax.set_xlabel('X (Web Mercator) [m]', fontsize=9, color='#cdd6f4')
        self.ax.set_ylabel('Y (Web Mercator) [m]', fontsize=9, color='#cdd6f4')
        self.ax.grid(True, color='#313244', linestyle='-', linewidth=0.5, alpha=0.5)

    def _connect_events(self):
        self.canvas.mpl_connect('button_press_event', self._on_mouse_press)
        self.canvas.mpl_connect('button_release_event', self._on_mouse_release)
        self.canvas.mpl_connect('motion_notify_event', self._on_mouse_move)
        self.canvas.mpl_connect('scroll_event', self._on_scroll)
        self.canvas.mpl_connect('axes_leave_event', lambda _event: self.pointer_left.emit())

    # ------------------------------------------------------------------
    # MapView
    # ------------------------------------------------------------------
    def project(self, coord) -> Optional[Tuple[float, float]]:
        """Display pixel of ``coord`` through the data transform, unclipped."""
        try:
            px, py = self.ax.transData.transform((float(coord[0]), float(coord[1])))
        except (TypeError, ValueError, IndexError):
            return None
        if not (np.isfinite(px) and np.isfinite(py)):
            return None
        return float(px), float(py)

    def pixel_from_coordinate(self, coord) -> Optional[Tuple[float, float]]:
        pixel = self.project(coord)
        if pixel is None or not self.ax.bbox.contains(*pixel):
            return None
        return pixel

    def coordinate_from_pixel(self, pixel) -> Optional[Tuple[float, float]]:
        x, y = self.ax.transData.inverted().transform((pixel[0], pixel[1]))
        if not (np.isfinite(x) and np.isfinite(y)):
            return None
        return float(x), float(y)

    def features_at_pixel(self, pixel, tolerance_px: float) -> List[Feature]:
        return hit_test(self.project, self.registry.features(), pixel, tolerance_px)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def set_selected_feature(self, feature: Optional[Feature]):
        if feature is not self._selected:
            self._selected = feature
            self.schedule_redraw()

    def set_mode(self, mode):
        """Update the cursor to reflect the interaction mode."""
        if isinstance(mode, (Drawing, Appending)):
            self.canvas.setCursor(Qt.CursorShape.CrossCursor)
        elif isinstance(mode, Editing):
            self.canvas.setCursor(Qt.CursorShape.PointingHandCursor)
        else:
            self.canvas.setCursor(Qt.CursorShape.ArrowCursor)

    def _on_feature_removed(self, feature: Feature):
        if feature is self._selected:
            self._selected = None
        self.schedule_redraw()

    def schedule_redraw(self):
        if not self._redraw_timer.isActive():
            self._redraw_timer.start()

    def update_plot(self):
        """Redraw features and sketches, keeping the current view limits."""
        xlim, ylim = self.ax.get_xlim(), self.ax.get_ylim()
        self.ax.clear()
        self._style_axes()

        for feature in self.registry:
            points = np.asarray(feature.coordinates)
            if feature is self._selected:
                self.ax.plot(points[:, 0], points[:, 1], '-o', color=self.SELECTED_COLOR,
                             linewidth=3, markersize=5, zorder=3)
            else:
                self.ax.plot(points[:, 0], points[:, 1], '-o', color=self.LINE_COLOR,
                             linewidth=2, markersize=3, zorder=2)

        for coords in self.surface.overlay_coordinates():
            points = np.asarray(coords)
            self.ax.plot(points[:, 0], points[:, 1], '--o', color=self.SKETCH_COLOR,
                         linewidth=1.5, markersize=3, zorder=4)

        self.ax.set_xlim(xlim)
        self.ax.set_ylim(ylim)
        self.ax.set_aspect('equal', adjustable='datalim')
        self.canvas.draw_idle()

    def fit_view(self):
        """Fit the view to show all features."""
        features = self.registry.features()
        if not features:
            self.ax.set_xlim(-self.DEFAULT_EXTENT, self.DEFAULT_EXTENT)
            self.ax.set_ylim(-self.DEFAULT_EXTENT, self.DEFAULT_EXTENT)
            self.canvas.draw_idle()
            return

        all_points = np.vstack([np.asarray(f.coordinates) for f in features])
        x_min, x_max = all_points[:, 0].min(), all_points[:, 0].max()
        y_min, y_max = all_points[:, 1].min(), all_points[:, 1].max()

        margin = max(x_max - x_min, y_max - y_min, 1.0) * 0.1
        self.ax.set_xlim(x_min - margin, x_max + margin)
        self.ax.set_ylim(y_min - margin, y_max + margin)
        self.canvas.draw_idle()

    # ------------------------------------------------------------------
    # Mouse handling
    # ------------------------------------------------------------------
    def _pointer_event(self, action: PointerAction, event, button: int = 0) -> PointerEvent:
        pixel = (float(event.x), float(event.y))
        coordinate = (float(event.xdata), float(event.ydata))
        self._last_pointer = (pixel, coordinate)
        return PointerEvent(
            action=action,
            pixel=pixel,
            coordinate=coordinate,
            button=button,
            dragging=bool(self._buttons_down),
        )

    def _on_mouse_press(self, event):
        if event.inaxes != self.ax:
            return
        self.canvas.setFocus()

        if event.button == 2:  # Middle click = pan
            self._pan_start = (event.xdata, event.ydata)
            self.canvas.setCursor(Qt.CursorShape.ClosedHandCursor)
            return

        button = int(event.button)
        if event.dblclick:
            self.surface.dispatch(self._pointer_event(PointerAction.DOUBLE_CLICK, event, button))
            return
        self._buttons_down.add(button)
        self.surface.dispatch(self._pointer_event(PointerAction.PRESS, event, button))

    def _on_mouse_release(self, event):
        if self._pan_start:
            self._pan_start = None
            self.canvas.setCursor(Qt.CursorShape.ArrowCursor)
            return

        button = int(event.button)
        was_down = button in self._buttons_down
        self._buttons_down.discard(button)
        if not was_down:
            return
        if event.inaxes == self.ax:
            pointer = self._pointer_event(PointerAction.RELEASE, event, button)
        elif self._last_pointer is not None:
            # Released outside the map: end the gesture where the pointer left it
            pixel, coordinate = self._last_pointer
            pointer = PointerEvent(
                action=PointerAction.RELEASE,
                pixel=pixel,
                coordinate=coordinate,
                button=button,
                dragging=bool(self._buttons_down),
            )
        else:
            return
        self.surface.dispatch(pointer)

    def _on_mouse_move(self, event):
        if event.inaxes != self.ax:
            self.coords_label.setText("X: --, Y: --")
            return

        self.coords_label.setText(f"X: {event.xdata:.1f}, Y: {event.ydata:.1f}")

        # Pan - move view (middle button drag)
        if self._pan_start:
            dx = self._pan_start[0] - event.xdata
            dy = self._pan_start[1] - event.ydata

            xlim = self.ax.get_xlim()
            ylim = self.ax.get_ylim()

            self.ax.set_xlim(xlim[0] + dx, xlim[1] + dx)
            self.ax.set_ylim(ylim[0] + dy, ylim[1] + dy)

            self.canvas.draw_idle()
            return

        pointer = self._pointer_event(PointerAction.MOVE, event)
        self.surface.dispatch(pointer)
        self.pointer_moved.emit(pointer.pixel, pointer.dragging)

    def _on_scroll(self, event):
        """Zoom centered on the cursor."""
        if event.inaxes != self.ax:
            return

        scale_factor = 1.2 if event.button == 'down' else 1/1.2

        xlim = self.ax.get_xlim()
        ylim = self.ax.get_ylim()
        xdata, ydata = event.xdata, event.ydata

        self.ax.set_xlim([
            xdata - (xdata - xlim[0]) * scale_factor,
            xdata + (xlim[1] - xdata) * scale_factor
        ])
        self.ax.set_ylim([
            ydata - (ydata - ylim[0]) * scale_factor,
            ydata + (ylim[1] - ydata) * scale_factor
        ])
        self.canvas.draw_idle()

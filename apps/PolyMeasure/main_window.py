"""
Main window for PolyMeasure.

Provides the application shell with:
- Horizontal splitter: [Map canvas] | [Control panel]
- Draw/Edit menu mirroring the control panel buttons
- Enter/Esc finish and cancel shortcuts
- Fullscreen toggle (F11)
"""

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QSplitter, QStatusBar,
    QMessageBox, QApplication, QSizePolicy
)
from PySide6.QtCore import Qt, QSettings
from PySide6.QtGui import QKeySequence, QAction

import logging

from polymeasure_core.interaction.modes import Appending, Drawing, Editing

from .app.state.feature_registry import FeatureRegistry
from .app.state.interaction_manager import InteractionManager
from .app.state.measurement_state import MeasurementState
from .app.controllers.hover_probe import HoverProbe
from .app.controllers.shortcuts import install_finish_cancel_shortcuts
from .styles import apply_splitter_style
from .widgets.map_canvas import MapCanvas
from .widgets.control_panel import ControlPanel


STYLE_SHEET = """
QMainWindow {
    background-color: #1e1e2e;
}

QWidget {
    background-color: #1e1e2e;
    color: #cdd6f4;
    font-family: "Segoe UI", "Inter", sans-serif;
}

QPushButton {
    background-color: #313244;
    border: 1px solid #45475a;
    border-radius: 4px;
    padding: 8px 16px;
    color: #cdd6f4;
}

QPushButton:hover {
    background-color: #45475a;
    border-color: #89b4fa;
}

QPushButton:pressed {
    background-color: #585b70;
}

QPushButton:checked {
    background-color: #89b4fa;
    color: #1e1e2e;
    border-color: #89b4fa;
}

QStatusBar {
    background: #181825;
    color: #a6adc8;
}

QMenuBar {
    background: #181825;
    color: #cdd6f4;
}

QMenuBar::item:selected {
    background: #313244;
}

QMenu {
    background: #1e1e2e;
    border: 1px solid #313244;
    color: #cdd6f4;
}

QMenu::item:selected {
    background: #313244;
}
"""


def describe_mode(mode) -> str:
    """Short status bar text for a mode."""
    if isinstance(mode, Drawing):
        return "Drawing: click to add points, double-click or Enter to finish, Esc to cancel"
    if isinstance(mode, Appending):
        return "Appending: click to add points, Enter to confirm, Esc to cancel"
    if isinstance(mode, Editing):
        if mode.selected is None:
            return "Edit mode: click a line to select it"
        return "Edit mode: drag vertices or use the numeric input"
    return "Ready"


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, parent=None):
        super().__init__(parent)

        self._settings = QSettings("PolyMeasure", "PolyMeasure")
        self._settings_restored = False
        self._logger = logging.getLogger(__name__)

        self.setWindowTitle("PolyMeasure - Polyline Measurement")
        self.setMinimumSize(1000, 700)
        self.setStyleSheet(STYLE_SHEET)

        self.registry = FeatureRegistry(self)
        self.measurements = MeasurementState(parent=self)

        self._setup_ui()
        self._setup_menu()
        self._setup_connections()
        self._restore_settings()

    def _setup_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QHBoxLayout(central_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        self.main_splitter = QSplitter(Qt.Orientation.Horizontal)
        self.main_splitter.setChildrenCollapsible(False)
        self.main_splitter.setHandleWidth(4)
        apply_splitter_style(self.main_splitter)

        self.map_canvas = MapCanvas(self.registry)
        self.map_canvas.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.map_canvas.setAccessibleName("Map")
        self.main_splitter.addWidget(self.map_canvas)

        self.manager = InteractionManager(
            self.map_canvas.surface, self.registry, self.measurements, parent=self
        )
        self.hover_probe = HoverProbe(
            self.map_canvas, self.registry, self.manager, self.measurements, parent=self
        )

        self.control_panel = ControlPanel(self.manager, self.measurements)
        self.control_panel.connect_registry(self.registry)
        self.control_panel.setMinimumWidth(280)
        self.control_panel.setAccessibleName("Control panel")
        self.main_splitter.addWidget(self.control_panel)

        self.main_splitter.setSizes([900, 300])
        self.main_splitter.setStretchFactor(0, 3)
        self.main_splitter.setStretchFactor(1, 1)

        main_layout.addWidget(self.main_splitter)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Ready")

    def _setup_menu(self):
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        exit_action = QAction("E&xit", self)
        exit_action.setShortcut(QKeySequence.StandardKey.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        draw_menu = menubar.addMenu("&Draw")
        start_action = QAction("&Start Drawing", self)
        start_action.setShortcut("D")
        start_action.triggered.connect(self.manager.start_drawing)
        draw_menu.addAction(start_action)

        edit_action = QAction("Toggle &Edit Mode", self)
        edit_action.setShortcut("E")
        edit_action.triggered.connect(self.manager.toggle_edit_mode)
        draw_menu.addAction(edit_action)

        draw_menu.addSeparator()

        delete_vertex_action = QAction("Delete Last &Vertex", self)
        delete_vertex_action.setShortcut(QKeySequence.StandardKey.Backspace)
        delete_vertex_action.triggered.connect(self.manager.delete_last_vertex)
        draw_menu.addAction(delete_vertex_action)

        delete_line_action = QAction("Delete &Line", self)
        delete_line_action.setShortcut(QKeySequence.StandardKey.Delete)
        delete_line_action.triggered.connect(self.manager.delete_entire_line)
        draw_menu.addAction(delete_line_action)

        view_menu = menubar.addMenu("&View")
        fit_action = QAction("&Fit View", self)
        fit_action.setShortcut("F")
        fit_action.triggered.connect(self.map_canvas.fit_view)
        view_menu.addAction(fit_action)

        view_menu.addSeparator()

        fullscreen_action = QAction("Toggle &Fullscreen", self)
        fullscreen_action.setShortcut("F11")
        fullscreen_action.triggered.connect(self._toggle_fullscreen)
        view_menu.addAction(fullscreen_action)

        help_menu = menubar.addMenu("&Help")
        help_action = QAction("&Help", self)
        help_action.setShortcut(QKeySequence("F1"))
        help_action.triggered.connect(self._show_help)
        help_menu.addAction(help_action)

    def _setup_connections(self):
        self.map_canvas.pointer_moved.connect(self.hover_probe.probe)
        self.map_canvas.pointer_left.connect(self.hover_probe.clear)
        self.manager.selection_changed.connect(self.map_canvas.set_selected_feature)
        self.manager.mode_changed.connect(self._on_mode_changed)
        self.manager.operation_declined.connect(self._on_operation_declined)

        # Esc anywhere in the window, Enter only while the map has focus
        target = QApplication.instance() or self
        self.shortcut_filter = install_finish_cancel_shortcuts(
            target, self.manager, focus_widget=self.map_canvas.canvas
        )

    def _on_mode_changed(self, mode):
        self.map_canvas.set_mode(mode)
        self.status_bar.showMessage(describe_mode(mode))
        self._logger.debug("Mode changed to %s.", type(mode).__name__)

    def _on_operation_declined(self, message: str) -> None:
        self.status_bar.showMessage(message, 5000)

    def _toggle_fullscreen(self):
        if self.isFullScreen():
            self.showMaximized()
        else:
            self.showFullScreen()

    def _show_help(self):
        """Show keyboard and mouse help."""
        self._logger.info("Help dialog opened.")
        QMessageBox.information(
            self, "PolyMeasure Help",
            "<h3>PolyMeasure Help</h3>"
            "<ul>"
            "<li><b>Click</b>: add a point while drawing or appending</li>"
            "<li><b>Double-click / Enter</b>: finish drawing, confirm append</li>"
            "<li><b>Esc</b>: cancel drawing or append, clear selection</li>"
            "<li><b>Middle drag / wheel</b>: pan and zoom</li>"
            "<li><b>Hover a vertex</b>: show its interior angle</li>"
            "</ul>"
        )

    def _restore_settings(self) -> None:
        if self._settings_restored:
            return
        geometry = self._settings.value("main_window/geometry")
        if geometry:
            self.restoreGeometry(geometry)
        splitter_sizes = self._settings.value("main_window/splitter_sizes")
        if splitter_sizes:
            self.main_splitter.setSizes([int(size) for size in splitter_sizes])
        self.measurements.restore_settings(self._settings)
        self._settings_restored = True

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt naming
        self._settings.setValue("main_window/geometry", self.saveGeometry())
        self._settings.setValue("main_window/splitter_sizes", self.main_splitter.sizes())
        self.measurements.save_settings(self._settings)
        app = QApplication.instance()
        if app is not None:
            app.removeEventFilter(self.shortcut_filter)
        super().closeEvent(event)

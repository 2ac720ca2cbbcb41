"""
Control panel: mode buttons, live measurement readout and numeric input.

The panel never decides anything itself. Button availability comes from
``InteractionManager.controls`` and every label is refreshed from
``MeasurementState`` signals.
"""

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QGroupBox,
    QLabel, QLineEdit, QPushButton, QToolButton,
)
from PySide6.QtCore import Qt

from polymeasure_core.geometry.units import AngleUnit

from ..app.state.interaction_manager import InteractionManager
from ..app.state.measurement_state import MeasurementState
from ..styles import (
    apply_action_button_style,
    apply_form_label_style,
    apply_groupbox_style,
    apply_numeric_input_style,
    apply_unit_button_style,
    apply_value_label_style,
)


def _angle_suffix(unit: AngleUnit) -> str:
    return "°" if unit is AngleUnit.DEGREES else "rad"


class ControlPanel(QWidget):
    """Side panel driving an InteractionManager."""

    def __init__(
        self,
        manager: InteractionManager,
        measurements: MeasurementState,
        parent=None,
    ):
        super().__init__(parent)
        self.manager = manager
        self.measurements = measurements

        self._setup_ui()
        self._connect_signals()
        self.refresh()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(8)

        layout.addWidget(self._create_draw_group())
        layout.addWidget(self._create_edit_group())
        layout.addWidget(self._create_measurement_group())
        layout.addWidget(self._create_numeric_group())
        layout.addStretch()

    def _action_button(self, text: str, tooltip: str, slot) -> QPushButton:
        button = QPushButton(text)
        button.setToolTip(tooltip)
        apply_action_button_style(button)
        button.clicked.connect(slot)
        return button

    def _create_draw_group(self) -> QGroupBox:
        group = QGroupBox("Draw")
        apply_groupbox_style(group)
        layout = QVBoxLayout(group)

        self.start_drawing_btn = self._action_button(
            "✎ Start Drawing", "Click on the map to add points", self.manager.start_drawing
        )
        layout.addWidget(self.start_drawing_btn)

        row = QHBoxLayout()
        self.finish_btn = self._action_button(
            "✓ Finish", "Finish the drawing or append (Enter)", self.manager.finish
        )
        self.cancel_btn = self._action_button(
            "✕ Cancel", "Cancel the drawing or append (Esc)", self.manager.cancel
        )
        row.addWidget(self.finish_btn)
        row.addWidget(self.cancel_btn)
        layout.addLayout(row)
        return group

    def _create_edit_group(self) -> QGroupBox:
        group = QGroupBox("Edit")
        apply_groupbox_style(group)
        layout = QVBoxLayout(group)

        self.edit_mode_btn = self._action_button(
            "⚙ Edit Mode", "Select lines and drag their vertices", self.manager.toggle_edit_mode
        )
        self.edit_mode_btn.setCheckable(True)
        layout.addWidget(self.edit_mode_btn)

        self.append_btn = self._action_button(
            "➕ Append Points", "Continue the selected line from its last point",
            self.manager.start_append,
        )
        layout.addWidget(self.append_btn)

        self.delete_vertex_btn = self._action_button(
            "⌫ Delete Last Vertex", "Remove the last point of the selected line",
            self.manager.delete_last_vertex,
        )
        layout.addWidget(self.delete_vertex_btn)

        self.delete_line_btn = self._action_button(
            "🗑 Delete Line", "Remove the selected line", self.manager.delete_entire_line
        )
        layout.addWidget(self.delete_line_btn)

        self.feature_count_label = QLabel()
        apply_form_label_style(self.feature_count_label)
        layout.addWidget(self.feature_count_label)
        return group

    def _measurement_row(self, grid: QGridLayout, row: int, title: str, toggle_slot):
        label = QLabel(title)
        apply_form_label_style(label)
        value = QLabel("N/A")
        apply_value_label_style(value)
        value.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        unit_btn = QToolButton()
        unit_btn.setToolTip("Toggle unit")
        apply_unit_button_style(unit_btn)
        unit_btn.clicked.connect(toggle_slot)
        grid.addWidget(label, row, 0)
        grid.addWidget(value, row, 1)
        grid.addWidget(unit_btn, row, 2)
        return value, unit_btn

    def _create_measurement_group(self) -> QGroupBox:
        group = QGroupBox("Measurement")
        apply_groupbox_style(group)
        grid = QGridLayout(group)
        grid.setColumnStretch(1, 1)

        self.distance_value, self.distance_unit_btn = self._measurement_row(
            grid, 0, "Distance", self.measurements.toggle_distance_unit
        )
        self.azimuth_value, self.azimuth_unit_btn = self._measurement_row(
            grid, 1, "Azimuth", self.measurements.toggle_angle_unit
        )
        self.hover_value, self.hover_unit_btn = self._measurement_row(
            grid, 2, "Vertex angle", self.measurements.toggle_hovered_angle_unit
        )
        return group

    def _create_numeric_group(self) -> QGroupBox:
        self.numeric_group = QGroupBox("Last Segment")
        apply_groupbox_style(self.numeric_group)
        grid = QGridLayout(self.numeric_group)

        distance_label = QLabel("Distance")
        apply_form_label_style(distance_label)
        self.distance_input = QLineEdit()
        self.distance_input.setPlaceholderText("distance")
        apply_numeric_input_style(self.distance_input)
        self.distance_input_unit = QLabel()
        apply_form_label_style(self.distance_input_unit)

        angle_label = QLabel("Azimuth")
        apply_form_label_style(angle_label)
        self.angle_input = QLineEdit()
        self.angle_input.setPlaceholderText("azimuth")
        apply_numeric_input_style(self.angle_input)
        self.angle_input_unit = QLabel()
        apply_form_label_style(self.angle_input_unit)

        grid.addWidget(distance_label, 0, 0)
        grid.addWidget(self.distance_input, 0, 1)
        grid.addWidget(self.distance_input_unit, 0, 2)
        grid.addWidget(angle_label, 1, 0)
        grid.addWidget(self.angle_input, 1, 1)
        grid.addWidget(self.angle_input_unit, 1, 2)

        self.apply_btn = self._action_button(
            "↵ Apply", "Move the last point to this distance and azimuth", self._apply_numeric
        )
        grid.addWidget(self.apply_btn, 2, 0, 1, 3)
        return self.numeric_group

    def _connect_signals(self):
        self.manager.mode_changed.connect(lambda _mode: self.refresh())
        self.manager.selection_changed.connect(lambda _feature: self.refresh())
        self.manager.surface.attached_changed.connect(self.refresh)
        self.measurements.measurement_changed.connect(lambda _m: self._refresh_measurement())
        self.measurements.hovered_angle_changed.connect(lambda _a: self._refresh_measurement())
        self.measurements.units_changed.connect(self._refresh_measurement)
        self.measurements.inputs_changed.connect(self._on_inputs_changed)

        self.distance_input.textEdited.connect(self.measurements.set_input_distance)
        self.angle_input.textEdited.connect(self.measurements.set_input_angle)
        self.distance_input.returnPressed.connect(self._apply_numeric)
        self.angle_input.returnPressed.connect(self._apply_numeric)

    def connect_registry(self, registry):
        """Keep the feature count and edit toggle current."""
        registry.count_changed.connect(lambda _count: self.refresh())

    def refresh(self):
        """Update button availability from the current mode."""
        controls = self.manager.controls
        self.start_drawing_btn.setEnabled(controls.start_drawing)
        self.edit_mode_btn.setEnabled(controls.toggle_edit)
        self.edit_mode_btn.setChecked(self.manager.is_editing)
        self.append_btn.setEnabled(controls.start_append)
        self.delete_vertex_btn.setEnabled(controls.edit_actions)
        self.delete_line_btn.setEnabled(controls.edit_actions)
        self.finish_btn.setEnabled(self.manager.can_finish)
        self.cancel_btn.setEnabled(self.manager.is_drawing or self.manager.is_appending)

        self.numeric_group.setVisible(controls.show_numeric_inputs)
        self.distance_input.setEnabled(controls.numeric_input)
        self.angle_input.setEnabled(controls.numeric_input)
        self.apply_btn.setEnabled(controls.numeric_input)

        self.feature_count_label.setText(f"Lines: {self.manager.feature_count}")
        self._refresh_measurement()

    def _refresh_measurement(self):
        self.distance_value.setText(self.measurements.display_distance)
        self.azimuth_value.setText(self.measurements.display_azimuth)
        self.hover_value.setText(self.measurements.display_hovered_angle)

        self.distance_unit_btn.setText(self.measurements.distance_unit.value)
        self.azimuth_unit_btn.setText(self.measurements.angle_unit.value)
        self.hover_unit_btn.setText(self.measurements.hovered_angle_unit.value)
        self.distance_input_unit.setText(self.measurements.distance_unit.value)
        self.angle_input_unit.setText(_angle_suffix(self.measurements.angle_unit))

    def _on_inputs_changed(self, distance: str, angle: str):
        if self.distance_input.text() != distance:
            self.distance_input.setText(distance)
        if self.angle_input.text() != angle:
            self.angle_input.setText(angle)

    def _apply_numeric(self):
        self.manager.apply_numeric_input(
            self.measurements.input_distance,
            self.measurements.input_angle,
            self.measurements.distance_unit,
            self.measurements.angle_unit,
        )

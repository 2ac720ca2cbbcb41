"""Measurement display state shared by the canvas, probe and control panel."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QSettings, Signal

from polymeasure_core.geometry.measurement import Measurement, last_segment_measurement
from polymeasure_core.geometry.units import AngleUnit, DistanceUnit
from polymeasure_core.settings import DEFAULT_SETTINGS, InteractionSettings

from ...utils.formatting import (
    format_azimuth,
    format_distance,
    format_hover_angle,
    input_angle_text,
    input_distance_text,
)

logger = logging.getLogger(__name__)


class MeasurementState(QObject):
    """
    Holds the surfaced Measurement, the hovered angle, display units and the
    numeric input field strings.

    The Measurement is always recomputed from a line handed in by the caller;
    it is never edited on its own.
    """

    measurement_changed = Signal(object)
    hovered_angle_changed = Signal(object)
    inputs_changed = Signal(str, str)
    units_changed = Signal()

    def __init__(
        self,
        settings: InteractionSettings = DEFAULT_SETTINGS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._measurement = Measurement.indeterminate()
        self._hovered_angle: Optional[float] = None
        self._distance_unit = DistanceUnit(settings.default_distance_unit)
        self._angle_unit = AngleUnit(settings.default_angle_unit)
        self._hovered_angle_unit = AngleUnit(settings.default_angle_unit)
        self._input_distance = ""
        self._input_angle = ""

    # Measurement
    @property
    def measurement(self) -> Measurement:
        return self._measurement

    def update_from_line(self, line) -> Measurement:
        """Recompute from the last segment of ``line`` and refresh the input fields."""
        measurement = last_segment_measurement(line, self._settings.sphere_radius_m)
        logger.debug(
            "Measurement recomputed: %.3f m at %.3f deg (valid=%s)",
            measurement.distance_meters,
            measurement.azimuth_degrees,
            measurement.valid,
        )
        self._set_measurement(measurement)
        self._set_inputs(
            input_distance_text(measurement, self._distance_unit),
            input_angle_text(measurement, self._angle_unit),
        )
        return measurement

    def clear(self) -> None:
        """Reset to an indeterminate measurement with empty input fields."""
        self._set_measurement(Measurement.indeterminate())
        self._set_inputs("", "")

    def _set_measurement(self, measurement: Measurement) -> None:
        self._measurement = measurement
        self.measurement_changed.emit(measurement)

    # Hovered angle
    @property
    def hovered_angle(self) -> Optional[float]:
        return self._hovered_angle

    def set_hovered_angle(self, angle: Optional[float]) -> None:
        if angle == self._hovered_angle:
            return
        self._hovered_angle = angle
        self.hovered_angle_changed.emit(angle)

    # Numeric inputs
    @property
    def input_distance(self) -> str:
        return self._input_distance

    @property
    def input_angle(self) -> str:
        return self._input_angle

    def set_input_distance(self, text: str) -> None:
        self._set_inputs(text, self._input_angle)

    def set_input_angle(self, text: str) -> None:
        self._set_inputs(self._input_distance, text)

    def clear_inputs(self) -> None:
        self._set_inputs("", "")

    def _set_inputs(self, distance: str, angle: str) -> None:
        if (distance, angle) == (self._input_distance, self._input_angle):
            return
        self._input_distance = distance
        self._input_angle = angle
        self.inputs_changed.emit(distance, angle)

    # Units
    @property
    def distance_unit(self) -> DistanceUnit:
        return self._distance_unit

    @property
    def angle_unit(self) -> AngleUnit:
        return self._angle_unit

    @property
    def hovered_angle_unit(self) -> AngleUnit:
        return self._hovered_angle_unit

    def toggle_distance_unit(self) -> None:
        self._distance_unit = self._distance_unit.toggled()
        if self._input_distance:
            self._set_inputs(
                input_distance_text(self._measurement, self._distance_unit), self._input_angle
            )
        self.units_changed.emit()

    def toggle_angle_unit(self) -> None:
        """Switch deg <-> rad; a filled angle field is rewritten in the new unit."""
        self._angle_unit = self._angle_unit.toggled()
        if self._input_angle:
            self._set_inputs(
                self._input_distance, input_angle_text(self._measurement, self._angle_unit)
            )
        self.units_changed.emit()

    def toggle_hovered_angle_unit(self) -> None:
        self._hovered_angle_unit = self._hovered_angle_unit.toggled()
        self.units_changed.emit()

    # Display strings
    @property
    def display_distance(self) -> str:
        return format_distance(self._measurement, self._distance_unit)

    @property
    def display_azimuth(self) -> str:
        return format_azimuth(self._measurement, self._angle_unit)

    @property
    def display_hovered_angle(self) -> str:
        return format_hover_angle(self._hovered_angle, self._hovered_angle_unit)

    # Persistence
    def save_settings(self, settings: QSettings) -> None:
        settings.setValue("units/distance", self._distance_unit.value)
        settings.setValue("units/angle", self._angle_unit.value)
        settings.setValue("units/hovered_angle", self._hovered_angle_unit.value)

    def restore_settings(self, settings: QSettings) -> None:
        try:
            self._distance_unit = DistanceUnit(
                settings.value("units/distance", self._distance_unit.value)
            )
            self._angle_unit = AngleUnit(settings.value("units/angle", self._angle_unit.value))
            self._hovered_angle_unit = AngleUnit(
                settings.value("units/hovered_angle", self._hovered_angle_unit.value)
            )
        except ValueError as exc:
            logger.warning("Ignoring stored unit settings: %s", exc)
        self.units_changed.emit()

"""
Interaction state machine.

Owns the current Mode and the capability handles, and keeps the surfaced
Measurement in step with every geometry mutation.

Mode transitions are decided by ``polymeasure_core.interaction.modes.transition``;
this class performs the side effects around them. At most one handle per
capability kind is held, and capabilities are always detached by handle.
"""

from __future__ import annotations

from functools import partial
import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from polymeasure_core.errors import (
    InconsistentAppendStateError,
    InvalidNumericInputError,
    MalformedGeometryError,
    PolyMeasureError,
)
from polymeasure_core.geometry.measurement import Measurement, copy_line, destination_point
from polymeasure_core.geometry.units import parse_number, to_degrees, to_meters
from polymeasure_core.interaction import modes
from polymeasure_core.interaction.modes import (
    Action,
    Appending,
    ControlStates,
    Drawing,
    Editing,
    Idle,
    Mode,
    transition,
)
from polymeasure_core.model.feature import Feature
from polymeasure_core.settings import DEFAULT_SETTINGS, InteractionSettings

from ..capabilities.append_draw import AppendDrawCapability
from ..capabilities.base import CapabilityHandle, CapabilitySurface
from ..capabilities.line_draw import LineDrawCapability
from ..capabilities.select_modify import SelectModifyCapability
from .feature_registry import FeatureRegistry
from .measurement_state import MeasurementState

logger = logging.getLogger(__name__)


class InteractionManager(QObject):
    """
    Coordinates Idle, Drawing, Editing and Appending.

    Signals:
        mode_changed: new Mode value after every transition
        selection_changed: selected Feature or None
        operation_declined: human-readable reason an action was a no-op
    """

    mode_changed = Signal(object)
    selection_changed = Signal(object)
    operation_declined = Signal(str)

    def __init__(
        self,
        surface: CapabilitySurface,
        registry: FeatureRegistry,
        measurements: MeasurementState,
        settings: InteractionSettings = DEFAULT_SETTINGS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._surface = surface
        self._registry = registry
        self._measurements = measurements
        self._settings = settings
        self._mode: Mode = Idle()

        self._draw_handle: Optional[CapabilityHandle] = None
        self._select_handle: Optional[CapabilityHandle] = None
        self._append_handle: Optional[CapabilityHandle] = None

        self._registry.feature_removed.connect(self._on_feature_removed)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------
    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def is_drawing(self) -> bool:
        return modes.is_drawing(self._mode)

    @property
    def is_editing(self) -> bool:
        return modes.is_editing(self._mode)

    @property
    def is_appending(self) -> bool:
        return modes.is_appending(self._mode)

    @property
    def selected_feature(self) -> Optional[Feature]:
        return modes.selected_feature(self._mode)

    @property
    def feature_count(self) -> int:
        return self._registry.count()

    @property
    def can_finish(self) -> bool:
        return modes.can_finish(self._mode)

    @property
    def can_cancel(self) -> bool:
        return modes.can_cancel(self._mode)

    @property
    def measurement(self) -> Measurement:
        return self._measurements.measurement

    @property
    def hovered_angle_degrees(self) -> Optional[float]:
        return self._measurements.hovered_angle

    @property
    def controls(self) -> ControlStates:
        return modes.control_states(self._mode, self._registry.count())

    @property
    def surface(self) -> CapabilitySurface:
        return self._surface

    def _set_mode(self, mode: Mode) -> None:
        previous_selection = modes.selected_feature(self._mode)
        self._mode = mode
        logger.debug("Mode -> %s", type(mode).__name__)
        self.mode_changed.emit(mode)
        if modes.selected_feature(mode) is not previous_selection:
            self.selection_changed.emit(modes.selected_feature(mode))

    def _decline(self, message: str) -> None:
        logger.warning("Operation declined: %s", message)
        self.operation_declined.emit(message)

    # ------------------------------------------------------------------
    # Keyboard-level dispatch
    # ------------------------------------------------------------------
    def finish(self) -> None:
        """Confirm an append or finish a drawing."""
        if self.is_appending:
            self.confirm_append()
        elif self.is_drawing:
            self.finish_drawing()

    def cancel(self) -> None:
        """Cancel an append or drawing, or clear the selection while editing."""
        if self.is_appending:
            self.cancel_append()
        elif self.is_drawing:
            self.cancel_drawing()
        elif isinstance(self._mode, Editing) and self._mode.selected is not None:
            self.select(None)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def start_drawing(self) -> bool:
        if self.is_appending:
            self.cancel_append()
        next_mode = transition(self._mode, Action.START_DRAWING)
        if next_mode is None:
            logger.debug("start_drawing ignored in %s", type(self._mode).__name__)
            return False

        capability = LineDrawCapability()
        handle = self._surface.attach(capability)
        self._draw_handle = handle
        capability.sketch_started.connect(partial(self._on_draw_changed, handle))
        capability.sketch_changed.connect(partial(self._on_draw_changed, handle))
        capability.sketch_finished.connect(partial(self._on_draw_finished, handle))
        capability.sketch_aborted.connect(partial(self._on_draw_aborted, handle))

        self._measurements.clear()
        self._set_mode(next_mode)
        logger.info("Drawing started.")
        return True

    def finish_drawing(self) -> None:
        if not self.is_drawing or self._draw_handle is None:
            return
        capability = self._draw_handle.capability
        if len(capability.committed_coordinates()) < 2:
            self.cancel_drawing()
            return
        # Completion continues in _on_draw_finished.
        capability.finish()

    def cancel_drawing(self) -> None:
        if not self.is_drawing:
            return
        self._end_drawing()
        self._measurements.clear()
        logger.info("Drawing cancelled.")

    def _end_drawing(self) -> None:
        handle, self._draw_handle = self._draw_handle, None
        self._surface.detach(handle)
        self._set_mode(transition(self._mode, Action.CANCEL_DRAWING) or Idle())

    def _on_draw_changed(self, handle: CapabilityHandle, coords: list) -> None:
        if handle is not self._draw_handle or not self.is_drawing:
            return
        self._measurements.update_from_line(coords)

    def _on_draw_finished(self, handle: CapabilityHandle, coords: list) -> None:
        if handle is not self._draw_handle or not self.is_drawing:
            return
        try:
            feature = self._registry.add(coords)
        except MalformedGeometryError as exc:
            self._end_drawing()
            self._measurements.clear()
            self._decline(f"Drawing discarded: {exc}")
            return
        self._end_drawing()
        self._measurements.update_from_line(feature.coordinates)
        logger.info("Drawing finished: feature %s with %d points.", feature.feature_id, len(feature))

    def _on_draw_aborted(self, handle: CapabilityHandle) -> None:
        if handle is self._draw_handle and self.is_drawing:
            self.cancel_drawing()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def toggle_edit_mode(self) -> bool:
        if self.is_appending:
            self.cancel_append()

        if isinstance(self._mode, Idle) and self._registry.count() == 0:
            logger.debug("toggle_edit_mode ignored: no features to edit")
            return False
        next_mode = transition(self._mode, Action.TOGGLE_EDIT)
        if next_mode is None:
            logger.debug("toggle_edit_mode ignored in %s", type(self._mode).__name__)
            return False

        if isinstance(next_mode, Editing):
            capability = SelectModifyCapability(
                self._registry, self._settings.select_hit_tolerance_px
            )
            handle = self._surface.attach(capability)
            self._select_handle = handle
            capability.selection_changed.connect(partial(self._on_selection_changed, handle))
            capability.modify_finished.connect(partial(self._on_modify_finished, handle))
            self._set_mode(next_mode)
            logger.info("Edit mode on.")
        else:
            handle, self._select_handle = self._select_handle, None
            self._surface.detach(handle)
            self._measurements.clear_inputs()
            self._set_mode(next_mode)
            logger.info("Edit mode off.")
        return True

    def select(self, feature: Optional[Feature]) -> None:
        """Select ``feature`` (or clear the selection) while editing."""
        if not isinstance(self._mode, Editing):
            return
        if feature is not None and feature not in self._registry:
            self._decline("Cannot select a feature that is not in the registry")
            return
        self._set_mode(transition(self._mode, Action.SELECT, feature=feature))
        if self._select_handle is not None:
            self._select_handle.capability.set_selected(feature)
        if feature is None:
            self._measurements.clear()
        else:
            self._measurements.update_from_line(feature.coordinates)

    def _on_selection_changed(self, handle: CapabilityHandle, feature: Optional[Feature]) -> None:
        if handle is not self._select_handle:
            return
        self.select(feature)

    def _on_modify_finished(self, handle: CapabilityHandle, feature: Feature, coords: list) -> None:
        if handle is not self._select_handle or not isinstance(self._mode, Editing):
            return
        if feature is self._mode.selected and feature in self._registry:
            self._measurements.update_from_line(feature.coordinates)

    def delete_last_vertex(self) -> None:
        feature = self._editable_selection()
        if feature is None:
            return
        coords = feature.coordinates
        if len(coords) <= 2:
            self.delete_entire_line()
            return
        self._registry.update_line(feature, coords[:-1])
        self._measurements.update_from_line(feature.coordinates)

    def delete_entire_line(self) -> None:
        feature = self._editable_selection()
        if feature is None:
            return
        # _on_feature_removed clears the selection and the Measurement
        self._registry.remove(feature)
        logger.info("Feature %s deleted.", feature.feature_id)

    def apply_numeric_input(
        self,
        distance,
        bearing,
        distance_unit=None,
        angle_unit=None,
    ) -> bool:
        """
        Move the selected feature's last vertex to ``distance`` along
        ``bearing`` from its second-to-last vertex.

        Units default to the current display units. Returns False (and leaves
        the feature untouched) for invalid input or projection failures.
        """
        feature = self._editable_selection()
        if feature is None:
            return False
        distance_unit = distance_unit or self._measurements.distance_unit
        angle_unit = angle_unit or self._measurements.angle_unit
        coords = feature.coordinates
        try:
            distance_m = to_meters(parse_number(distance), distance_unit)
            bearing_deg = to_degrees(parse_number(bearing), angle_unit)
            if distance_m <= 0.0:
                raise InvalidNumericInputError("Distance must be greater than zero")
            new_end = destination_point(
                coords[-2], distance_m, bearing_deg, self._settings.sphere_radius_m
            )
            self._registry.update_line(feature, coords[:-1] + [new_end])
        except PolyMeasureError as exc:
            self._decline(f"Numeric input not applied: {exc}")
            return False
        self._measurements.update_from_line(feature.coordinates)
        logger.info(
            "Numeric input applied to feature %s: %.3f m at %.3f deg",
            feature.feature_id, distance_m, bearing_deg,
        )
        return True

    def _editable_selection(self) -> Optional[Feature]:
        if isinstance(self._mode, Editing):
            return self._mode.selected
        return None

    def _on_feature_removed(self, feature: Feature) -> None:
        if isinstance(self._mode, Appending) and self._mode.target is feature:
            self.cancel_append()
        if isinstance(self._mode, Editing) and self._mode.selected is feature:
            self.select(None)

    # ------------------------------------------------------------------
    # Appending
    # ------------------------------------------------------------------
    def start_append(self) -> bool:
        feature = self._editable_selection()
        if feature is None or self.is_appending:
            return False
        try:
            backup = tuple(copy_line(feature.coordinates))
            capability = AppendDrawCapability(
                backup,
                seed=backup[-1] if backup else None,
                excluded_pointer_types=self._settings.excluded_append_pointer_types,
            )
        except MalformedGeometryError as exc:
            self._decline(f"Cannot append: {exc}")
            return False
        next_mode = transition(self._mode, Action.START_APPEND, backup=backup)
        if next_mode is None:
            return False

        if self._select_handle is not None:
            self._select_handle.capability.set_active(False)
        handle = self._surface.attach(capability)
        self._append_handle = handle
        capability.sketch_changed.connect(partial(self._on_append_changed, handle))
        capability.sketch_finished.connect(partial(self._on_append_finished, handle))
        capability.sketch_aborted.connect(partial(self._on_append_aborted, handle))

        self._set_mode(next_mode)
        self._measurements.update_from_line(backup)
        logger.info("Append started on feature %s.", feature.feature_id)
        return True

    def confirm_append(self) -> None:
        if not self.is_appending or self._append_handle is None:
            return
        # Completion continues in _on_append_finished.
        self._append_handle.capability.finish()

    def cancel_append(self) -> None:
        if not isinstance(self._mode, Appending):
            return
        target = self._mode.target
        self._end_append()
        if target in self._registry:
            self._measurements.update_from_line(target.coordinates)
        else:
            self._measurements.clear()
        logger.info("Append cancelled on feature %s.", target.feature_id)

    def _end_append(self) -> None:
        handle, self._append_handle = self._append_handle, None
        self._surface.detach(handle)
        if self._select_handle is not None:
            self._select_handle.capability.set_active(True)
        self._set_mode(transition(self._mode, Action.CANCEL_APPEND))

    def _check_append_sketch(self, coords: list) -> None:
        backup = self._mode.backup if isinstance(self._mode, Appending) else None
        if backup is None:
            raise InconsistentAppendStateError("Append backup is missing")
        if len(coords) < len(backup):
            raise InconsistentAppendStateError(
                f"Sketch has {len(coords)} points, fewer than the {len(backup)} backed up"
            )

    def _on_append_changed(self, handle: CapabilityHandle, coords: list) -> None:
        if handle is not self._append_handle or not self.is_appending:
            return
        try:
            self._check_append_sketch(coords)
        except InconsistentAppendStateError as exc:
            self._decline(f"Append aborted: {exc}")
            self.cancel_append()
            return
        backup = self._mode.backup
        if len(coords) > len(backup):
            self._measurements.update_from_line(coords)
        else:
            self._measurements.update_from_line(backup)

    def _on_append_finished(self, handle: CapabilityHandle, coords: list) -> None:
        if handle is not self._append_handle or not isinstance(self._mode, Appending):
            return
        try:
            self._check_append_sketch(coords)
        except InconsistentAppendStateError as exc:
            self._decline(f"Append aborted: {exc}")
            self.cancel_append()
            return

        target, backup = self._mode.target, self._mode.backup
        if len(coords) == len(backup):
            logger.debug("Append confirmed without new points; treating as cancel.")
            self.cancel_append()
            return

        final = list(backup) + list(coords[len(backup):])
        try:
            applied = self._registry.update_line(target, final)
        except MalformedGeometryError as exc:
            self._decline(f"Append aborted: {exc}")
            self.cancel_append()
            return
        if not applied:
            self.cancel_append()
            return
        self._end_append()
        self._measurements.update_from_line(target.coordinates)
        logger.info(
            "Append confirmed on feature %s: %d new points.",
            target.feature_id, len(final) - len(backup),
        )

    def _on_append_aborted(self, handle: CapabilityHandle) -> None:
        if handle is self._append_handle and self.is_appending:
            self.cancel_append()

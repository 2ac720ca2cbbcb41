"""Shared styling utilities for PolyMeasure UI."""

from .app_style import (
    apply_form_label_style,
    apply_value_label_style,
    apply_numeric_input_style,
    apply_unit_button_style,
    apply_action_button_style,
    apply_groupbox_style,
    apply_splitter_style,
)

__all__ = [
    "apply_form_label_style",
    "apply_value_label_style",
    "apply_numeric_input_style",
    "apply_unit_button_style",
    "apply_action_button_style",
    "apply_groupbox_style",
    "apply_splitter_style",
]

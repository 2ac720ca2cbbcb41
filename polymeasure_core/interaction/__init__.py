"""Interaction module for PolyMeasure core."""

from .modes import (
    Idle,
    Drawing,
    Editing,
    Appending,
    Mode,
    Action,
    transition,
    can_finish,
    can_cancel,
    control_states,
    ControlStates,
)
from .events import PointerEvent, PointerAction
from .view import MapView, hit_test
from .hover import find_hovered_angle

__all__ = [
    "Idle",
    "Drawing",
    "Editing",
    "Appending",
    "Mode",
    "Action",
    "transition",
    "can_finish",
    "can_cancel",
    "control_states",
    "ControlStates",
    "PointerEvent",
    "PointerAction",
    "MapView",
    "hit_test",
    "find_hovered_angle",
]

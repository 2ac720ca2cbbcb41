"""
Interaction modes.

The current mode is a single tagged-union value, so at most one
geometry-mutating interaction can be active by construction:

    Idle | Drawing | Editing(selected) | Appending(target, backup)

``transition`` is the explicit transition table. It only decides the next
mode; side effects (attaching capabilities, committing geometry) belong to
the interaction manager that owns the mode.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple, Union

from ..geometry.measurement import Coordinate
from ..model.feature import Feature


@dataclass(frozen=True)
class Idle:
    """No geometry-mutating interaction is active."""


@dataclass(frozen=True)
class Drawing:
    """A new line is being sketched."""


@dataclass(frozen=True)
class Editing:
    """Select+modify is active; ``selected`` may be None."""
    selected: Optional[Feature] = None


@dataclass(frozen=True)
class Appending:
    """
    ``target`` is being extended. ``backup`` is an immutable copy of the
    target's line taken when the append started.
    """
    target: Feature
    backup: Tuple[Coordinate, ...]


Mode = Union[Idle, Drawing, Editing, Appending]


class Action(Enum):
    START_DRAWING = auto()
    FINISH_DRAWING = auto()
    CANCEL_DRAWING = auto()
    TOGGLE_EDIT = auto()
    SELECT = auto()
    START_APPEND = auto()
    CONFIRM_APPEND = auto()
    CANCEL_APPEND = auto()


def transition(
    mode: Mode,
    action: Action,
    *,
    feature: Optional[Feature] = None,
    backup: Optional[Tuple[Coordinate, ...]] = None,
) -> Optional[Mode]:
    """
    Return the mode reached by applying ``action`` to ``mode``.

    Returns None when the action is not allowed from ``mode``; callers treat
    that as a no-op.
    """
    if action is Action.START_DRAWING:
        return Drawing() if isinstance(mode, Idle) else None

    if action in (Action.FINISH_DRAWING, Action.CANCEL_DRAWING):
        return Idle() if isinstance(mode, Drawing) else None

    if action is Action.TOGGLE_EDIT:
        if isinstance(mode, Idle):
            return Editing(None)
        if isinstance(mode, Editing):
            return Idle()
        return None

    if action is Action.SELECT:
        return Editing(feature) if isinstance(mode, Editing) else None

    if action is Action.START_APPEND:
        if isinstance(mode, Editing) and mode.selected is not None and backup is not None:
            return Appending(mode.selected, tuple(backup))
        return None

    if action in (Action.CONFIRM_APPEND, Action.CANCEL_APPEND):
        return Editing(mode.target) if isinstance(mode, Appending) else None

    return None


def is_drawing(mode: Mode) -> bool:
    return isinstance(mode, Drawing)


def is_appending(mode: Mode) -> bool:
    return isinstance(mode, Appending)


def is_editing(mode: Mode) -> bool:
    """True for the whole edit session, including an append started from it."""
    return isinstance(mode, (Editing, Appending))


def selected_feature(mode: Mode) -> Optional[Feature]:
    if isinstance(mode, Editing):
        return mode.selected
    if isinstance(mode, Appending):
        return mode.target
    return None


def can_finish(mode: Mode) -> bool:
    return isinstance(mode, (Drawing, Appending))


def can_cancel(mode: Mode) -> bool:
    if isinstance(mode, (Drawing, Appending)):
        return True
    return isinstance(mode, Editing) and mode.selected is not None


@dataclass(frozen=True)
class ControlStates:
    """Which controls are enabled for a given mode and feature count."""
    start_drawing: bool
    toggle_edit: bool
    start_append: bool
    edit_actions: bool
    numeric_input: bool
    show_numeric_inputs: bool


def control_states(mode: Mode, feature_count: int) -> ControlStates:
    drawing = is_drawing(mode)
    appending = is_appending(mode)
    editing = is_editing(mode)
    has_selection = selected_feature(mode) is not None

    selection_actions = isinstance(mode, Editing) and has_selection
    return ControlStates(
        start_drawing=not (drawing or editing),
        toggle_edit=not (drawing or appending or (not editing and feature_count == 0)),
        start_append=selection_actions,
        edit_actions=selection_actions,
        numeric_input=selection_actions,
        show_numeric_inputs=editing and has_selection,
    )

"""Pointer events delivered to editing capabilities."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class PointerAction(str, Enum):
    PRESS = "press"
    RELEASE = "release"
    MOVE = "move"
    DOUBLE_CLICK = "double_click"


@dataclass(frozen=True)
class PointerEvent:
    """
    One pointer event in both pixel and map space.

    ``button`` is 1 (left), 2 (middle) or 3 (right), 0 for pure moves.
    ``dragging`` is True while a button is held during a move.
    """
    action: PointerAction
    pixel: Tuple[float, float]
    coordinate: Tuple[float, float]
    button: int = 1
    pointer_type: str = "mouse"
    dragging: bool = False

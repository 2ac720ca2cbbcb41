"""Enter/Escape handling for the map."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QEvent, QObject, Qt
from PySide6.QtWidgets import QWidget

from ..state.interaction_manager import InteractionManager


class FinishCancelFilter(QObject):
    """
    Enter finishes the current drawing or append, Esc cancels it.

    Enter only acts while ``focus_widget`` (the map) has keyboard focus, so
    pressing Enter in a numeric field never finishes a sketch. Esc works
    regardless of focus.
    """

    def __init__(
        self,
        manager: InteractionManager,
        focus_widget: Optional[QWidget] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._manager = manager
        self._focus_widget = focus_widget

    def _map_has_focus(self) -> bool:
        return self._focus_widget is None or self._focus_widget.hasFocus()

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802 - Qt naming
        if event.type() == QEvent.Type.KeyPress:
            key = event.key()
            if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
                if self._manager.can_finish and self._map_has_focus():
                    self._manager.finish()
                    return True
            elif key == Qt.Key.Key_Escape:
                if self._manager.can_cancel:
                    self._manager.cancel()
                    return True
        return super().eventFilter(watched, event)


def install_finish_cancel_shortcuts(
    target: QObject,
    manager: InteractionManager,
    focus_widget: Optional[QWidget] = None,
) -> FinishCancelFilter:
    """
    Install a FinishCancelFilter on ``target`` (a widget, or the application
    for window-wide shortcuts) and return it.
    """
    event_filter = FinishCancelFilter(manager, focus_widget, target)
    target.installEventFilter(event_filter)
    return event_filter

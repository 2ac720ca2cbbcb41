"""
Capability plumbing.

A capability is one way of turning pointer events into geometry changes
(free draw, select+modify, append-draw). The CapabilitySurface attaches and
detaches capabilities by handle and routes pointer events to them in arrival
order. It does not decide which capability should be attached; that is the
interaction manager's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import itertools
import logging
from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from polymeasure_core.interaction.events import PointerEvent
from polymeasure_core.interaction.view import MapView

logger = logging.getLogger(__name__)

_handle_tokens = itertools.count(1)


class CapabilityKind(Enum):
    DRAW = "draw"
    SELECT_MODIFY = "select_modify"
    APPEND_DRAW = "append_draw"


class Capability(QObject):
    """Base class for editing capabilities."""

    kind: CapabilityKind
    overlay_changed = Signal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._active = True
        self._view: Optional[MapView] = None

    @property
    def view(self) -> Optional[MapView]:
        return self._view

    def is_active(self) -> bool:
        return self._active

    def set_active(self, active: bool) -> None:
        self._active = active

    def handle_event(self, event: PointerEvent) -> bool:
        """Return True when the event was consumed."""
        return False

    def overlay_coordinates(self) -> List[tuple]:
        """Temporary geometry to render on top of the finalized features."""
        return []

    def on_attached(self, view: MapView) -> None:
        self._view = view

    def on_detached(self) -> None:
        self._view = None


@dataclass(frozen=True, eq=False)
class CapabilityHandle:
    """Ticket returned by ``CapabilitySurface.attach``; detach with it."""
    capability: Capability
    token: int = field(default_factory=lambda: next(_handle_tokens))

    @property
    def kind(self) -> CapabilityKind:
        return self.capability.kind


class CapabilitySurface(QObject):
    """Tracks attached capabilities for one map view and feeds them pointer events."""

    attached_changed = Signal()
    overlay_changed = Signal()

    def __init__(self, view: MapView, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._view = view
        self._handles: List[CapabilityHandle] = []

    @property
    def view(self) -> MapView:
        return self._view

    def attach(self, capability: Capability) -> CapabilityHandle:
        handle = CapabilityHandle(capability)
        self._handles.append(handle)
        capability.on_attached(self._view)
        capability.overlay_changed.connect(self.overlay_changed)
        logger.debug("Attached %s capability (handle %d).", handle.kind.value, handle.token)
        self.attached_changed.emit()
        self.overlay_changed.emit()
        return handle

    def detach(self, handle: Optional[CapabilityHandle]) -> None:
        """Detach by handle. Unknown or already-detached handles are ignored."""
        if handle is None or handle not in self._handles:
            return
        self._handles.remove(handle)
        capability = handle.capability
        capability.overlay_changed.disconnect(self.overlay_changed)
        capability.on_detached()
        logger.debug("Detached %s capability (handle %d).", handle.kind.value, handle.token)
        self.attached_changed.emit()
        self.overlay_changed.emit()

    def is_attached(self, handle: Optional[CapabilityHandle]) -> bool:
        return handle is not None and handle in self._handles

    def handles(self) -> List[CapabilityHandle]:
        return list(self._handles)

    def dispatch(self, event: PointerEvent) -> bool:
        """
        Offer ``event`` to active capabilities, most recently attached first.

        Returns True when one of them consumed it.
        """
        for handle in reversed(list(self._handles)):
            capability = handle.capability
            if not capability.is_active() or handle not in self._handles:
                continue
            if capability.handle_event(event):
                return True
        return False

    def overlay_coordinates(self) -> List[List[tuple]]:
        lines = []
        for handle in self._handles:
            coords = handle.capability.overlay_coordinates()
            if len(coords) >= 2:
                lines.append(coords)
        return lines

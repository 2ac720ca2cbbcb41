"""Geometry-editing capabilities attached to the map surface."""

from .base import Capability, CapabilityHandle, CapabilityKind, CapabilitySurface
from .line_draw import LineDrawCapability
from .append_draw import AppendDrawCapability
from .select_modify import SelectModifyCapability

__all__ = [
    "Capability",
    "CapabilityHandle",
    "CapabilityKind",
    "CapabilitySurface",
    "LineDrawCapability",
    "AppendDrawCapability",
    "SelectModifyCapability",
]

"""Error taxonomy for polyline measurement and editing.

Every error derives from ``ValueError`` so callers that already guard input
validation with ``except ValueError`` keep working. None of these errors is
fatal: the interaction layer catches them at the action boundary and turns
them into a no-op.
"""


class PolyMeasureError(ValueError):
    """Base class for recoverable measurement/editing failures."""


class MalformedGeometryError(PolyMeasureError):
    """Coordinate sequence missing, too short, or non-numeric."""


class InvalidNumericInputError(PolyMeasureError):
    """Distance/bearing input is non-numeric, non-positive, or has an unknown unit."""


class ProjectionError(PolyMeasureError):
    """A coordinate could not be projected between map and geographic space."""


class InconsistentAppendStateError(PolyMeasureError):
    """The append backup is missing or longer than the live sketch."""

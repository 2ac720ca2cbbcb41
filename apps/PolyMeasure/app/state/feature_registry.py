"""Registry of finalized line features."""

from __future__ import annotations

import logging
from typing import Iterator, List

from PySide6.QtCore import QObject, Signal

from polymeasure_core.model.feature import MIN_LINE_POINTS, Feature, validate_line

logger = logging.getLogger(__name__)


class FeatureRegistry(QObject):
    """
    Owns every finalized Feature.

    Every feature held here has at least two points. Updating a feature with
    a shorter line removes it instead.
    """

    feature_added = Signal(object)
    feature_removed = Signal(object)
    feature_changed = Signal(object)
    count_changed = Signal(int)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._features: List[Feature] = []

    def add(self, line) -> Feature:
        """Create a feature from ``line``. Raises MalformedGeometryError."""
        feature = Feature.from_line(line)
        self._features.append(feature)
        logger.debug("Feature %s added with %d points.", feature.feature_id, len(feature))
        self.feature_added.emit(feature)
        self.count_changed.emit(len(self._features))
        return feature

    def remove(self, feature: Feature) -> bool:
        if feature not in self._features:
            return False
        self._features.remove(feature)
        logger.debug("Feature %s removed.", feature.feature_id)
        self.feature_removed.emit(feature)
        self.count_changed.emit(len(self._features))
        return True

    def update_line(self, feature: Feature, line) -> bool:
        """
        Replace the line of ``feature``.

        Returns False if the feature is unknown or was removed because the new
        line has fewer than two points. Malformed coordinates raise
        MalformedGeometryError and leave the feature untouched.
        """
        if feature not in self._features:
            return False
        if line is None or len(line) < MIN_LINE_POINTS:
            self.remove(feature)
            return False
        feature.set_coordinates(validate_line(line))
        self.feature_changed.emit(feature)
        return True

    def count(self) -> int:
        return len(self._features)

    def features(self) -> List[Feature]:
        return list(self._features)

    def clear(self) -> None:
        for feature in list(self._features):
            self.remove(feature)

    def __contains__(self, feature: object) -> bool:
        return feature in self._features

    def __iter__(self) -> Iterator[Feature]:
        return iter(list(self._features))

    def __len__(self) -> int:
        return len(self._features)

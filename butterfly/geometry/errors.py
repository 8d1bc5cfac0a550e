"""Geometry error taxonomy.

The low-level routines raise these; ``compute()`` turns them into
``GeometryErrorInfo`` values so callers never see NaN coordinates.
"""

from __future__ import annotations

from butterfly.models import GeometryErrorInfo, GeometryErrorKind


class GeometryError(ValueError):
    """Base class for every condition the engine detects."""

    kind: GeometryErrorKind

    def to_info(self) -> GeometryErrorInfo:
        return GeometryErrorInfo(kind=self.kind, message=str(self))


class InvalidConfiguration(GeometryError):
    """Radius non-positive, or M not strictly inside the circle."""

    kind: GeometryErrorKind = "InvalidConfiguration"


class OutOfDomain(GeometryError):
    """A chord direction through the offset point misses the circle."""

    kind: GeometryErrorKind = "OutOfDomain"


class UndefinedIntersection(GeometryError):
    """A wing line is parallel to or coincident with PQ."""

    kind: GeometryErrorKind = "UndefinedIntersection"

"""Pydantic models -- shared contract between the engine, routes and front end.

API Naming Contract:
  - Backend models use snake_case field names (Python convention).
  - The front end expects camelCase (TypeScript convention).
  - Every model inherits CamelModel, so model.model_dump(by_alias=True)
    produces camelCase keys automatically, and populate_by_name=True lets
    callers send either format.
  - ``angle_ab`` / ``angle_cd`` are aliased explicitly to ``angleAB`` /
    ``angleCD`` to match the slider names used by the front end.
"""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Enum / Literal Types
# ---------------------------------------------------------------------------

GeometryErrorKind = Literal[
    "InvalidConfiguration",
    "OutOfDomain",
    "UndefinedIntersection",
]
SweepField = Literal["angle_ab", "angle_cd"]


# ---------------------------------------------------------------------------
# Base model for camelCase serialization
# ---------------------------------------------------------------------------

class CamelModel(BaseModel):
    """Base for models serialized to the front end with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


# ---------------------------------------------------------------------------
# Point
# ---------------------------------------------------------------------------

class Point(CamelModel):
    """Immutable 2-D point. No identity beyond its coordinates."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        """Euclidean distance to *other*."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def is_close(self, other: Point, tol: float = 1e-9) -> bool:
        """True if both coordinates agree with *other* within *tol*."""
        return abs(self.x - other.x) <= tol and abs(self.y - other.y) <= tol


# ---------------------------------------------------------------------------
# Configuration -- the four user-adjustable scalars
# ---------------------------------------------------------------------------

class Configuration(CamelModel):
    """Inputs of one butterfly construction.

    The circle is centred at the origin.  The fixed chord PQ is horizontal at
    ``y = chord_offset`` and its midpoint M is ``(0, chord_offset)``.  Both
    movable chords pass through M at the given directions (degrees).

    Only finiteness is enforced here.  ``radius > 0`` and
    ``|chord_offset| < radius`` are checked by the engine, which reports a
    violation as an ``InvalidConfiguration`` result instead of a parse error.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    radius: float = 160.0
    chord_offset: float = 50.0
    # Slider range is [0, 180); outside values still compute (see W01).
    angle_ab: float = Field(default=60.0, alias="angleAB")
    angle_cd: float = Field(default=120.0, alias="angleCD")


# ---------------------------------------------------------------------------
# Construction output
# ---------------------------------------------------------------------------

class ConstructionPoints(CamelModel):
    """All nine points of the construction, derived wholesale per call.

    Keys stay upper-case single letters on the wire, as labelled in the figure.
    """

    model_config = ConfigDict(alias_generator=None, frozen=True)

    P: Point
    Q: Point
    M: Point
    A: Point
    B: Point
    C: Point
    D: Point
    X: Point
    Y: Point


class DerivedValues(CamelModel):
    """Distance readouts computed from a ConstructionPoints."""

    xm: float
    my: float
    pq_length: float
    ab_length: float
    cd_length: float
    invariant_residual: float


class ValidationWarning(CamelModel):
    """Non-blocking validation warning."""

    id: str  # W01-W05
    level: Literal["warn"] = "warn"
    message: str
    fields: list[str] = Field(default_factory=list)


class GeometryErrorInfo(CamelModel):
    """Serializable form of a GeometryError."""

    kind: GeometryErrorKind
    message: str


class ConstructionResult(CamelModel):
    """Value-level result of ``compute()``.

    Exactly one of ``points`` / ``error`` is set.  ``derived`` accompanies
    ``points``.  Warnings are reported in both cases.
    """

    configuration: Configuration
    points: ConstructionPoints | None = None
    derived: DerivedValues | None = None
    error: GeometryErrorInfo | None = None
    warnings: list[ValidationWarning] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.points is not None


# ---------------------------------------------------------------------------
# REST Request/Response Types
# ---------------------------------------------------------------------------

class SweepRequest(CamelModel):
    """Request body for POST /api/sweep."""

    configuration: Configuration = Field(default_factory=Configuration)
    field: SweepField = "angle_ab"
    start: float = Field(default=0.0, allow_inf_nan=False)
    stop: float = Field(default=180.0, allow_inf_nan=False)
    count: int = Field(default=181, ge=2, le=2001)


class SweepResponse(CamelModel):
    """Response from POST /api/sweep.  Invalid samples hold ``None``."""

    field: SweepField
    angles: list[float]
    xm: list[float | None]
    my: list[float | None]
    x: list[float | None]
    y: list[float | None]
    valid: list[bool]
    max_residual: float | None = None

"""Geometry engine -- construction assembly, derived values, and angle sweeps.

This module ties the intersection routines together and provides the entry
points used by the REST/WebSocket handlers.

- ``build_construction()`` -- all nine points, raises ``GeometryError``
- ``compute()`` -- value-level result, never raises for geometry failures
- ``compute_derived_values()`` -- pure distances for the readouts
- ``sweep_angle()`` -- readouts across one slider's range, as numpy arrays
"""

from __future__ import annotations

import logging
import math
from typing import Any

import numpy as np

from butterfly.geometry.errors import (
    GeometryError,
    InvalidConfiguration,
    OutOfDomain,
    UndefinedIntersection,
)
from butterfly.geometry.intersections import (
    circle_line_intersection,
    line_horizontal_intersection,
)
from butterfly.models import (
    Configuration,
    ConstructionPoints,
    ConstructionResult,
    DerivedValues,
    Point,
    SweepField,
)
from butterfly.validation import compute_warnings

logger = logging.getLogger("butterfly.engine")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _fixed_chord(radius: float, offset: float) -> tuple[Point, Point]:
    """Endpoints (P, Q) of the horizontal chord at ``y = offset``.

    The half length is ``R * sqrt((1 - m)(1 + m))`` with ``m = offset / R``,
    which stays finite for any finite radius.

    Raises:
        InvalidConfiguration: If the radius is not positive or M = (0, offset)
            is not strictly inside the circle.
    """
    if not radius > 0:
        raise InvalidConfiguration(f"radius must be positive, got {radius}")
    if abs(offset) >= radius:
        raise InvalidConfiguration(
            f"|chord offset| must be < radius, got offset={offset}, radius={radius}"
        )
    m = offset / radius
    half = radius * math.sqrt((1.0 - m) * (1.0 + m))
    return Point(x=-half, y=offset), Point(x=half, y=offset)


def _scale(point: Point, factor: float) -> Point:
    return Point(x=point.x * factor, y=point.y * factor)


def _require_finite(values: dict[str, float], what: str) -> None:
    """Raise OutOfDomain if any value overflowed to inf or became NaN."""
    bad = [name for name, value in values.items() if not math.isfinite(value)]
    if bad:
        raise OutOfDomain(f"{what} not representable as finite floats: {', '.join(bad)}")


# ---------------------------------------------------------------------------
# Public API: Construction
# ---------------------------------------------------------------------------


def build_construction(config: Configuration) -> ConstructionPoints:
    """Compute every point of the butterfly construction.

    **Steps:**
    1. M = (0, d).
    2. P, Q from the half chord length sqrt(R^2 - d^2).
    3. A, B on the chord through M at ``angle_ab``.
    4. C, D on the chord through M at ``angle_cd``.
    5. X = AD meets PQ, Y = BC meets PQ.

    Steps 3-5 run on the unit circle (offset ``d / R``) and the points are
    scaled back by ``R``, so the intersection tolerances are relative to the
    radius and very large or very small circles neither overflow nor
    collapse.

    The wings pair the first endpoint of one chord with the second endpoint
    of the other (A-D, B-C).  A-C / B-D satisfies the theorem as well, but
    draws the crossed figure rather than the classical butterfly.

    Raises:
        InvalidConfiguration: If ``radius <= 0`` or ``|chord_offset| >= radius``.
        OutOfDomain: If a chord direction misses the circle, or a coordinate
            is not representable as a finite float.
        UndefinedIntersection: If a wing line is parallel to PQ.
    """
    radius = config.radius
    offset = config.chord_offset

    m = Point(x=0.0, y=offset)
    p, q = _fixed_chord(radius, offset)

    unit_offset = offset / radius
    a, b = circle_line_intersection(config.angle_ab, unit_offset, 1.0)
    c, d = circle_line_intersection(config.angle_cd, unit_offset, 1.0)

    try:
        x = line_horizontal_intersection(a, d, unit_offset)
        y = line_horizontal_intersection(b, c, unit_offset)
    except UndefinedIntersection as exc:
        raise UndefinedIntersection(
            f"wing line parallel to PQ (angle_ab={config.angle_ab}, "
            f"angle_cd={config.angle_cd}, chord offset={offset})"
        ) from exc

    points = ConstructionPoints(
        P=p,
        Q=q,
        M=m,
        A=_scale(a, radius),
        B=_scale(b, radius),
        C=_scale(c, radius),
        D=_scale(d, radius),
        X=Point(x=x.x * radius, y=offset),
        Y=Point(x=y.x * radius, y=offset),
    )
    _require_finite(
        {f"{name}.{axis}": value for name, point in points for axis, value in point},
        "construction points",
    )
    return points


def compute_derived_values(points: ConstructionPoints) -> dict[str, float]:
    """Distance readouts for a construction -- pure math.

    Returns:
        Dict with keys: xm, my, pq_length, ab_length, cd_length,
        invariant_residual.
    """
    xm = points.X.distance_to(points.M)
    my = points.M.distance_to(points.Y)
    return {
        "xm": xm,
        "my": my,
        "pq_length": points.P.distance_to(points.Q),
        "ab_length": points.A.distance_to(points.B),
        "cd_length": points.C.distance_to(points.D),
        "invariant_residual": abs(xm - my),
    }


def compute(config: Configuration) -> ConstructionResult:
    """Build a construction and report it, or the reason it failed, as a value.

    Geometry failures become ``ConstructionResult.error``; they are never
    raised to the caller.  Warnings are attached in both cases.
    """
    try:
        points = build_construction(config)
        derived = compute_derived_values(points)
        _require_finite(derived, "derived values")
    except GeometryError as exc:
        logger.debug("Construction failed (%s): %s", exc.kind, exc)
        return ConstructionResult(
            configuration=config,
            error=exc.to_info(),
            warnings=compute_warnings(config),
        )

    return ConstructionResult(
        configuration=config,
        points=points,
        derived=DerivedValues(**derived),
        warnings=compute_warnings(config, derived),
    )


# ---------------------------------------------------------------------------
# Public API: Sweeps
# ---------------------------------------------------------------------------


def sweep_angle(
    config: Configuration,
    field: SweepField = "angle_ab",
    start: float = 0.0,
    stop: float = 180.0,
    count: int = 181,
) -> dict[str, Any]:
    """Recompute the construction for evenly spaced values of one angle.

    The other three inputs come from *config*.  Samples whose construction
    fails are marked ``False`` in ``valid`` and hold NaN in the float arrays.

    Returns:
        Dict of numpy arrays, each of length *count*: ``angles``, ``xm``,
        ``my``, ``x`` (X.x), ``y`` (Y.x) and the boolean ``valid`` mask.

    Raises:
        ValueError: If *field* is not an angle field or *count* < 2.
    """
    if field not in ("angle_ab", "angle_cd"):
        raise ValueError(f"cannot sweep field {field!r}")
    if count < 2:
        raise ValueError(f"count must be >= 2, got {count}")

    angles = np.linspace(start, stop, count)
    xm = np.full(count, np.nan)
    my = np.full(count, np.nan)
    xs = np.full(count, np.nan)
    ys = np.full(count, np.nan)
    valid = np.zeros(count, dtype=bool)

    for i, angle in enumerate(angles):
        sample = config.model_copy(update={field: float(angle)})
        try:
            points = build_construction(sample)
        except GeometryError:
            continue
        xm[i] = points.X.distance_to(points.M)
        my[i] = points.M.distance_to(points.Y)
        xs[i] = points.X.x
        ys[i] = points.Y.x
        valid[i] = True

    return {
        "angles": angles,
        "xm": xm,
        "my": my,
        "x": xs,
        "y": ys,
        "valid": valid,
    }


def max_invariant_residual(sweep: dict[str, Any]) -> float | None:
    """Largest ``| |XM| - |MY| |`` over the valid samples of a sweep."""
    valid = sweep["valid"]
    if not valid.any():
        return None
    return float(np.max(np.abs(sweep["xm"][valid] - sweep["my"][valid])))

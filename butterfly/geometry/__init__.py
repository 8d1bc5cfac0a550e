"""Geometry engine -- public API re-exports.

Usage::

    from butterfly.geometry import compute, build_construction, sweep_angle
"""

from __future__ import annotations

from butterfly.geometry.engine import (
    build_construction,
    compute,
    compute_derived_values,
    max_invariant_residual,
    sweep_angle,
)
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

__all__ = [
    "GeometryError",
    "InvalidConfiguration",
    "OutOfDomain",
    "UndefinedIntersection",
    "build_construction",
    "circle_line_intersection",
    "compute",
    "compute_derived_values",
    "line_horizontal_intersection",
    "max_invariant_residual",
    "sweep_angle",
]

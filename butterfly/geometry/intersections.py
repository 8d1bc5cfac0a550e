"""Closed-form intersections used by the butterfly construction.

- ``circle_line_intersection()`` -- line through (0, m) at angle theta vs.
  the circle x^2 + y^2 = R^2
- ``line_horizontal_intersection()`` -- line through two points vs. y = c

Both are pure and raise a ``GeometryError`` subclass instead of returning
NaN when the geometry has no (unique) answer.
"""

from __future__ import annotations

import math

from butterfly.config import PARALLEL_TOLERANCE, VERTICAL_TOLERANCE
from butterfly.geometry.errors import (
    InvalidConfiguration,
    OutOfDomain,
    UndefinedIntersection,
)
from butterfly.models import Point


def circle_line_intersection(
    angle_deg: float,
    offset: float,
    radius: float,
) -> tuple[Point, Point]:
    """Intersect the line through ``(0, offset)`` at ``angle_deg`` with the circle.

    The line is parametrised as ``(t*cos(theta), offset + t*sin(theta))``.
    Substituting into ``x^2 + y^2 = R^2`` gives

        t^2 + (2*m*sin(theta))*t + (m^2 - R^2) = 0

    The quadratic is solved on the unit circle (``m = offset / R``, ``t``
    in radii) and scaled back, with the discriminant in factored form

        disc / 4 = (1 - m*cos(theta)) * (1 + m*cos(theta))

    so no square of ``R`` or ``m`` is ever formed and neither huge nor tiny
    radii overflow or underflow.

    Root order is fixed: the ``+sqrt(disc)`` root is returned first and the
    ``-sqrt(disc)`` root second.  For an interior point the first root is
    the endpoint in the direction of ``theta`` and the second the opposite
    one, so endpoint labels never swap while the angle varies continuously.

    Returns:
        (first, second) -- identical points when the line is tangent.

    Raises:
        InvalidConfiguration: If ``radius`` is not positive.
        OutOfDomain: If the line misses the circle (negative discriminant).
    """
    if not radius > 0:
        raise InvalidConfiguration(f"radius must be positive, got {radius}")

    theta = math.radians(angle_deg)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    m = offset / radius
    m_cos = m * cos_t
    quarter_disc = (1.0 - m_cos) * (1.0 + m_cos)

    if not quarter_disc >= 0:
        raise OutOfDomain(
            f"line through (0, {offset}) at {angle_deg} deg misses circle "
            f"of radius {radius} (discriminant {4.0 * quarter_disc:.6g})"
        )

    half_root = math.sqrt(quarter_disc)
    t1 = (-m * sin_t + half_root) * radius
    t2 = (-m * sin_t - half_root) * radius

    return (
        Point(x=t1 * cos_t, y=offset + t1 * sin_t),
        Point(x=t2 * cos_t, y=offset + t2 * sin_t),
    )


def line_horizontal_intersection(p1: Point, p2: Point, y_line: float) -> Point:
    """Return where the line through *p1* and *p2* crosses ``y = y_line``.

    A (near-)vertical line crosses at ``p1.x``.  A horizontal line either
    lies on ``y = y_line`` (infinitely many crossings) or never meets it;
    both raise ``UndefinedIntersection``.
    """
    dx = p2.x - p1.x
    dy = p2.y - p1.y

    if abs(dx) < VERTICAL_TOLERANCE:
        return Point(x=p1.x, y=y_line)

    if abs(dy) < PARALLEL_TOLERANCE:
        if abs(p1.y - y_line) < PARALLEL_TOLERANCE:
            raise UndefinedIntersection(
                f"line through ({p1.x:.6g}, {p1.y:.6g}) and "
                f"({p2.x:.6g}, {p2.y:.6g}) coincides with y = {y_line}"
            )
        raise UndefinedIntersection(
            f"line through ({p1.x:.6g}, {p1.y:.6g}) and "
            f"({p2.x:.6g}, {p2.y:.6g}) is parallel to y = {y_line}"
        )

    slope = dy / dx
    return Point(x=p1.x + (y_line - p1.y) / slope, y=y_line)

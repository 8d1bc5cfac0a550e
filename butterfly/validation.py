"""Validation rules -- compute non-blocking warnings for a configuration.

Implements:
  - 4 input warnings                  (W01-W04)
  - 1 result warning                  (W05)

All warnings are level="warn" and never block a construction.  Hard
failures (non-positive radius, M outside the circle, wing line parallel to
PQ) are GeometryError results from the engine, not warnings.
"""

from __future__ import annotations

from butterfly.config import INVARIANT_TOLERANCE
from butterfly.models import Configuration, ValidationWarning

# Angular distance (degrees) under which two chord directions count as "close".
NEAR_ANGLE_DEG: float = 1.0
# |offset| / radius above which PQ counts as nearly tangent.
NEAR_TANGENT_RATIO: float = 0.95


def _line_angle_gap(a: float, b: float) -> float:
    """Smallest angle between two undirected line directions, in [0, 90]."""
    diff = (a - b) % 180.0
    return min(diff, 180.0 - diff)


# ---------------------------------------------------------------------------
# Input warnings  (W01 - W04)
# ---------------------------------------------------------------------------


def _check_w01(config: Configuration, out: list[ValidationWarning]) -> None:
    """W01: a chord angle outside the slider range [0, 180)."""
    fields = [
        name
        for name, value in (("angle_ab", config.angle_ab), ("angle_cd", config.angle_cd))
        if not 0.0 <= value < 180.0
    ]
    if fields:
        out.append(
            ValidationWarning(
                id="W01",
                message="Chord angle outside [0, 180) -- endpoint labels may swap",
                fields=fields,
            )
        )


def _check_w02(config: Configuration, out: list[ValidationWarning]) -> None:
    """W02: chords AB and CD nearly coincide -- the wings collapse onto one chord."""
    if _line_angle_gap(config.angle_ab, config.angle_cd) < NEAR_ANGLE_DEG:
        out.append(
            ValidationWarning(
                id="W02",
                message="Chords AB and CD nearly coincide -- X and Y collapse towards M",
                fields=["angle_ab", "angle_cd"],
            )
        )


def _check_w03(config: Configuration, out: list[ValidationWarning]) -> None:
    """W03: a movable chord nearly coincides with PQ."""
    fields = [
        name
        for name, value in (("angle_ab", config.angle_ab), ("angle_cd", config.angle_cd))
        if _line_angle_gap(value, 0.0) < NEAR_ANGLE_DEG
    ]
    if fields:
        out.append(
            ValidationWarning(
                id="W03",
                message="Chord nearly parallel to PQ -- X or Y may be undefined",
                fields=fields,
            )
        )


def _check_w04(config: Configuration, out: list[ValidationWarning]) -> None:
    """W04: |offset| > 95% of radius -- PQ is nearly tangent, points crowd together."""
    ratio = abs(config.chord_offset) / config.radius if config.radius > 0 else 0.0
    if NEAR_TANGENT_RATIO < ratio < 1.0:
        out.append(
            ValidationWarning(
                id="W04",
                message="Chord PQ nearly tangent to the circle",
                fields=["chord_offset", "radius"],
            )
        )


# ---------------------------------------------------------------------------
# Result warning  (W05)
# ---------------------------------------------------------------------------


def _check_w05(derived: dict[str, float], out: list[ValidationWarning]) -> None:
    """W05: |XM| and |MY| differ by more than the relative invariant tolerance."""
    scale = max(derived["xm"], derived["my"])
    if derived["invariant_residual"] > INVARIANT_TOLERANCE * scale:
        out.append(
            ValidationWarning(
                id="W05",
                message="XM and MY differ beyond floating-point tolerance",
                fields=["angle_ab", "angle_cd"],
            )
        )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def compute_warnings(
    config: Configuration,
    derived: dict[str, float] | None = None,
) -> list[ValidationWarning]:
    """Run all validation checks and return the triggered warnings.

    Args:
        config: The configuration being constructed.
        derived: Output of ``compute_derived_values()``, when the
            construction succeeded.  W05 is skipped without it.

    Returns:
        List of ValidationWarning objects, each carrying an id, message,
        and the list of affected field names.
    """
    warnings: list[ValidationWarning] = []

    _check_w01(config, warnings)
    _check_w02(config, warnings)
    _check_w03(config, warnings)
    _check_w04(config, warnings)

    if derived is not None:
        _check_w05(derived, warnings)

    return warnings

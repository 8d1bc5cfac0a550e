"""Runtime configuration -- environment-driven defaults and shared tolerances.

Environment variables
---------------------
BUTTERFLY_RADIUS         default circle radius (160)
BUTTERFLY_CHORD_OFFSET   default distance from centre to chord PQ (50)
BUTTERFLY_ANGLE_AB       default direction of chord AB in degrees (60)
BUTTERFLY_ANGLE_CD       default direction of chord CD in degrees (120)
BUTTERFLY_LOG_LEVEL      level of the ``butterfly`` logger (INFO)
BUTTERFLY_CORS_ORIGINS   comma-separated allowed origins (Vite dev server)

Values are read on every call so tests can ``monkeypatch.setenv`` freely.
Unparsable values fall back to the default with a warning, so a
misconfigured deployment never silently breaks.
"""

from __future__ import annotations

import logging
import math
import os

from butterfly.models import Configuration

logger = logging.getLogger("butterfly.config")

VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Tolerances (shared by the engine and the tests)
# ---------------------------------------------------------------------------

# |dx| below which a connecting line is treated as vertical.
VERTICAL_TOLERANCE: float = 1e-9
# |dy| below which a connecting line is treated as horizontal (parallel to PQ).
PARALLEL_TOLERANCE: float = 1e-12
# Relative tolerance for |XM| == |MY|.
INVARIANT_TOLERANCE: float = 1e-6

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_RADIUS: float = 160.0
DEFAULT_CHORD_OFFSET: float = 50.0
DEFAULT_ANGLE_AB: float = 60.0
DEFAULT_ANGLE_CD: float = 120.0

_DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")
_VALID_LOG_LEVELS: frozenset[str] = frozenset(
    {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
)


def _env_float(name: str, default: float) -> float:
    """Read a finite float from the environment, or return *default*."""
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r -- not a number, using %s", name, raw, default)
        return default
    if not math.isfinite(value):
        logger.warning("Ignoring %s=%r -- not finite, using %s", name, raw, default)
        return default
    return value


def get_default_configuration() -> Configuration:
    """Return the Configuration the front end starts from.

    The values are not validated against each other here: a deployment that
    sets ``BUTTERFLY_CHORD_OFFSET`` beyond the radius gets an
    ``InvalidConfiguration`` result from the engine, which is the same thing
    any client would see for that input.
    """
    return Configuration(
        radius=_env_float("BUTTERFLY_RADIUS", DEFAULT_RADIUS),
        chord_offset=_env_float("BUTTERFLY_CHORD_OFFSET", DEFAULT_CHORD_OFFSET),
        angle_ab=_env_float("BUTTERFLY_ANGLE_AB", DEFAULT_ANGLE_AB),
        angle_cd=_env_float("BUTTERFLY_ANGLE_CD", DEFAULT_ANGLE_CD),
    )


def get_log_level() -> str:
    """Return the configured level name for the ``butterfly`` logger."""
    raw = os.environ.get("BUTTERFLY_LOG_LEVEL", "INFO").strip().upper()
    if raw not in _VALID_LOG_LEVELS:
        logger.warning(
            "Unknown BUTTERFLY_LOG_LEVEL=%r -- falling back to 'INFO'. "
            "Valid values are: %s",
            raw,
            ", ".join(sorted(_VALID_LOG_LEVELS)),
        )
        return "INFO"
    return raw


def get_cors_origins() -> list[str]:
    """Return the list of origins allowed by the CORS middleware."""
    raw = os.environ.get("BUTTERFLY_CORS_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or list(_DEFAULT_CORS_ORIGINS)

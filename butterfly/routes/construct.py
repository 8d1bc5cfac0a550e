"""POST /api/construct and POST /api/sweep -- REST access to the engine.

Geometry failures are part of the response body (``ConstructionResult.error``),
so both endpoints answer 200 for any well-formed request.  Malformed or
non-finite input is rejected by FastAPI with 422.
"""

from __future__ import annotations

import logging
import math

from fastapi import APIRouter, HTTPException

from butterfly.geometry.engine import compute, max_invariant_residual, sweep_angle
from butterfly.models import (
    Configuration,
    ConstructionResult,
    SweepRequest,
    SweepResponse,
)

logger = logging.getLogger("butterfly.construct")

router = APIRouter(prefix="/api", tags=["construct"])


def _finite_or_none(values) -> list[float | None]:
    """JSON has no NaN -- map invalid samples to null."""
    return [float(v) if math.isfinite(v) else None for v in values]


@router.post("/construct", response_model=ConstructionResult)
async def construct(config: Configuration) -> ConstructionResult:
    """Compute all nine construction points, readouts and warnings."""
    try:
        result = compute(config)
    except Exception as exc:
        logger.exception("Construction failed unexpectedly")
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    if result.error is not None:
        logger.debug("Construction rejected: %s", result.error.kind)
    return result


@router.post("/sweep", response_model=SweepResponse)
async def sweep(request: SweepRequest) -> SweepResponse:
    """Sample |XM| and |MY| across one angle's range."""
    try:
        data = sweep_angle(
            request.configuration,
            field=request.field,
            start=request.start,
            stop=request.stop,
            count=request.count,
        )
    except Exception as exc:
        logger.exception("Sweep failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return SweepResponse(
        field=request.field,
        angles=[float(a) for a in data["angles"]],
        xm=_finite_or_none(data["xm"]),
        my=_finite_or_none(data["my"]),
        x=_finite_or_none(data["x"]),
        y=_finite_or_none(data["y"]),
        valid=[bool(v) for v in data["valid"]],
        max_residual=max_invariant_residual(data),
    )

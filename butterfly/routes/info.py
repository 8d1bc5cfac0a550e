"""Info route -- exposes runtime configuration to the front end.

GET /api/info returns the default slider positions and the tolerances the
engine uses, so the UI starts from the same configuration the backend
would pick and can label "equal" readouts consistently.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from butterfly.config import (
    INVARIANT_TOLERANCE,
    PARALLEL_TOLERANCE,
    VERTICAL_TOLERANCE,
    get_default_configuration,
)

router = APIRouter(prefix="/api", tags=["info"])


@router.get("/info")
async def get_info(request: Request) -> dict:
    """Return runtime information about the current deployment.

    Response fields
    ---------------
    version : str
        Application version string sourced from the FastAPI app metadata.
    defaults : dict
        Default Configuration (camelCase keys).
    tolerances : dict
        ``vertical``, ``parallel`` and ``invariant`` tolerance constants.
    """
    return {
        "version": request.app.version,
        "defaults": get_default_configuration().model_dump(by_alias=True),
        "tolerances": {
            "vertical": VERTICAL_TOLERANCE,
            "parallel": PARALLEL_TOLERANCE,
            "invariant": INVARIANT_TOLERANCE,
        },
    }

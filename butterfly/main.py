"""FastAPI application -- entry point for the butterfly backend.

Lifespan applies the configured log level, registers route modules, and
serves the health endpoint.  Run with::

    uvicorn butterfly.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from butterfly.config import VERSION, get_cors_origins, get_default_configuration, get_log_level
from butterfly.geometry.engine import compute
from butterfly.routes.construct import router as construct_router
from butterfly.routes.info import router as info_router
from butterfly.routes.websocket import router as websocket_router

logger = logging.getLogger("butterfly")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup tasks:
    1. Apply BUTTERFLY_LOG_LEVEL to the ``butterfly`` logger
    2. Check that the default configuration constructs, so a bad
       environment shows up in the log at start-up rather than per request
    """
    logger.setLevel(get_log_level())

    defaults = get_default_configuration()
    result = compute(defaults)
    if result.error is not None:
        logger.warning(
            "Default configuration is not constructible (%s): %s",
            result.error.kind,
            result.error.message,
        )
    else:
        logger.info(
            "Default configuration ready: R=%s d=%s angles=%s/%s",
            defaults.radius,
            defaults.chord_offset,
            defaults.angle_ab,
            defaults.angle_cd,
        )
    yield


app = FastAPI(title="Butterfly Theorem", version=VERSION, lifespan=lifespan)

# ---------------------------------------------------------------------------
# CORS middleware for development (Vite dev server at localhost:5173)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# API route registration
# ---------------------------------------------------------------------------
app.include_router(construct_router)
app.include_router(info_router)
app.include_router(websocket_router)


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": VERSION}

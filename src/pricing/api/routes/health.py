"""Liveness and readiness probes."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

log = structlog.get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/liveness")
async def liveness() -> JSONResponse:
    return JSONResponse(content={"status": "UP"})


@router.get("/readiness")
async def readiness(request: Request) -> JSONResponse:
    """UP once the price database answers queries."""
    database = getattr(request.app.state, "database", None)
    try:
        ready = database is not None and await database.ping()
    except Exception as e:
        log.warning("readiness_check_failed", error=str(e))
        ready = False
    if not ready:
        return JSONResponse(content={"status": "DOWN"}, status_code=503)
    return JSONResponse(content={"status": "UP"})

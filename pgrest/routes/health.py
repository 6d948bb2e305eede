"""
pgrest - Health Check Route
===========================

What:  Liveness/readiness probe for load balancers and container health checks.
How:   Runs `SELECT 1` through the engine created in the application lifespan.

Status levels:
    healthy:   database reachable
    degraded:  database unreachable, or no engine (lifespan not run, e.g. tests)

Authentication:
    The route sits behind the same middleware stack as everything else.
    With debug off the JWT middleware wraps it, so unauthenticated probes
    get 401. Load balancers must send a bearer token, or treat 401 as "up".
"""

import logging
import time

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field
from sqlalchemy import text

from pgrest import __version__

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    database: str = Field(description="connected, disconnected, not_initialized")
    uptime_seconds: float = Field(description="Seconds since the module was loaded")


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(request: Request) -> HealthResponse:
    db_status = "not_initialized"

    engine = getattr(request.app.state, "engine", None)
    if engine is not None:
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            db_status = "connected"
        except Exception as e:
            db_status = "disconnected"
            logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status="healthy" if db_status == "connected" else "degraded",
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

"""
ItemDrop Backend - Health Check Route
=======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database and the content bucket and returns an aggregate status.

Status levels:
    - healthy:   database and object store reachable (HTTP 200)
    - degraded:  object store unreachable; text-only items still work (HTTP 200)
    - unhealthy: database unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text

from itemdrop import __version__
from itemdrop.config import settings
from itemdrop.schemas.item import HealthResponse
from itemdrop.services.object_store import ObjectStore, get_object_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    response: Response,
    store: ObjectStore = Depends(get_object_store),
) -> HealthResponse:
    """Probe the database with SELECT 1 and the content bucket with a reachability check."""
    db_status = "connected"
    store_status = "available"
    overall = "healthy"

    try:
        from itemdrop.database import engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    if not await store.health_check(settings.content_bucket):
        store_status = "unavailable"
        if overall != "unhealthy":
            overall = "degraded"

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        object_store=store_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

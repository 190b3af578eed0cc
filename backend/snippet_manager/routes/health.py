"""
Snippet Manager Backend — Health Check Route
==============================================

What:  Health check endpoint for monitoring and load balancer probes.
Why:   Load balancers route away from instances that cannot serve traffic.
How:   Probes the datastore (SELECT 1) and the AI provider (model listing)
       and reports an aggregate status. No authentication.

Status levels:
    healthy:   datastore and AI provider reachable (HTTP 200)
    degraded:  AI provider unreachable; snippet CRUD still works (HTTP 200)
    unhealthy: datastore unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from snippet_manager import __version__
from snippet_manager.database import Database
from snippet_manager.dependencies import get_ai_service, get_database
from snippet_manager.schemas.snippet import HealthResponse
from snippet_manager.services.ai_service import AIAssistService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Datastore unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    database: Database = Depends(get_database),
    ai_service: AIAssistService = Depends(get_ai_service),
) -> HealthResponse:
    db_status = "connected"
    ai_status = "available"
    overall = "healthy"

    # ── Check Datastore ───────────────────────────────────────────────────
    try:
        await database.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: datastore unreachable: %s", str(e))

    # ── Check AI Provider ─────────────────────────────────────────────────
    if not await ai_service.provider.health_check():
        ai_status = "unavailable"
        if overall != "unhealthy":
            overall = "degraded"

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        ai_provider=ai_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

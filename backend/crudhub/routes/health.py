"""
CrudHub Backend — Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
Why:   A resource whose store failed to connect must be visible somewhere
       other than the startup log.
How:   Pings every registered collection and aggregates the result.

Status levels:
    - healthy:   every resource available (HTTP 200)
    - degraded:  at least one resource unavailable (HTTP 200)
    - unhealthy: no resource available (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from crudhub import __version__
from crudhub.resources import ResourceRegistry
from crudhub.schemas.api import HealthResponse, ResourceHealth

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "No resource is available", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request):
    """
    Check the availability of every mounted resource.

    Memory collections are always available; document collections run a
    SELECT 1 against the store (only if the startup connection succeeded).
    """
    registry: ResourceRegistry = request.app.state.registry
    availability = await registry.check()

    resources = {}
    for resource in registry:
        resources[resource.name] = ResourceHealth(
            backend=resource.backend,
            status="available" if resource.available else "unavailable",
            error=None if resource.available else resource.error,
        )

    if all(availability.values()):
        overall = "healthy"
    elif any(availability.values()):
        overall = "degraded"
    else:
        overall = "unhealthy"

    if overall != "healthy":
        unavailable = [name for name, ok in availability.items() if not ok]
        logger.warning("Health check %s: unavailable resources %s", overall, unavailable)

    body = HealthResponse(
        status=overall,
        version=__version__,
        resources=resources,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(
        status_code=503 if overall == "unhealthy" else 200,
        content=body.model_dump(),
    )

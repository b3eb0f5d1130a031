"""
NutriTrack Backend — Health Check Route
========================================

What:  GET /health for container probes and load balancers.
How:   Issues the cheapest possible Firestore read (one document from the
       users collection, limit 1). A healthy process that cannot reach its
       store is reported as unhealthy with HTTP 503 so traffic moves away.
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from nutritrack import __version__
from nutritrack.dependencies import get_store_client
from nutritrack.schemas.health import HealthResponse
from nutritrack.services.paths import USERS_COLLECTION

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Document store unreachable", "model": HealthResponse}},
)
async def health_check(store_client=Depends(get_store_client)) -> JSONResponse:
    store_status = "connected"
    try:
        await store_client.collection(USERS_COLLECTION).limit(1).get()
    except Exception as e:
        store_status = "disconnected"
        logger.warning("Health check: document store unreachable: %s", e)

    healthy = store_status == "connected"
    body = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=__version__,
        document_store=store_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    return JSONResponse(status_code=200 if healthy else 503, content=body.model_dump())

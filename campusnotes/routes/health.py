"""
CampusNotes Backend — Health Check Route
==========================================

What:  Liveness endpoint for monitoring and load balancer probes.
How:   Returns a static status with server time and uptime. Neither the note
       store nor the media host is contacted.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter

from campusnotes import __version__
from campusnotes.schemas.note import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])

# Set once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

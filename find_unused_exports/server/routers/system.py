"""
System router for the find-unused-exports API.
"""
import time

from fastapi import APIRouter, Request

from find_unused_exports import __version__
from find_unused_exports.server.models import HealthStatus

router = APIRouter()


@router.get("/health", response_model=HealthStatus)
async def get_health(request: Request) -> HealthStatus:
    """Return the health status of the server."""
    start_time = getattr(request.app.state, "start_time", None)
    uptime = time.time() - start_time if start_time is not None else 0.0
    return HealthStatus(
        status="ok",
        version=__version__,
        root=str(request.app.state.root_path),
        uptime_seconds=round(uptime, 3),
    )

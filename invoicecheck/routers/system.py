"""System router providing health endpoints."""
from fastapi import APIRouter, Request
import time

from .. import __version__

router = APIRouter()

_start_time = time.time()


@router.get("/health", tags=["System"])  # liveness
async def health(request: Request):
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": request.app.state.settings.ENVIRONMENT,
        "uptime_s": int(time.time() - _start_time),
        "version": __version__,
    }

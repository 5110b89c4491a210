"""Health check endpoint."""

from fastapi import APIRouter, Depends

from planewatch.api.dependencies import get_tracker
from planewatch.config import settings
from planewatch.services import FlightTracker

router = APIRouter()


@router.get("/healthz", summary="Health check")
def health_check(tracker: FlightTracker = Depends(get_tracker)) -> dict[str, str | int]:
    """Simple health check endpoint."""
    return {"status": "ok", "env": settings.planewatch_env, "tracked": len(tracker)}

"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from planewatch.services import FlightTracker


def get_tracker(request: Request) -> FlightTracker:
    """Return the tracker owned by the running application."""

    tracker: FlightTracker | None = getattr(request.app.state, "tracker", None)
    if tracker is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Flight tracker is not running",
        )
    return tracker

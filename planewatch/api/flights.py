"""Read-only endpoints over the live flight picture."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from planewatch.api.dependencies import get_tracker
from planewatch.config import settings
from planewatch.models import (
    AircraftRecord,
    CallsignsResponse,
    FlightsInRangeResponse,
    FlightsResponse,
)
from planewatch.services import FlightTracker

router = APIRouter(prefix="/api/v1", tags=["flights"])

logger = logging.getLogger("planewatch.flights")


@router.get("/flights", response_model=FlightsResponse, summary="List tracked aircraft")
def list_flights(tracker: FlightTracker = Depends(get_tracker)) -> FlightsResponse:
    flights = list(tracker.get_all_flights().values())
    return FlightsResponse(count=len(flights), flights=flights)


@router.get(
    "/flights/in-range",
    response_model=FlightsInRangeResponse,
    summary="List aircraft within a radius of a point",
)
def flights_in_range(
    lat: Optional[float] = Query(
        default=None, description="Center latitude; defaults to the home position"
    ),
    lon: Optional[float] = Query(
        default=None, description="Center longitude; defaults to the home position"
    ),
    radius_m: Optional[float] = Query(
        default=None, description="Radius in meters; defaults to the configured range"
    ),
    tracker: FlightTracker = Depends(get_tracker),
) -> FlightsInRangeResponse:
    """Return aircraft whose last known position lies within the radius."""

    if (lat is None) != (lon is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="lat and lon must be given together",
        )

    center_lat = lat if lat is not None else settings.home_latitude
    center_lon = lon if lon is not None else settings.home_longitude
    if center_lat is None or center_lon is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="lat and lon are required when no home position is configured",
        )

    radius = radius_m if radius_m is not None else settings.range_radius_meters
    try:
        in_range = tracker.get_flights_in_range(center_lat, center_lon, radius)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc

    logger.debug(
        "Range query center=(%s, %s) radius=%s -> %s aircraft",
        center_lat,
        center_lon,
        radius,
        len(in_range),
    )
    return FlightsInRangeResponse(
        center_lat=center_lat,
        center_lon=center_lon,
        radius_m=radius,
        count=len(in_range),
        flights=list(in_range.values()),
    )


@router.get("/flights/{icao}", response_model=AircraftRecord, summary="Get one aircraft")
def get_flight(icao: str, tracker: FlightTracker = Depends(get_tracker)) -> AircraftRecord:
    record = tracker.get_flight(icao.upper())
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Aircraft not tracked")
    return record


@router.get("/callsigns", response_model=CallsignsResponse, summary="List known callsigns")
def list_callsigns(tracker: FlightTracker = Depends(get_tracker)) -> CallsignsResponse:
    return CallsignsResponse(callsigns=tracker.get_all_callsigns())

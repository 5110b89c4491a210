"""Response models for the flight query endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .aircraft import AircraftRecord


class CallsignsResponse(BaseModel):
    """Callsigns currently known to the tracker."""

    callsigns: list[str] = Field(
        default_factory=list, description="One entry per aircraft with a callsign"
    )


class FlightsResponse(BaseModel):
    """All aircraft currently tracked."""

    count: int = Field(..., description="Number of aircraft returned")
    flights: list[AircraftRecord] = Field(default_factory=list)


class FlightsInRangeResponse(BaseModel):
    """Aircraft within a radius of a reference point."""

    center_lat: float = Field(..., description="Latitude of the query center")
    center_lon: float = Field(..., description="Longitude of the query center")
    radius_m: float = Field(..., description="Query radius in meters")
    count: int = Field(..., description="Number of aircraft in range")
    flights: list[AircraftRecord] = Field(default_factory=list)


__all__ = ["CallsignsResponse", "FlightsInRangeResponse", "FlightsResponse"]

"""Pydantic models for Planewatch."""

from .aircraft import MERGEABLE_FIELDS, AircraftRecord, AircraftReport
from .flights import CallsignsResponse, FlightsInRangeResponse, FlightsResponse

__all__ = [
    "AircraftRecord",
    "AircraftReport",
    "CallsignsResponse",
    "FlightsInRangeResponse",
    "FlightsResponse",
    "MERGEABLE_FIELDS",
]

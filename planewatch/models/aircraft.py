"""Models for aircraft reports and tracked aircraft state."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Fields a report may carry beyond its identity and timestamp. Each one merges
# independently into the tracked record.
MERGEABLE_FIELDS = (
    "callsign",
    "lat",
    "lon",
    "altitude",
    "ground_speed",
    "track",
    "vertical_rate",
    "squawk",
    "is_on_ground",
)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AircraftReport(BaseModel):
    """A normalized report for a single aircraft, as delivered by a feed adapter.

    ``None`` marks a field the report did not carry. Zero and ``False`` are
    real observations and merge like any other value.
    """

    icao: str = Field(..., min_length=1, description="Transponder hex identifier")
    generated_at: datetime = Field(
        ..., description="Time the message was generated by the feed source"
    )
    callsign: Optional[str] = Field(default=None, description="Trimmed callsign")
    lat: Optional[float] = Field(default=None, description="Latitude in decimal degrees")
    lon: Optional[float] = Field(default=None, description="Longitude in decimal degrees")
    altitude: Optional[float] = Field(default=None, description="Altitude in feet")
    ground_speed: Optional[float] = Field(default=None, description="Ground speed in knots")
    track: Optional[float] = Field(default=None, description="Track over ground in degrees")
    vertical_rate: Optional[float] = Field(
        default=None, description="Vertical rate in feet per minute"
    )
    squawk: Optional[str] = Field(default=None, description="Mode A squawk code")
    is_on_ground: Optional[bool] = Field(default=None, description="Ground status flag")

    model_config = ConfigDict(extra="ignore")

    @field_validator("generated_at")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)

    def observed_fields(self) -> dict[str, Any]:
        """Return the mergeable fields this report actually carries."""

        observed: dict[str, Any] = {}
        for name in MERGEABLE_FIELDS:
            value = getattr(self, name)
            if value is None or value == "":
                continue
            observed[name] = value
        return observed


class AircraftRecord(BaseModel):
    """Immutable snapshot of everything known about one aircraft."""

    icao: str = Field(..., description="Transponder hex identifier")
    callsign: Optional[str] = Field(default=None, description="Aircraft callsign")
    lat: Optional[float] = Field(default=None, description="Latitude in decimal degrees")
    lon: Optional[float] = Field(default=None, description="Longitude in decimal degrees")
    altitude: Optional[float] = Field(default=None, description="Altitude in feet")
    ground_speed: Optional[float] = Field(default=None, description="Ground speed in knots")
    track: Optional[float] = Field(default=None, description="Track over ground in degrees")
    vertical_rate: Optional[float] = Field(
        default=None, description="Vertical rate in feet per minute"
    )
    squawk: Optional[str] = Field(default=None, description="Mode A squawk code")
    is_on_ground: Optional[bool] = Field(default=None, description="Ground status flag")
    first_seen: datetime = Field(..., description="Earliest message merged (UTC)")
    last_seen: datetime = Field(..., description="Most recent message merged (UTC)")

    model_config = ConfigDict(frozen=True)

    @property
    def has_position(self) -> bool:
        return self.lat is not None and self.lon is not None


__all__ = ["AircraftRecord", "AircraftReport", "MERGEABLE_FIELDS", "as_utc"]

"""In-memory flight state tracker keyed by transponder identifier."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
import logging
import math
from threading import Lock

from planewatch.models.aircraft import AircraftRecord, AircraftReport, as_utc
from planewatch.services.geo import great_circle_distance_m

logger = logging.getLogger("planewatch.tracker")


class FlightTracker:
    """Merge aircraft reports into one record per aircraft and answer queries.

    Every operation takes the same lock for its full pass. Records are frozen
    and replaced wholesale on merge, so any snapshot handed out stays
    consistent after the lock is released.

    Out-of-order reports (older than the record's ``last_seen``) never move
    ``last_seen`` back and never overwrite a populated field; they only fill
    fields the record has not observed yet.
    """

    def __init__(self, stale_after: timedelta | None = None) -> None:
        self.stale_after = stale_after
        self._flights: dict[str, AircraftRecord] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._flights)

    def update_flight(self, report: AircraftReport) -> None:
        if not report.icao:
            raise ValueError("Aircraft report is missing a transponder identifier")
        if report.generated_at is None:
            raise ValueError(f"Aircraft report for {report.icao} is missing a timestamp")

        icao = report.icao
        generated_at = report.generated_at
        observed = report.observed_fields()

        with self._lock:
            current = self._flights.get(icao)
            if current is None:
                self._flights[icao] = AircraftRecord(
                    icao=icao,
                    first_seen=generated_at,
                    last_seen=generated_at,
                    **observed,
                )
                logger.debug("Tracking new aircraft %s", icao)
                return

            if generated_at < current.last_seen:
                updates = {
                    name: value
                    for name, value in observed.items()
                    if getattr(current, name) is None
                }
                if generated_at < current.first_seen:
                    updates["first_seen"] = generated_at
                if not updates:
                    return
            else:
                updates = dict(observed)
                updates["last_seen"] = generated_at

            self._flights[icao] = current.model_copy(update=updates)

    def get_flight(self, icao: str) -> AircraftRecord | None:
        with self._lock:
            return self._flights.get(icao)

    def get_all_flights(self) -> dict[str, AircraftRecord]:
        with self._lock:
            return dict(self._flights)

    def get_all_callsigns(self) -> list[str]:
        """Return one callsign per aircraft that has reported one."""

        with self._lock:
            return [record.callsign for record in self._flights.values() if record.callsign]

    def get_flights_in_range(
        self, center_lat: float, center_lon: float, radius_m: float
    ) -> dict[str, AircraftRecord]:
        """Return aircraft whose last known position is within ``radius_m``.

        The boundary is inclusive. Aircraft without a position are skipped.
        """

        if math.isnan(radius_m) or radius_m < 0:
            raise ValueError(f"Radius must be a non-negative number of meters, got {radius_m}")

        with self._lock:
            in_range: dict[str, AircraftRecord] = {}
            for icao, record in self._flights.items():
                if not record.has_position:
                    continue
                distance = great_circle_distance_m(
                    center_lat, center_lon, record.lat, record.lon
                )
                if distance <= radius_m:
                    in_range[icao] = record
            return in_range

    def evict_stale(
        self,
        now: datetime | None = None,
        stale_after: timedelta | None = None,
    ) -> list[str]:
        """Remove aircraft not heard from within the staleness window."""

        threshold = stale_after if stale_after is not None else self.stale_after
        if threshold is None:
            return []

        now = as_utc(now) if now is not None else datetime.now(tz=timezone.utc)
        cutoff = now - threshold
        with self._lock:
            evicted = [
                icao for icao, record in self._flights.items() if record.last_seen < cutoff
            ]
            for icao in evicted:
                del self._flights[icao]
        return evicted


async def run_eviction_sweeps(tracker: FlightTracker, interval_seconds: float) -> None:
    """Sweep stale aircraft from the tracker until cancelled."""

    while True:
        await asyncio.sleep(interval_seconds)
        evicted = tracker.evict_stale()
        if evicted:
            logger.info(
                "Evicted %s stale aircraft: %s", len(evicted), ",".join(sorted(evicted))
            )


__all__ = ["FlightTracker", "run_eviction_sweeps"]

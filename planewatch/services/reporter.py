"""Periodic reporting of changes in the tracked aircraft picture."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging

from planewatch.services.tracker import FlightTracker

logger = logging.getLogger("planewatch.reporter")


@dataclass(frozen=True)
class ReporterSnapshot:
    """What the reporter last observed from the tracker."""

    callsigns: frozenset[str] = frozenset()
    in_range: frozenset[str] = frozenset()


class FlightReporter:
    """Poll the tracker and log a notification whenever its picture changes."""

    def __init__(
        self,
        tracker: FlightTracker,
        *,
        home_lat: float | None = None,
        home_lon: float | None = None,
        radius_m: float = 2500.0,
        interval_seconds: float = 1.0,
    ) -> None:
        self.tracker = tracker
        self.home_lat = home_lat
        self.home_lon = home_lon
        self.radius_m = radius_m
        self.interval_seconds = interval_seconds
        self.snapshot = ReporterSnapshot()

    @property
    def range_enabled(self) -> bool:
        return self.home_lat is not None and self.home_lon is not None

    def check_callsigns(self) -> str | None:
        callsigns = frozenset(self.tracker.get_all_callsigns())
        new_callsigns = callsigns - self.snapshot.callsigns
        self.snapshot = ReporterSnapshot(callsigns=callsigns, in_range=self.snapshot.in_range)
        if not new_callsigns:
            return None

        message = f"Callsigns: {','.join(sorted(callsigns))}"
        logger.info("%s", message)
        return message

    def check_range(self) -> str | None:
        if not self.range_enabled:
            return None

        in_range = frozenset(
            self.tracker.get_flights_in_range(self.home_lat, self.home_lon, self.radius_m)
        )
        if in_range == self.snapshot.in_range:
            return None

        self.snapshot = ReporterSnapshot(callsigns=self.snapshot.callsigns, in_range=in_range)
        message = f"In range: {','.join(sorted(in_range))}"
        logger.info("%s", message)
        return message

    async def run(self) -> None:
        """Run both checks on a fixed cadence until cancelled."""

        if not self.range_enabled:
            logger.warning("Home position not configured; in-range reporting disabled")

        while True:
            self.check_callsigns()
            self.check_range()
            await asyncio.sleep(self.interval_seconds)


__all__ = ["FlightReporter", "ReporterSnapshot"]

"""Polling ingestor for dump1090's aircraft.json snapshot."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
import logging
import math
from typing import Any

import httpx

from planewatch.models.aircraft import AircraftReport
from planewatch.services.tracker import FlightTracker

logger = logging.getLogger("planewatch.ingestors.dump1090")


def _float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):  # pragma: no cover
        return None
    return number if math.isfinite(number) else None


def _age(value: Any, default: float = 0.0) -> float:
    """Seconds since dump1090 last heard the field; negative ages count as now."""
    age = _float(value)
    if age is None:
        return default
    return max(age, 0.0)


def _parse_now(raw_now: Any) -> datetime:
    now = _float(raw_now)
    if now is None:
        return datetime.now(tz=timezone.utc)
    return datetime.fromtimestamp(now, tz=timezone.utc)


class Dump1090JsonIngestor:
    """Poll a dump1090 JSON endpoint and feed each aircraft into the tracker."""

    def __init__(
        self,
        *,
        url: str,
        tracker: FlightTracker,
        timeout: float = 10.0,
        poll_interval: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.tracker = tracker
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.transport = transport

    async def run(self) -> None:
        """Poll until cancelled."""

        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                logger.info("dump1090 ingestor cancelled")
                raise
            except Exception as exc:
                logger.warning("dump1090 ingestor error: %s", exc)
            await asyncio.sleep(self.poll_interval)

    async def poll_once(self) -> list[AircraftReport]:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(self.url)
        except httpx.TimeoutException as exc:
            logger.warning("dump1090 request timed out: %s", exc)
            return []
        except httpx.RequestError as exc:
            logger.warning("dump1090 request failed: %s", exc)
            return []

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "dump1090 returned HTTP %s: %s", exc.response.status_code, exc
            )
            return []

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse dump1090 JSON response: %s", exc)
            return []

        if not isinstance(payload, dict):
            logger.warning("Unexpected dump1090 payload type: %s", type(payload).__name__)
            return []

        entries = payload.get("aircraft")
        if not isinstance(entries, list):
            logger.warning("dump1090 payload has no aircraft list")
            return []

        now = _parse_now(payload.get("now"))
        reports: list[AircraftReport] = []
        for entry in entries:
            try:
                entry_reports = self._normalize_entry(entry, now)
            except ValueError as exc:
                logger.debug("Dropping malformed dump1090 entry %r: %s", entry, exc)
                continue
            for report in entry_reports:
                self.tracker.update_flight(report)
                reports.append(report)

        logger.debug("Applied %s aircraft reports from dump1090", len(reports))
        return reports

    def _normalize_entry(self, entry: Any, now: datetime) -> list[AircraftReport]:
        """Build the reports for one aircraft entry.

        The position carries its own age (``seen_pos``), so when it is older
        than the rest of the entry it goes out as a separate, older report and
        the tracker only lets it fill or replace what is not newer.
        """

        if not isinstance(entry, dict) or not entry.get("hex"):
            return []

        icao = str(entry["hex"]).strip().lstrip("~").upper()
        if not icao:
            return []

        callsign = entry.get("flight")
        callsign = callsign.strip() if isinstance(callsign, str) else None

        raw_altitude = entry.get("alt_baro", entry.get("altitude"))
        is_on_ground = None
        if raw_altitude == "ground":
            is_on_ground = True
            raw_altitude = None

        seen = _age(entry.get("seen"))
        lat = _float(entry.get("lat"))
        lon = _float(entry.get("lon"))
        seen_pos = _age(entry.get("seen_pos"), default=seen)

        reports: list[AircraftReport] = []
        if lat is not None and lon is not None and seen_pos > seen:
            reports.append(
                AircraftReport(
                    icao=icao,
                    generated_at=now - timedelta(seconds=seen_pos),
                    lat=lat,
                    lon=lon,
                )
            )
            lat = lon = None

        reports.append(
            AircraftReport(
                icao=icao,
                generated_at=now - timedelta(seconds=seen),
                callsign=callsign or None,
                lat=lat,
                lon=lon,
                altitude=_float(raw_altitude),
                ground_speed=_float(entry.get("gs", entry.get("speed"))),
                track=_float(entry.get("track")),
                vertical_rate=_float(entry.get("baro_rate", entry.get("vert_rate"))),
                squawk=str(entry["squawk"]) if entry.get("squawk") else None,
                is_on_ground=is_on_ground,
            )
        )
        return reports


__all__ = ["Dump1090JsonIngestor"]

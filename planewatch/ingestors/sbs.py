"""SBS-1 (BaseStation) ingestor for streaming decoded transponder messages."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import math
from typing import AsyncIterator, Callable

from planewatch.models.aircraft import AircraftReport
from planewatch.services.tracker import FlightTracker

logger = logging.getLogger("planewatch.ingestors.sbs")

SBS_MESSAGE_TYPES = {"MSG", "SEL", "ID", "AIR", "STA", "CLK"}
SBS_FIELD_COUNT = 22


@dataclass
class SbsMessage:
    """One BaseStation message, split into its positional fields."""

    message_type: str
    transmission_type: int | None
    session_id: str | None
    aircraft_id: str | None
    hex_ident: str | None
    flight_id: str | None
    generated_date: str | None
    generated_time: str | None
    logged_date: str | None
    logged_time: str | None
    callsign: str | None
    altitude: float | None
    ground_speed: float | None
    track: float | None
    lat: float | None
    lon: float | None
    vertical_rate: float | None
    squawk: str | None
    alert: bool | None
    emergency: bool | None
    spi: bool | None
    is_on_ground: bool | None


@dataclass
class SBSConfig:
    """Runtime configuration for the SBS ingestor."""

    host: str
    port: int


def _text(raw: str) -> str | None:
    return raw if raw != "" else None


def _number(raw: str) -> float | None:
    if raw.strip() == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _integer(raw: str) -> int | None:
    value = _number(raw)
    return int(value) if value is not None else None


def _flag(raw: str) -> bool | None:
    value = raw.strip()
    if value == "":
        return None
    return value not in {"0", "false", "False"}


def parse_sbs_message(line: str) -> SbsMessage | None:
    """Parse a single BaseStation CSV line into an SbsMessage.

    Lines that are blank, comments, too short, or of an unknown message type
    are ignored.
    """

    cleaned = line.strip()
    if not cleaned or cleaned.startswith("#"):
        return None

    parts = cleaned.split(",")
    message_type = parts[0].strip().upper()
    if message_type not in SBS_MESSAGE_TYPES:
        return None
    if len(parts) < 10:
        return None
    parts += [""] * (SBS_FIELD_COUNT - len(parts))

    return SbsMessage(
        message_type=message_type,
        transmission_type=_integer(parts[1]),
        session_id=_text(parts[2]),
        aircraft_id=_text(parts[3]),
        hex_ident=_text(parts[4].strip()),
        flight_id=_text(parts[5]),
        generated_date=_text(parts[6].strip()),
        generated_time=_text(parts[7].strip()),
        logged_date=_text(parts[8].strip()),
        logged_time=_text(parts[9].strip()),
        # STA reuses the callsign column for a status code
        callsign=_text(parts[10]) if message_type != "STA" else None,
        altitude=_number(parts[11]),
        ground_speed=_number(parts[12]),
        track=_number(parts[13]),
        lat=_number(parts[14]),
        lon=_number(parts[15]),
        vertical_rate=_number(parts[16]),
        squawk=_text(parts[17].strip()),
        alert=_flag(parts[18]),
        emergency=_flag(parts[19]),
        spi=_flag(parts[20]),
        is_on_ground=_flag(parts[21]),
    )


def _parse_generated_at(date_part: str, time_part: str) -> datetime | None:
    # dump1090 writes receiver-local wall time with or without milliseconds
    for fmt in ("%Y/%m/%d %H:%M:%S.%f", "%Y/%m/%d %H:%M:%S"):
        try:
            local = datetime.strptime(f"{date_part} {time_part}", fmt)
        except ValueError:
            continue
        return local.astimezone(timezone.utc)
    logger.debug("Failed to parse SBS timestamp: %s %s", date_part, time_part)
    return None


def normalize_message(message: SbsMessage) -> AircraftReport | None:
    """Turn a parsed message into a tracker report, or None if it must be dropped."""

    if not message.hex_ident or not message.generated_date or not message.generated_time:
        return None

    generated_at = _parse_generated_at(message.generated_date, message.generated_time)
    if generated_at is None:
        return None

    # callsigns arrive fixed-width with trailing padding
    callsign = message.callsign.strip() if message.callsign else None

    return AircraftReport(
        icao=message.hex_ident.upper(),
        generated_at=generated_at,
        callsign=callsign or None,
        lat=message.lat,
        lon=message.lon,
        altitude=message.altitude,
        ground_speed=message.ground_speed,
        track=message.track,
        vertical_rate=message.vertical_rate,
        squawk=message.squawk,
        is_on_ground=message.is_on_ground,
    )


class SBSIngestor:
    """Maintain a long-running BaseStation TCP connection and feed the tracker."""

    def __init__(
        self,
        *,
        config: SBSConfig,
        tracker: FlightTracker,
        line_source: Callable[[], AsyncIterator[str]] | None = None,
        stop_on_source: bool = False,
    ) -> None:
        self.config = config
        self.tracker = tracker
        self.line_source = line_source
        self.stop_on_source = stop_on_source
        self.messages_applied = 0

    async def run(self) -> None:
        """Run the SBS stream until cancelled."""

        backoff = 1
        while True:
            try:
                if self.line_source:
                    await self._consume_lines(self.line_source)
                    if self.stop_on_source:
                        return
                    await asyncio.sleep(backoff)
                    continue

                await self._connect_and_stream()
                backoff = 1
            except asyncio.CancelledError:
                logger.info("SBS ingestor cancelled")
                raise
            except Exception as exc:  # pragma: no cover
                logger.warning("SBS ingestor error: %s", exc)

            backoff = min(backoff * 2, 60)
            await asyncio.sleep(backoff)

    async def _consume_lines(
        self, source: Callable[[], AsyncIterator[str]]
    ) -> None:
        async for line in source():
            self._handle_line(line)

    async def _connect_and_stream(self) -> None:
        reader, writer = await asyncio.open_connection(self.config.host, self.config.port)
        logger.info("Connected to SBS feed at %s:%s", self.config.host, self.config.port)
        try:
            while True:
                data = await reader.readline()
                if not data:
                    break
                self._handle_line(data.decode(errors="ignore"))
        finally:
            writer.close()
            with contextlib.suppress(Exception):  # pragma: no cover - best effort close
                await writer.wait_closed()
            logger.info("SBS connection closed; will attempt reconnect")

    def _handle_line(self, line: str) -> None:
        try:
            message = parse_sbs_message(line)
            report = normalize_message(message) if message is not None else None
        except (ValueError, OverflowError) as exc:
            logger.debug("Dropping malformed SBS line %r: %s", line, exc)
            return
        if report is None:
            return

        self.tracker.update_flight(report)
        self.messages_applied += 1


def build_sbs_config(*, host: str, port: int) -> SBSConfig:
    return SBSConfig(host=host, port=port)


__all__ = [
    "SBSConfig",
    "SBSIngestor",
    "SbsMessage",
    "build_sbs_config",
    "normalize_message",
    "parse_sbs_message",
]

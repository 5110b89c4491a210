#!/usr/bin/env python
"""
Run this to exercise the live feed ingestor against a real receiver.

This script will:
  * Connect to the feed configured in your environment (SBS or dump1090 JSON)
  * Merge every report into a fresh FlightTracker for a fixed amount of time
  * Run the reporter so callsign and in-range changes are logged as they happen
  * Print the tracked aircraft when the run ends

Usage (from repo root):

    # Ensure these env vars are set (or in your .env.dev):
    #   FEED_MODE=sbs                   # or json
    #   FEED_HOST=192.168.1.20          # dump1090 host for SBS
    #   FEED_PORT=30003
    #   FEED_JSON_URL=http://192.168.1.20:8080/data/aircraft.json
    #   HOME_LATITUDE=...               # optional, enables in-range reporting
    #   HOME_LONGITUDE=...
    #
    # Then run:
    #
    #   python scripts/run_feed_live_test.py
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os


def load_env_file(path: str) -> None:
    """Load KEY=VALUE pairs from a .env-style file without third-party packages."""
    if not os.path.exists(path):
        return
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key.strip(), value.strip())


load_env_file(".env.dev")

from planewatch.config import settings  # noqa: E402
from planewatch.services import FlightReporter  # noqa: E402
from planewatch.main import build_feed, build_tracker  # noqa: E402


async def main() -> None:
    # How long to listen to the live feed.
    duration_seconds = 60

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    tracker = build_tracker()
    feed = build_feed(tracker)
    reporter = FlightReporter(
        tracker,
        home_lat=settings.home_latitude,
        home_lon=settings.home_longitude,
        radius_m=settings.range_radius_meters,
        interval_seconds=settings.report_interval_seconds,
    )

    if settings.feed_mode == "json":
        source = settings.feed_json_url
    else:
        source = f"{settings.feed_host}:{settings.feed_port}"
    print(f"\nStarting {settings.feed_mode.upper()} live test for {duration_seconds} seconds against {source}\n")

    tasks = [asyncio.create_task(feed.run()), asyncio.create_task(reporter.run())]
    try:
        await asyncio.sleep(duration_seconds)
    finally:
        print("\nStopping live test, cancelling feed and reporter tasks...")
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    flights = tracker.get_all_flights()
    print(f"\nTracked {len(flights)} aircraft:")
    for icao, record in sorted(flights.items()):
        print(
            f"  {icao}: callsign={record.callsign!r}, lat={record.lat}, lon={record.lon}, "
            f"alt_ft={record.altitude}, gs_kt={record.ground_speed}, "
            f"last_seen={record.last_seen.isoformat()}"
        )


if __name__ == "__main__":
    asyncio.run(main())

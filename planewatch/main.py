from __future__ import annotations

import asyncio
import contextlib
from datetime import timedelta
import logging
import time

from fastapi import FastAPI, Request

from planewatch.api import api_router
from planewatch.config import settings
from planewatch.ingestors import Dump1090JsonIngestor, SBSIngestor, build_sbs_config
from planewatch.services import FlightReporter, FlightTracker, run_eviction_sweeps

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("planewatch")


def build_tracker() -> FlightTracker:
    stale_after = None
    if settings.stale_after_seconds > 0:
        stale_after = timedelta(seconds=settings.stale_after_seconds)
    return FlightTracker(stale_after=stale_after)


def build_feed(tracker: FlightTracker) -> SBSIngestor | Dump1090JsonIngestor:
    if settings.feed_mode == "json":
        return Dump1090JsonIngestor(
            url=settings.feed_json_url,
            tracker=tracker,
            timeout=settings.feed_timeout,
            poll_interval=settings.feed_poll_interval_seconds,
        )
    return SBSIngestor(
        config=build_sbs_config(host=settings.feed_host, port=settings.feed_port),
        tracker=tracker,
    )


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    tracker = build_tracker()
    app.state.tracker = tracker
    tasks: list[asyncio.Task] = []

    if settings.enable_feed:
        feed = build_feed(tracker)
        tasks.append(asyncio.create_task(feed.run()))
        logger.info("%s feed ingestor started", settings.feed_mode.upper())

    if settings.enable_reporter:
        reporter = FlightReporter(
            tracker,
            home_lat=settings.home_latitude,
            home_lon=settings.home_longitude,
            radius_m=settings.range_radius_meters,
            interval_seconds=settings.report_interval_seconds,
        )
        tasks.append(asyncio.create_task(reporter.run()))
        logger.info("Flight reporter started")

    if tracker.stale_after is not None:
        tasks.append(
            asyncio.create_task(
                run_eviction_sweeps(tracker, settings.eviction_interval_seconds)
            )
        )
        logger.info(
            "Evicting aircraft silent for more than %s seconds",
            settings.stale_after_seconds,
        )
    else:
        logger.info("Eviction disabled; aircraft are retained indefinitely")

    try:
        yield
    finally:
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task


app = FastAPI(title="Planewatch", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "Planewatch is running"}

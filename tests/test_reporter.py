import asyncio
from datetime import datetime, timedelta, timezone
import logging

import pytest

from planewatch.models.aircraft import AircraftReport
from planewatch.services.reporter import FlightReporter, ReporterSnapshot
from planewatch.services.tracker import FlightTracker

T0 = datetime(2024, 5, 3, 19, 40, tzinfo=timezone.utc)


def _report(icao, seconds=0, **fields):
    return AircraftReport(icao=icao, generated_at=T0 + timedelta(seconds=seconds), **fields)


def test_reporter_starts_with_empty_snapshot():
    reporter = FlightReporter(FlightTracker())

    assert reporter.snapshot == ReporterSnapshot()
    assert reporter.check_callsigns() is None
    assert reporter.check_range() is None


def test_check_callsigns_reports_only_new_callsigns(caplog):
    tracker = FlightTracker()
    reporter = FlightReporter(tracker)
    tracker.update_flight(_report("A1", callsign="UAL123"))

    with caplog.at_level(logging.INFO, logger="planewatch.reporter"):
        assert reporter.check_callsigns() == "Callsigns: UAL123"
    assert "Callsigns: UAL123" in caplog.text

    assert reporter.check_callsigns() is None

    tracker.update_flight(_report("B2", callsign="DAL9"))
    assert reporter.check_callsigns() == "Callsigns: DAL9,UAL123"
    assert reporter.snapshot.callsigns == frozenset({"DAL9", "UAL123"})


def test_check_callsigns_quiet_when_aircraft_leave():
    tracker = FlightTracker(stale_after=timedelta(minutes=1))
    reporter = FlightReporter(tracker)
    tracker.update_flight(_report("A1", callsign="UAL123"))
    tracker.update_flight(_report("B2", callsign="DAL9", seconds=120))
    reporter.check_callsigns()

    tracker.evict_stale(now=T0 + timedelta(seconds=150))

    assert reporter.check_callsigns() is None
    assert reporter.snapshot.callsigns == frozenset({"DAL9"})


def test_check_range_reports_set_changes():
    tracker = FlightTracker()
    reporter = FlightReporter(tracker, home_lat=40.0, home_lon=-75.0, radius_m=1000)

    tracker.update_flight(_report("A1", lat=40.0, lon=-75.0))
    tracker.update_flight(_report("B2", lat=41.0, lon=-75.0))
    assert reporter.check_range() == "In range: A1"
    assert reporter.check_range() is None

    tracker.update_flight(_report("B2", lat=40.001, lon=-75.0, seconds=1))
    assert reporter.check_range() == "In range: A1,B2"

    tracker.update_flight(_report("A1", lat=41.0, lon=-75.0, seconds=2))
    tracker.update_flight(_report("B2", lat=41.0, lon=-75.0, seconds=2))
    assert reporter.check_range() == "In range: "
    assert reporter.snapshot.in_range == frozenset()


def test_check_range_disabled_without_home():
    tracker = FlightTracker()
    tracker.update_flight(_report("A1", lat=40.0, lon=-75.0))
    reporter = FlightReporter(tracker, home_lat=None, home_lon=-75.0)

    assert reporter.range_enabled is False
    assert reporter.check_range() is None


def test_reporters_keep_independent_snapshots():
    tracker = FlightTracker()
    first = FlightReporter(tracker)
    second = FlightReporter(tracker)
    tracker.update_flight(_report("A1", callsign="UAL123"))

    assert first.check_callsigns() is not None
    assert second.check_callsigns() is not None


@pytest.mark.anyio
async def test_reporter_run_polls_until_cancelled():
    tracker = FlightTracker()
    tracker.update_flight(_report("A1", callsign="UAL123", lat=40.0, lon=-75.0))
    reporter = FlightReporter(
        tracker, home_lat=40.0, home_lon=-75.0, radius_m=1000, interval_seconds=0.01
    )

    task = asyncio.create_task(reporter.run())
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert reporter.snapshot == ReporterSnapshot(
        callsigns=frozenset({"UAL123"}), in_range=frozenset({"A1"})
    )

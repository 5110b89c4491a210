"""Service-layer helpers for Planewatch."""

from .geo import EARTH_MEAN_RADIUS_M, great_circle_distance_m
from .reporter import FlightReporter, ReporterSnapshot
from .tracker import FlightTracker, run_eviction_sweeps

__all__ = [
    "EARTH_MEAN_RADIUS_M",
    "FlightReporter",
    "FlightTracker",
    "ReporterSnapshot",
    "great_circle_distance_m",
    "run_eviction_sweeps",
]

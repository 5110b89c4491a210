"""Configuration settings for the Planewatch service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("planewatch.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _get_optional_float(env_var: str) -> float | None:
    value = os.getenv(env_var)
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric value for %s: %r", env_var, value)
        return None


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    planewatch_env: str = os.getenv("PLANEWATCH_ENV", "local")
    log_level: str = os.getenv("PLANEWATCH_LOG_LEVEL", "INFO")

    # Feed source
    enable_feed: bool = _get_bool("ENABLE_FEED", default=True)
    feed_mode: str = os.getenv("FEED_MODE", "sbs").lower()
    feed_host: str = os.getenv("FEED_HOST", "localhost")
    feed_port: int = int(os.getenv("FEED_PORT", "30003"))
    feed_json_url: str = os.getenv(
        "FEED_JSON_URL", "http://localhost:8080/data/aircraft.json"
    )
    feed_timeout: float = float(os.getenv("FEED_TIMEOUT", "10.0"))
    feed_poll_interval_seconds: float = float(
        os.getenv("FEED_POLL_INTERVAL_SECONDS", "1.0")
    )

    # Home position and geofence
    home_latitude: float | None = _get_optional_float("HOME_LATITUDE")
    home_longitude: float | None = _get_optional_float("HOME_LONGITUDE")
    range_radius_meters: float = float(os.getenv("RANGE_RADIUS_METERS", "2500"))

    # Periodic reporting
    enable_reporter: bool = _get_bool("ENABLE_REPORTER", default=True)
    report_interval_seconds: float = float(os.getenv("REPORT_INTERVAL_SECONDS", "1.0"))

    # Eviction; a threshold of 0 keeps aircraft indefinitely
    stale_after_seconds: float = float(os.getenv("STALE_AFTER_SECONDS", "300"))
    eviction_interval_seconds: float = float(
        os.getenv("EVICTION_INTERVAL_SECONDS", "30")
    )

    @property
    def has_home(self) -> bool:
        return self.home_latitude is not None and self.home_longitude is not None


settings = Settings()

if settings.feed_mode not in {"sbs", "json"}:
    logger.warning("Unknown FEED_MODE %r; falling back to sbs", settings.feed_mode)
    settings.feed_mode = "sbs"

__all__ = ["settings", "Settings"]

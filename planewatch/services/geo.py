"""Great-circle distance helpers."""

from __future__ import annotations

import math

EARTH_MEAN_RADIUS_M = 6_371_000.0


def great_circle_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance in meters between two points given in decimal degrees.

    Works across the antimeridian and near the poles since longitudes only
    enter through the sine of their half difference.
    """

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    a = min(1.0, max(0.0, a))
    return EARTH_MEAN_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


__all__ = ["EARTH_MEAN_RADIUS_M", "great_circle_distance_m"]

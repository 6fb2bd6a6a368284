"""Great-circle distance helpers."""

import math

from roulette.models import Coordinates

EARTH_RADIUS_M = 6_371_000.0


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in meters between two points using the Haversine formula.

    Identical points return 0.0. The intermediate term is clamped to [0, 1]
    so rounding error near antipodal points cannot produce NaN.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def distance_between(a: Coordinates, b: Coordinates) -> float:
    """Distance in meters between two ``Coordinates``."""
    return haversine_distance(a.lat, a.lng, b.lat, b.lng)

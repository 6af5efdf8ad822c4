"""Great-circle distance and geofence admission.

Invalid coordinates never raise here: they produce an infinite distance so
every caller treats them as "too far" and the geofence fails closed.
"""
from __future__ import annotations

import logging
import math

from ..core.constants import COORDINATE_PRECISION, EARTH_RADIUS_METERS

logger = logging.getLogger(__name__)


def _valid_pair(lat, lng) -> bool:
    if isinstance(lat, bool) or isinstance(lng, bool):
        return False
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180


def distance_meters(a_lat: float, a_lng: float, b_lat: float, b_lng: float) -> float:
    """Haversine distance in meters, or ``math.inf`` for invalid input."""
    if not (_valid_pair(a_lat, a_lng) and _valid_pair(b_lat, b_lng)):
        logger.warning(
            "Invalid coordinates for distance: (%r, %r) -> (%r, %r)", a_lat, a_lng, b_lat, b_lng
        )
        return math.inf

    a_lat = round(a_lat, COORDINATE_PRECISION)
    a_lng = round(a_lng, COORDINATE_PRECISION)
    b_lat = round(b_lat, COORDINATE_PRECISION)
    b_lng = round(b_lng, COORDINATE_PRECISION)

    phi1 = math.radians(a_lat)
    phi2 = math.radians(b_lat)
    dphi = math.radians(b_lat - a_lat)
    dlambda = math.radians(b_lng - a_lng)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # clamp: rounding can push h a hair above 1 for antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def is_within_radius(distance: float, radius: float) -> bool:
    if not math.isfinite(distance):
        return False
    return distance <= radius

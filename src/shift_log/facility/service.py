from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_latitude, require_longitude, require_non_empty, require_positive
from .model import FacilityLocation
from .repository import FacilityRepository

logger = logging.getLogger(__name__)


def build_facility_location(*, name, latitude, longitude, radius) -> FacilityLocation:
    return FacilityLocation(
        name=require_non_empty(name, "name"),
        latitude=require_latitude(latitude),
        longitude=require_longitude(longitude),
        radius_meters=require_positive(radius, "radius"),
    )


def default_location_from_settings(settings) -> Optional[FacilityLocation]:
    """Build the fallback geofence from FACILITY_* settings, if all are set."""
    values = {
        "name": getattr(settings, "FACILITY_NAME", None),
        "latitude": getattr(settings, "FACILITY_LATITUDE", None),
        "longitude": getattr(settings, "FACILITY_LONGITUDE", None),
        "radius": getattr(settings, "FACILITY_RADIUS", None),
    }
    if any(v in (None, "") for v in values.values()):
        return None
    return build_facility_location(**values)


class FacilitySettings:
    """Owns the admission geofence.

    The stored row is the source of truth so every service instance sees the
    same geofence; ``default`` applies until a manager stores one. Locations
    are frozen and replaced whole, never patched field by field.
    """

    def __init__(
        self,
        repository: FacilityRepository,
        *,
        default: Optional[FacilityLocation] = None,
        clock: Callable = now_utc,
    ):
        self._repository = repository
        self._default = default
        self._clock = clock

    def current(self) -> Optional[FacilityLocation]:
        stored = self._repository.get_active()
        return stored if stored is not None else self._default

    def replace(self, location: FacilityLocation) -> FacilityLocation:
        saved = self._repository.upsert(replace(location, updated_at=self._clock()))
        logger.info(
            "Facility location set: %s (%.6f, %.6f) radius=%gm",
            saved.name, saved.latitude, saved.longitude, saved.radius_meters,
        )
        return saved

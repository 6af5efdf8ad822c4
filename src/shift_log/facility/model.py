from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class FacilityLocation:
    """Domain entity: the admission geofence (center + radius in meters).

    Frozen so a reader always holds a complete snapshot; updates replace the
    whole object.
    """

    name: str
    latitude: float
    longitude: float
    radius_meters: float
    updated_at: Optional[datetime] = None

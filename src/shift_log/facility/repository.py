from __future__ import annotations

from typing import Optional, Protocol

from .model import FacilityLocation


class FacilityRepository(Protocol):
    def get_active(self) -> Optional[FacilityLocation]:
        raise NotImplementedError

    def upsert(self, location: FacilityLocation) -> FacilityLocation:
        """Replace the stored geofence as one write."""

        raise NotImplementedError

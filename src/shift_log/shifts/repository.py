from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import GeoPoint, ShiftFilter, ShiftRecord


class ShiftRepository(Protocol):
    def find_active_shift(self, worker_id: int) -> Optional[ShiftRecord]:
        """Open shift for the worker; the latest ``clock_in_at`` if several exist."""

        raise NotImplementedError

    def create_shift(
        self,
        *,
        worker_id: int,
        clock_in_at: datetime,
        note: Optional[str] = None,
        location: Optional[GeoPoint] = None,
    ) -> ShiftRecord:
        """Insert an open shift.

        Must raise AlreadyActiveError when the worker already has one, atomically
        with the insert.
        """

        raise NotImplementedError

    def close_shift(
        self,
        shift_id: int,
        *,
        clock_out_at: datetime,
        note: Optional[str] = None,
        location: Optional[GeoPoint] = None,
    ) -> Optional[ShiftRecord]:
        """Close the shift if it is still open; ``None`` when it was not."""

        raise NotImplementedError

    def list_shifts(
        self,
        shift_filter: ShiftFilter,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[ShiftRecord]:
        """Shifts matching the filter, newest ``clock_in_at`` first."""

        raise NotImplementedError

    def count_shifts(self, shift_filter: ShiftFilter) -> int:
        raise NotImplementedError

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.pagination import Page, page_offset
from ..core.exceptions import AlreadyActiveError, InvalidInputError, NoActiveShiftError, OutOfRangeError
from ..facility.service import FacilitySettings
from ..geo.validator import distance_meters, is_within_radius
from .model import ClockRequest, GeoPoint, ShiftFilter, ShiftRecord
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


class ShiftLedger:
    """Clock-in/clock-out state machine per worker.

    NO_ACTIVE_SHIFT --clock_in--> ACTIVE_SHIFT --clock_out--> NO_ACTIVE_SHIFT.
    The repository enforces the single-open-shift invariant atomically; the
    check here only produces the friendly error early.
    """

    def __init__(
        self,
        shifts: ShiftRepository,
        facility: FacilitySettings,
        *,
        require_location: bool = False,
    ):
        self._shifts = shifts
        self._facility = facility
        self._require_location = bool(require_location)

    def clock_in(self, worker_id: int, request: Optional[ClockRequest] = None, *, now: Optional[datetime] = None) -> ShiftRecord:
        request = request or ClockRequest()
        if self._shifts.find_active_shift(worker_id) is not None:
            raise AlreadyActiveError()

        self._check_geofence(request.location, action="clock in")

        record = self._shifts.create_shift(
            worker_id=worker_id,
            clock_in_at=now or now_utc(),
            note=request.note,
            location=request.location,
        )
        logger.info("Worker %s clocked in (shift %s)", worker_id, record.shift_id)
        return record

    def clock_out(self, worker_id: int, request: Optional[ClockRequest] = None, *, now: Optional[datetime] = None) -> ShiftRecord:
        request = request or ClockRequest()
        active = self._shifts.find_active_shift(worker_id)
        if active is None:
            raise NoActiveShiftError()

        self._check_geofence(request.location, action="clock out")

        record = self._shifts.close_shift(
            active.shift_id,
            clock_out_at=now or now_utc(),
            note=request.note,
            location=request.location,
        )
        if record is None:
            # closed by a concurrent request between the lookup and the update
            raise NoActiveShiftError()

        logger.info(
            "Worker %s clocked out (shift %s, %s min)", worker_id, record.shift_id, record.duration_minutes
        )
        return record

    def active_shift_for(self, worker_id: int) -> Optional[ShiftRecord]:
        return self._shifts.find_active_shift(worker_id)

    def open_shifts(self) -> Sequence[ShiftRecord]:
        return self._shifts.list_shifts(ShiftFilter(active_only=True))

    def history_for(self, worker_id: int, page: int, page_size: int) -> Page[ShiftRecord]:
        return self.list_page(ShiftFilter(worker_id=worker_id), page, page_size)

    def list_page(self, shift_filter: ShiftFilter, page: int, page_size: int) -> Page[ShiftRecord]:
        items = self._shifts.list_shifts(shift_filter, limit=page_size, offset=page_offset(page, page_size))
        total = self._shifts.count_shifts(shift_filter)
        return Page(items=list(items), page=page, page_size=page_size, total=total)

    def _check_geofence(self, location: Optional[GeoPoint], *, action: str) -> None:
        facility = self._facility.current()
        if facility is None:
            return

        if location is None:
            if self._require_location:
                raise InvalidInputError("latitude and longitude are required")
            return

        distance = distance_meters(location.latitude, location.longitude, facility.latitude, facility.longitude)
        if not is_within_radius(distance, facility.radius_meters):
            logger.warning(
                "Rejected %s at (%.6f, %.6f): %.0fm from %s (radius %gm)",
                action, location.latitude, location.longitude, distance, facility.name, facility.radius_meters,
            )
            raise OutOfRangeError(
                distance=distance,
                allowed_radius=facility.radius_meters,
                location_name=facility.name,
                action=action,
            )

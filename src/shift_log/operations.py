"""Public operations of the shift log core.

Every call takes the caller identity handed over by the transport. Inputs are
validated into explicit request structs here, before any store access, and the
access policy is checked before any ledger or stats work.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional, Sequence, Union

from .access.auth import Caller, CallerIdentity
from .access.policy import AccessPolicy
from .common.datetime_utils import local_date_start, parse_iso_date
from .common.pagination import Page
from .common.validators import optional_note, require_latitude, require_longitude, require_page
from .core.constants import DEFAULT_HISTORY_PAGE_SIZE, DEFAULT_LOGS_PAGE_SIZE
from .core.enums import Operation, StatsView
from .core.exceptions import InvalidInputError
from .facility.model import FacilityLocation
from .facility.service import FacilitySettings, build_facility_location
from .shifts.model import ActiveWorker, ClockRequest, GeoPoint, ShiftFilter, ShiftLogEntry, ShiftRecord
from .shifts.service import ShiftLedger
from .stats.model import AggregateStats, WorkerStats
from .stats.service import StatsAggregator
from .workers.model import Worker, WorkerSummary
from .workers.service import WorkerService, parse_profile_update, parse_role


def build_clock_request(note=None, latitude=None, longitude=None) -> ClockRequest:
    if (latitude is None) != (longitude is None):
        raise InvalidInputError("latitude and longitude must be provided together")

    location = None
    if latitude is not None:
        location = GeoPoint(latitude=require_latitude(latitude), longitude=require_longitude(longitude))
    return ClockRequest(note=optional_note(note), location=location)


def _as_date(value, field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise InvalidInputError(f"{field_name} must be YYYY-MM-DD")


class ShiftLogOperations:
    def __init__(
        self,
        *,
        policy: AccessPolicy,
        workers: WorkerService,
        ledger: ShiftLedger,
        stats: StatsAggregator,
        facility: FacilitySettings,
        tz: tzinfo = timezone.utc,
    ):
        self._policy = policy
        self._workers = workers
        self._ledger = ledger
        self._stats = stats
        self._facility = facility
        self._tz = tz

    def _authorize(self, identity: Optional[CallerIdentity], operation: Operation) -> Caller:
        caller = None
        if identity is not None:
            worker = self._workers.resolve(identity)
            caller = Caller(worker_id=worker.worker_id, role=worker.role)
        return self._policy.require(caller, operation)

    def clock_in(self, identity: Optional[CallerIdentity], note=None, latitude=None, longitude=None) -> ShiftRecord:
        request = build_clock_request(note, latitude, longitude)
        caller = self._authorize(identity, Operation.CLOCK_IN)
        return self._ledger.clock_in(caller.worker_id, request)

    def clock_out(self, identity: Optional[CallerIdentity], note=None, latitude=None, longitude=None) -> ShiftRecord:
        request = build_clock_request(note, latitude, longitude)
        caller = self._authorize(identity, Operation.CLOCK_OUT)
        return self._ledger.clock_out(caller.worker_id, request)

    def get_own_shifts(
        self, identity: Optional[CallerIdentity], page=1, page_size=DEFAULT_HISTORY_PAGE_SIZE
    ) -> Page[ShiftRecord]:
        page, page_size = require_page(page, page_size)
        caller = self._authorize(identity, Operation.VIEW_OWN_SHIFTS)
        return self._ledger.history_for(caller.worker_id, page, page_size)

    def get_own_active_shift(self, identity: Optional[CallerIdentity]) -> Optional[ShiftRecord]:
        caller = self._authorize(identity, Operation.VIEW_OWN_ACTIVE_SHIFT)
        return self._ledger.active_shift_for(caller.worker_id)

    def me(self, identity: Optional[CallerIdentity]) -> Worker:
        caller = self._authorize(identity, Operation.VIEW_OWN_PROFILE)
        return self._workers.get(caller.worker_id)

    def update_profile(self, identity: Optional[CallerIdentity], name=None, email=None) -> Worker:
        name, email = parse_profile_update(name, email)
        caller = self._authorize(identity, Operation.UPDATE_OWN_PROFILE)
        return self._workers.update_profile(caller.worker_id, name=name, email=email)

    def get_facility_location(self, identity: Optional[CallerIdentity]) -> Optional[FacilityLocation]:
        self._authorize(identity, Operation.VIEW_FACILITY_LOCATION)
        return self._facility.current()

    def get_active_workers(self, identity: Optional[CallerIdentity]) -> list[ActiveWorker]:
        self._authorize(identity, Operation.VIEW_ACTIVE_WORKERS)
        open_shifts = self._ledger.open_shifts()
        workers = self._workers.by_ids(r.worker_id for r in open_shifts)
        return [ActiveWorker(worker=workers[r.worker_id], shift=r) for r in open_shifts if r.worker_id in workers]

    def get_all_shift_logs(
        self,
        identity: Optional[CallerIdentity],
        page=1,
        page_size=DEFAULT_LOGS_PAGE_SIZE,
        started_from=None,
        started_before=None,
    ) -> Page[ShiftLogEntry]:
        page, page_size = require_page(page, page_size)
        start_day = _as_date(started_from, "start_date")
        end_day = _as_date(started_before, "end_date")
        if start_day and end_day and end_day < start_day:
            raise InvalidInputError("end_date must not be before start_date")
        self._authorize(identity, Operation.VIEW_ALL_SHIFT_LOGS)

        # end_date is inclusive: shifts started any time on that local day
        shift_filter = ShiftFilter(
            started_from=local_date_start(start_day, self._tz) if start_day else None,
            started_before=local_date_start(end_day + timedelta(days=1), self._tz) if end_day else None,
        )
        shifts = self._ledger.list_page(shift_filter, page, page_size)
        workers = self._workers.by_ids(r.worker_id for r in shifts.items)
        entries = [ShiftLogEntry(shift=r, worker=workers[r.worker_id]) for r in shifts.items if r.worker_id in workers]
        return Page(items=entries, page=shifts.page, page_size=shifts.page_size, total=shifts.total)

    def get_dashboard_stats(
        self, identity: Optional[CallerIdentity], view=StatsView.AGGREGATE
    ) -> Union[AggregateStats, Sequence[WorkerStats]]:
        try:
            view = StatsView(view)
        except ValueError:
            raise InvalidInputError("view must be 'aggregate' or 'workers'")
        self._authorize(identity, Operation.VIEW_DASHBOARD)

        if view == StatsView.WORKERS:
            return self._stats.worker_stats()
        return self._stats.aggregate_stats()

    def set_facility_location(
        self, identity: Optional[CallerIdentity], name, latitude, longitude, radius
    ) -> FacilityLocation:
        location = build_facility_location(name=name, latitude=latitude, longitude=longitude, radius=radius)
        self._authorize(identity, Operation.SET_FACILITY_LOCATION)
        return self._facility.replace(location)

    def change_role(self, identity: Optional[CallerIdentity], worker_id: int, role) -> Worker:
        new_role = parse_role(role)
        self._authorize(identity, Operation.CHANGE_ROLE)
        return self._workers.change_role(int(worker_id), new_role)

    def list_workers(self, identity: Optional[CallerIdentity]) -> Sequence[WorkerSummary]:
        self._authorize(identity, Operation.LIST_WORKERS)
        return self._workers.list_summaries()

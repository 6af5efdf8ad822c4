from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import day_bounds, now_utc
from ..core.constants import AVERAGE_WINDOW_DAYS, WEEK_WINDOW_DAYS
from ..core.enums import Role
from ..shifts.model import ShiftFilter, ShiftRecord
from ..shifts.repository import ShiftRepository
from ..workers.service import WorkerService
from .model import AggregateStats, WorkerStats


def _completed_hours(records: Iterable[ShiftRecord]) -> float:
    return sum(r.duration_hours for r in records if r.clock_out_at is not None)


class StatsAggregator:
    """Dashboard metrics derived by scanning shift records.

    Day boundaries follow the reference timezone ``tz``; trailing windows are
    plain 7/30 x 24h spans back from ``now``.
    """

    def __init__(self, shifts: ShiftRepository, workers: WorkerService, *, tz: tzinfo = timezone.utc):
        self._shifts = shifts
        self._workers = workers
        self._tz = tz

    def clock_ins_today(self, worker_id: int, *, now: Optional[datetime] = None) -> int:
        start, end = day_bounds(now or now_utc(), self._tz)
        return self._shifts.count_shifts(ShiftFilter(worker_id=worker_id, started_from=start, started_before=end))

    def total_hours_this_week(self, worker_id: int, *, now: Optional[datetime] = None) -> float:
        now = now or now_utc()
        records = self._shifts.list_shifts(
            ShiftFilter(worker_id=worker_id, started_from=now - timedelta(days=WEEK_WINDOW_DAYS), completed_only=True)
        )
        return _completed_hours(records)

    def avg_hours_per_day(self, worker_id: int, *, now: Optional[datetime] = None) -> float:
        # Divides by min(30, shift count), not by elapsed days: a per-shift average
        # kept for compatibility with existing dashboards.
        now = now or now_utc()
        records = self._shifts.list_shifts(
            ShiftFilter(worker_id=worker_id, started_from=now - timedelta(days=AVERAGE_WINDOW_DAYS), completed_only=True)
        )
        if not records:
            return 0.0
        return _completed_hours(records) / min(AVERAGE_WINDOW_DAYS, len(records))

    def worker_stats(self, *, now: Optional[datetime] = None) -> Sequence[WorkerStats]:
        now = now or now_utc()
        return [
            WorkerStats(
                worker_id=w.worker_id,
                worker_name=w.display_name,
                avg_hours_per_day=self.avg_hours_per_day(w.worker_id, now=now),
                clock_ins_today=self.clock_ins_today(w.worker_id, now=now),
                total_hours_this_week=self.total_hours_this_week(w.worker_id, now=now),
            )
            for w in self._workers.by_role(Role.CAREWORKER)
        ]

    def aggregate_stats(self, *, now: Optional[datetime] = None) -> AggregateStats:
        start, end = day_bounds(now or now_utc(), self._tz)
        active = self._shifts.list_shifts(ShiftFilter(active_only=True))
        today = self._shifts.list_shifts(ShiftFilter(started_from=start, started_before=end))
        return AggregateStats(
            total_staff=self._workers.count_by_role(Role.CAREWORKER),
            active_staff=len({r.worker_id for r in active}),
            today_shifts=len(today),
            hours_worked=_completed_hours(today),
        )

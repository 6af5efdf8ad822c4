from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from fakes import InMemoryShifts, InMemoryWorkers
from shift_log.core.enums import Role
from shift_log.stats.service import StatsAggregator
from shift_log.workers.service import WorkerService


@pytest.fixture
def env():
    workers = InMemoryWorkers()
    shifts = InMemoryShifts()
    workers.shifts = shifts
    stats = StatsAggregator(shifts, WorkerService(workers))
    return workers, shifts, stats


def test_week_total_counts_only_completed_shifts(env, now):
    workers, shifts, stats = env
    w = workers.add("cw1")
    start = now - timedelta(days=2)
    shifts.seed(w.worker_id, start, start + timedelta(hours=8))
    shifts.seed(w.worker_id, now - timedelta(hours=2))

    assert stats.total_hours_this_week(w.worker_id, now=now) == pytest.approx(8.0)


def test_week_total_excludes_shifts_older_than_seven_days(env, now):
    workers, shifts, stats = env
    w = workers.add("cw1")
    old = now - timedelta(days=8)
    shifts.seed(w.worker_id, old, old + timedelta(hours=6))

    assert stats.total_hours_this_week(w.worker_id, now=now) == 0


def test_average_divides_by_shift_count(env, now):
    workers, shifts, stats = env
    w = workers.add("cw1")
    for days_ago, hours in ((1, 8), (3, 6), (10, 4)):
        start = now - timedelta(days=days_ago)
        shifts.seed(w.worker_id, start, start + timedelta(hours=hours))

    # (8 + 6 + 4) / min(30, 3)
    assert stats.avg_hours_per_day(w.worker_id, now=now) == pytest.approx(6.0)


def test_average_without_history_is_zero(env, now):
    workers, _, stats = env
    w = workers.add("cw1")
    assert stats.avg_hours_per_day(w.worker_id, now=now) == 0


def test_clock_ins_today_include_open_shifts(env, now):
    workers, shifts, stats = env
    w = workers.add("cw1")
    morning = now.replace(hour=1)
    shifts.seed(w.worker_id, morning, morning + timedelta(hours=2))
    shifts.seed(w.worker_id, now)
    shifts.seed(w.worker_id, now - timedelta(days=1), now - timedelta(hours=16))

    assert stats.clock_ins_today(w.worker_id, now=now) == 2


def test_worker_stats_cover_careworkers_only(env, now):
    workers, shifts, stats = env
    cw = workers.add("cw1", name="Carla")
    workers.add("mgr", role=Role.MANAGER)
    start = now - timedelta(days=1)
    shifts.seed(cw.worker_id, start, start + timedelta(hours=7, minutes=30))

    rows = stats.worker_stats(now=now)
    assert [r.worker_name for r in rows] == ["Carla"]
    assert rows[0].as_dict() == {
        "worker_id": cw.worker_id,
        "worker_name": "Carla",
        "avg_hours_per_day": 7.5,
        "clock_ins_today": 0,
        "total_hours_this_week": 7.5,
    }


def test_aggregate_stats(env, now):
    workers, shifts, stats = env
    a = workers.add("cw1")
    b = workers.add("cw2")
    workers.add("mgr", role=Role.MANAGER)

    early = now.replace(hour=2)
    shifts.seed(a.worker_id, early, early + timedelta(hours=4, minutes=30))
    shifts.seed(b.worker_id, now - timedelta(hours=1))
    shifts.seed(b.worker_id, now - timedelta(days=1), now - timedelta(days=1) + timedelta(hours=8))

    agg = stats.aggregate_stats(now=now)
    assert agg.total_staff == 2
    assert agg.active_staff == 1
    assert agg.today_shifts == 2
    assert agg.hours_worked == pytest.approx(4.5)
    assert agg.as_dict()["hours_worked"] == 4.5


def test_today_follows_reference_timezone(now):
    workers = InMemoryWorkers()
    shifts = InMemoryShifts()
    stats = StatsAggregator(shifts, WorkerService(workers), tz=ZoneInfo("Asia/Kolkata"))
    w = workers.add("cw1")

    # 19:00 UTC is 00:30 the next day in IST
    at = datetime(2026, 3, 10, 19, 0, tzinfo=timezone.utc)
    shifts.seed(w.worker_id, datetime(2026, 3, 10, 18, 0, tzinfo=timezone.utc))
    shifts.seed(w.worker_id, datetime(2026, 3, 10, 18, 45, tzinfo=timezone.utc))

    assert stats.clock_ins_today(w.worker_id, now=at) == 1

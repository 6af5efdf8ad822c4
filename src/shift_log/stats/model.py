from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WorkerStats:
    """Per-worker dashboard row. Hours are raw; round via ``as_dict``."""

    worker_id: int
    worker_name: str
    avg_hours_per_day: float
    clock_ins_today: int
    total_hours_this_week: float

    def as_dict(self) -> dict:
        return {
            "worker_id": self.worker_id,
            "worker_name": self.worker_name,
            "avg_hours_per_day": round(self.avg_hours_per_day, 2),
            "clock_ins_today": self.clock_ins_today,
            "total_hours_this_week": round(self.total_hours_this_week, 2),
        }


@dataclass(frozen=True)
class AggregateStats:
    total_staff: int
    active_staff: int
    today_shifts: int
    hours_worked: float

    def as_dict(self) -> dict:
        return {
            "total_staff": self.total_staff,
            "active_staff": self.active_staff,
            "today_shifts": self.today_shifts,
            "hours_worked": round(self.hours_worked, 1),
        }

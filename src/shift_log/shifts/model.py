from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.enums import ShiftStatus
from ..workers.model import Worker


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ClockRequest:
    """Validated input for a clock-in or clock-out."""

    note: Optional[str] = None
    location: Optional[GeoPoint] = None


@dataclass(frozen=True)
class ShiftRecord:
    """Domain entity: one work session of one worker.

    Durations are always derived from the stored timestamps.
    """

    shift_id: int
    worker_id: int
    clock_in_at: datetime
    clock_out_at: Optional[datetime] = None
    clock_in_note: Optional[str] = None
    clock_out_note: Optional[str] = None
    clock_in_location: Optional[GeoPoint] = None
    clock_out_location: Optional[GeoPoint] = None

    @property
    def is_active(self) -> bool:
        return self.clock_out_at is None

    @property
    def status(self) -> ShiftStatus:
        return ShiftStatus.ACTIVE if self.is_active else ShiftStatus.COMPLETED

    @property
    def duration(self) -> Optional[timedelta]:
        if self.clock_out_at is None:
            return None
        return self.clock_out_at - self.clock_in_at

    @property
    def duration_minutes(self) -> Optional[int]:
        d = self.duration
        return None if d is None else round(d.total_seconds() / 60)

    @property
    def duration_hours(self) -> Optional[float]:
        d = self.duration
        return None if d is None else d.total_seconds() / 3600


@dataclass(frozen=True)
class ShiftFilter:
    """Query filter for listing shifts. ``None`` fields do not filter."""

    worker_id: Optional[int] = None
    started_from: Optional[datetime] = None
    started_before: Optional[datetime] = None
    completed_only: bool = False
    active_only: bool = False


@dataclass(frozen=True)
class ShiftLogEntry:
    """Read-model: a shift joined with its worker (manager audit log)."""

    shift: ShiftRecord
    worker: Worker


@dataclass(frozen=True)
class ActiveWorker:
    worker: Worker
    shift: ShiftRecord

from dataclasses import replace
from datetime import timedelta

import pytest

from fakes import InMemoryFacility, InMemoryShifts
from shift_log.core.enums import ShiftStatus
from shift_log.core.exceptions import AlreadyActiveError, InvalidInputError, NoActiveShiftError, OutOfRangeError
from shift_log.facility.model import FacilityLocation
from shift_log.facility.service import FacilitySettings
from shift_log.shifts.model import ClockRequest, GeoPoint
from shift_log.shifts.service import ShiftLedger

FACILITY = FacilityLocation(name="Main Healthcare Center", latitude=13.067014, longitude=77.466541, radius_meters=2000)
INSIDE = GeoPoint(latitude=13.067014, longitude=77.466541)
OUTSIDE = GeoPoint(latitude=13.1, longitude=77.5)


def make_ledger(*, facility=FACILITY, require_location=False):
    shifts = InMemoryShifts()
    ledger = ShiftLedger(shifts, FacilitySettings(InMemoryFacility(facility)), require_location=require_location)
    return ledger, shifts


def test_clock_in_then_out_computes_duration(now):
    ledger, _ = make_ledger()

    opened = ledger.clock_in(7, ClockRequest(note="start", location=INSIDE), now=now)
    assert opened.status == ShiftStatus.ACTIVE
    assert opened.clock_in_note == "start"
    assert ledger.active_shift_for(7) == opened

    closed = ledger.clock_out(7, ClockRequest(note="done", location=INSIDE), now=now + timedelta(hours=8, minutes=30))
    assert closed.shift_id == opened.shift_id
    assert closed.status == ShiftStatus.COMPLETED
    assert closed.duration_minutes == 510
    assert closed.duration_hours == pytest.approx(8.5)
    assert closed.clock_out_note == "done"
    assert ledger.active_shift_for(7) is None


def test_second_clock_in_is_rejected(now):
    ledger, shifts = make_ledger()
    ledger.clock_in(1, now=now)

    with pytest.raises(AlreadyActiveError):
        ledger.clock_in(1, now=now + timedelta(minutes=5))
    assert shifts.active_count(1) == 1


def test_workers_are_independent(now):
    ledger, _ = make_ledger()
    ledger.clock_in(1, now=now)
    ledger.clock_in(2, now=now)
    assert ledger.active_shift_for(1).worker_id == 1
    assert ledger.active_shift_for(2).worker_id == 2


def test_clock_out_without_active_shift(now):
    ledger, _ = make_ledger()
    with pytest.raises(NoActiveShiftError):
        ledger.clock_out(1, now=now)


def test_clock_in_outside_geofence_reports_distance(now):
    ledger, shifts = make_ledger()

    with pytest.raises(OutOfRangeError) as exc:
        ledger.clock_in(1, ClockRequest(location=OUTSIDE), now=now)

    assert exc.value.distance > 2000
    assert exc.value.allowed_radius == 2000
    assert exc.value.location_name == "Main Healthcare Center"
    assert "2000m" in exc.value.message
    assert shifts.active_count(1) == 0


def test_clock_out_outside_geofence_keeps_shift_open(now):
    ledger, _ = make_ledger()
    opened = ledger.clock_in(1, ClockRequest(location=INSIDE), now=now)

    with pytest.raises(OutOfRangeError) as exc:
        ledger.clock_out(1, ClockRequest(location=OUTSIDE), now=now + timedelta(hours=1))

    assert "clock out" in exc.value.message
    assert ledger.active_shift_for(1) == opened


def test_no_facility_means_no_geofence(now):
    ledger, _ = make_ledger(facility=None)
    shift = ledger.clock_in(1, ClockRequest(location=OUTSIDE), now=now)
    assert shift.clock_in_location == OUTSIDE


def test_missing_location_allowed_unless_required(now):
    ledger, _ = make_ledger()
    assert ledger.clock_in(1, now=now).clock_in_location is None

    strict, _ = make_ledger(require_location=True)
    with pytest.raises(InvalidInputError):
        strict.clock_in(1, now=now)


def test_clock_out_closes_latest_open_shift(now):
    ledger, shifts = make_ledger()
    # legacy data: two open shifts for the same worker
    older = shifts.seed(1, now - timedelta(hours=3))
    newer = shifts.seed(1, now - timedelta(hours=1))

    closed = ledger.clock_out(1, now=now)
    assert closed.shift_id == newer.shift_id
    assert ledger.active_shift_for(1).shift_id == older.shift_id


def test_clock_out_lost_race_reports_no_active_shift(now):
    ledger, shifts = make_ledger()
    opened = ledger.clock_in(1, now=now)

    original_find = shifts.find_active_shift

    def find_then_close(worker_id):
        found = original_find(worker_id)
        # a concurrent request closes the shift right after our lookup
        shifts.close_shift(opened.shift_id, clock_out_at=now + timedelta(hours=1))
        return found

    shifts.find_active_shift = find_then_close
    with pytest.raises(NoActiveShiftError):
        ledger.clock_out(1, now=now + timedelta(hours=2))


def test_history_is_paginated_newest_first(now):
    ledger, shifts = make_ledger()
    for i in range(5):
        start = now - timedelta(days=5 - i)
        shifts.seed(1, start, start + timedelta(hours=8))
    shifts.seed(2, now - timedelta(days=1))

    first = ledger.history_for(1, page=1, page_size=2)
    assert first.total == 5
    assert first.pages == 3
    assert [r.clock_in_at for r in first.items] == [now - timedelta(days=1), now - timedelta(days=2)]

    last = ledger.history_for(1, page=3, page_size=2)
    assert len(last.items) == 1
    assert last.items[0].clock_in_at == now - timedelta(days=5)


def test_open_shifts_lists_only_active(now):
    ledger, shifts = make_ledger()
    shifts.seed(1, now - timedelta(hours=9), now - timedelta(hours=1))
    ledger.clock_in(2, now=now)

    assert [r.worker_id for r in ledger.open_shifts()] == [2]


def test_facility_replacement_applies_to_next_clock_in(now):
    facility_repo = InMemoryFacility(FACILITY)
    ledger = ShiftLedger(InMemoryShifts(), FacilitySettings(facility_repo))

    facility_repo.location = replace(FACILITY, latitude=13.1, longitude=77.5)
    shift = ledger.clock_in(1, ClockRequest(location=OUTSIDE), now=now)
    assert shift.is_active

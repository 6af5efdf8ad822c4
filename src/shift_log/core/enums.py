from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Worker role used for authorization."""

    CAREWORKER = "CAREWORKER"
    MANAGER = "MANAGER"


class ShiftStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class Operation(str, Enum):
    """Operations gated by the access policy."""

    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    VIEW_OWN_SHIFTS = "view_own_shifts"
    VIEW_OWN_ACTIVE_SHIFT = "view_own_active_shift"
    VIEW_FACILITY_LOCATION = "view_facility_location"
    VIEW_OWN_PROFILE = "view_own_profile"
    UPDATE_OWN_PROFILE = "update_own_profile"

    VIEW_ACTIVE_WORKERS = "view_active_workers"
    VIEW_ALL_SHIFT_LOGS = "view_all_shift_logs"
    VIEW_DASHBOARD = "view_dashboard"
    CHANGE_ROLE = "change_role"
    SET_FACILITY_LOCATION = "set_facility_location"
    LIST_WORKERS = "list_workers"


class StatsView(str, Enum):
    """Dashboard shapes offered to managers."""

    AGGREGATE = "aggregate"
    WORKERS = "workers"

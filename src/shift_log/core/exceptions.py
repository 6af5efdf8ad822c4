from __future__ import annotations

import math
from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable machine-readable ``kind`` next to the
    human-readable message.
    """

    kind = "domain_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.kind, "message": self.message}


class NotAuthenticatedError(DomainError):
    """Raised when no valid caller identity was presented."""

    kind = "not_authenticated"

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class AccessDeniedError(DomainError):
    """Raised when an authenticated caller lacks the required role."""

    kind = "access_denied"

    def __init__(self, message: str = "Access denied. Manager role required."):
        super().__init__(message)


class AlreadyActiveError(DomainError):
    kind = "already_active"

    def __init__(self, message: str = "You already have an active shift. Please clock out first."):
        super().__init__(message)


class NoActiveShiftError(DomainError):
    kind = "no_active_shift"

    def __init__(self, message: str = "No active shift found. Please clock in first."):
        super().__init__(message)


class OutOfRangeError(DomainError):
    """Raised when a clock operation happens outside the facility geofence."""

    kind = "out_of_range"

    def __init__(self, *, distance: float, allowed_radius: float, location_name: str, action: str = "clock in"):
        self.distance = distance
        self.allowed_radius = allowed_radius
        self.location_name = location_name
        if math.isfinite(distance):
            where = f"You are {round(distance)}m away."
        else:
            where = "Your location could not be verified."
        super().__init__(
            f"You must be within {allowed_radius:g}m of {location_name} to {action}. {where}"
        )

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["distance"] = round(self.distance) if math.isfinite(self.distance) else None
        out["allowed_radius"] = self.allowed_radius
        out["location_name"] = self.location_name
        return out


class InvalidInputError(DomainError):
    """Raised when input data is malformed or missing required fields."""

    kind = "invalid_input"


class NotFoundError(DomainError):
    kind = "not_found"


class TransientStoreError(DomainError):
    """Raised when the store stays unreachable after bounded retries."""

    kind = "transient_store"

    def __init__(self, message: str = "Service temporarily unavailable, please try again.", *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

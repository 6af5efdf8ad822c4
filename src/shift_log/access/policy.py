from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Operation, Role
from ..core.exceptions import AccessDeniedError, NotAuthenticatedError
from .auth import Caller

MANAGER_ONLY = frozenset(
    {
        Operation.VIEW_ACTIVE_WORKERS,
        Operation.VIEW_ALL_SHIFT_LOGS,
        Operation.VIEW_DASHBOARD,
        Operation.CHANGE_ROLE,
        Operation.SET_FACILITY_LOCATION,
        Operation.LIST_WORKERS,
    }
)


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None


ALLOW = Decision(allowed=True)


class AccessPolicy:
    """Role gate over (caller role, operation). No side effects."""

    def authorize(self, caller: Optional[Caller], operation: Operation) -> Decision:
        if caller is None:
            return Decision(False, "Not authenticated")
        if operation in MANAGER_ONLY and caller.role != Role.MANAGER:
            return Decision(False, "Access denied. Manager role required.")
        return ALLOW

    def require(self, caller: Optional[Caller], operation: Operation) -> Caller:
        decision = self.authorize(caller, operation)
        if decision.allowed:
            return caller
        if caller is None:
            raise NotAuthenticatedError(decision.reason)
        raise AccessDeniedError(decision.reason)

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Worker:
    """Domain entity: a person performing shifts (either role).

    Note: pure data object, no DB access here.
    """

    worker_id: int
    external_id: str
    email: str
    name: str
    role: Role
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email


@dataclass(frozen=True)
class WorkerSummary:
    """Read-model for the manager worker list."""

    worker: Worker
    shift_count: int

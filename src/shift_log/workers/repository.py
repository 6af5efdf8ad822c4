from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Worker, WorkerSummary


class WorkerRepository(Protocol):
    """Repository interface for Worker.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        raise NotImplementedError

    def get_by_external_id(self, external_id: str) -> Optional[Worker]:
        raise NotImplementedError

    def find_or_create(self, *, external_id: str, email: str, name: str, role: Role) -> Worker:
        """Return the worker for ``external_id``, creating it from the defaults if missing."""

        raise NotImplementedError

    def update_profile(self, worker_id: int, *, name: Optional[str] = None, email: Optional[str] = None) -> bool:
        raise NotImplementedError

    def set_role(self, worker_id: int, role: Role) -> bool:
        raise NotImplementedError

    def list_by_ids(self, worker_ids: Sequence[int]) -> Sequence[Worker]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[Worker]:
        raise NotImplementedError

    def list_summaries(self) -> Sequence[WorkerSummary]:
        raise NotImplementedError

    def count_by_role(self, role: Role) -> int:
        raise NotImplementedError

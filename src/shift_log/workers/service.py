from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..access.auth import CallerIdentity
from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import InvalidInputError, NotFoundError
from .model import Worker, WorkerSummary
from .repository import WorkerRepository

logger = logging.getLogger(__name__)


def parse_role(value) -> Role:
    try:
        return Role(require_non_empty(value, "role").upper())
    except ValueError:
        raise InvalidInputError("Invalid role. Must be CAREWORKER or MANAGER")


def parse_profile_update(name=None, email=None) -> tuple[Optional[str], Optional[str]]:
    name = optional_text(name, "name", max_length=255)
    email = optional_text(email, "email", max_length=255)
    if name is None and email is None:
        raise InvalidInputError("At least name or email is required")
    if email is not None and "@" not in email:
        raise InvalidInputError("email is not valid")
    return name, email


class WorkerService:
    """Use case: worker records (first contact, profile sync, roles)."""

    def __init__(self, workers: WorkerRepository):
        self._workers = workers

    def resolve(self, identity: CallerIdentity) -> Worker:
        """Find or create the worker behind a verified identity.

        The identity's role only seeds a new record; afterwards the stored role wins.
        """
        email = identity.email or f"{identity.external_id}@unknown.invalid"
        name = identity.name or email.split("@")[0]
        return self._workers.find_or_create(
            external_id=identity.external_id,
            email=email,
            name=name,
            role=identity.role or Role.CAREWORKER,
        )

    def get(self, worker_id: int) -> Worker:
        worker = self._workers.get_by_id(worker_id)
        if not worker:
            raise NotFoundError(f"Worker {worker_id} not found")
        return worker

    def update_profile(self, worker_id: int, *, name: Optional[str] = None, email: Optional[str] = None) -> Worker:
        self._workers.update_profile(worker_id, name=name, email=email)
        return self.get(worker_id)

    def change_role(self, worker_id: int, role: Role) -> Worker:
        worker = self.get(worker_id)
        if worker.role == role:
            return worker
        self._workers.set_role(worker_id, role)
        logger.info("Worker %s role changed %s -> %s", worker_id, worker.role.value, role.value)
        return self.get(worker_id)

    def list_summaries(self) -> Sequence[WorkerSummary]:
        return self._workers.list_summaries()

    def by_ids(self, worker_ids: Iterable[int]) -> dict[int, Worker]:
        return {w.worker_id: w for w in self._workers.list_by_ids(list(worker_ids))}

    def by_role(self, role: Role) -> Sequence[Worker]:
        return self._workers.list_by_role(role)

    def count_by_role(self, role: Role) -> int:
        return self._workers.count_by_role(role)

from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import as_utc
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, retrying
from .model import Worker, WorkerSummary
from .repository import WorkerRepository

_COLUMNS = "worker_id, external_id, email, name, role, created_at"


def _to_worker(r: dict) -> Worker:
    return Worker(
        worker_id=int(r["worker_id"]),
        external_id=r["external_id"],
        email=r["email"],
        name=r["name"],
        role=Role(r["role"]),
        created_at=as_utc(r["created_at"]) if r.get("created_at") else None,
    )


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @retrying
    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE worker_id=%s", (int(worker_id),))
            r = fetchone(cur)
            return _to_worker(r) if r else None

    @retrying
    def get_by_external_id(self, external_id: str) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE external_id=%s", (external_id,))
            r = fetchone(cur)
            return _to_worker(r) if r else None

    @retrying
    def find_or_create(self, *, external_id: str, email: str, name: str, role: Role) -> Worker:
        with db_cursor(self._conn_factory) as (_, cur):
            # no-op update keeps concurrent first contacts from failing on the unique key
            cur.execute(
                """
                INSERT INTO workers(external_id, email, name, role)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE worker_id=worker_id
                """,
                (external_id, email, name, role.value),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE external_id=%s", (external_id,))
            return _to_worker(fetchone(cur))

    @retrying
    def update_profile(self, worker_id: int, *, name: Optional[str] = None, email: Optional[str] = None) -> bool:
        sets: list[str] = []
        params: list[object] = []
        if name is not None:
            sets.append("name=%s")
            params.append(name)
        if email is not None:
            sets.append("email=%s")
            params.append(email)
        if not sets:
            return False
        params.append(int(worker_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE workers SET {', '.join(sets)} WHERE worker_id=%s", tuple(params))
            return cur.rowcount > 0

    @retrying
    def set_role(self, worker_id: int, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE workers SET role=%s WHERE worker_id=%s", (role.value, int(worker_id)))
            return cur.rowcount > 0

    @retrying
    def list_by_ids(self, worker_ids: Sequence[int]) -> Sequence[Worker]:
        ids = sorted({int(i) for i in worker_ids})
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE worker_id IN ({placeholders})", tuple(ids))
            return [_to_worker(r) for r in fetchall(cur)]

    @retrying
    def list_by_role(self, role: Role) -> Sequence[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE role=%s ORDER BY worker_id", (role.value,))
            return [_to_worker(r) for r in fetchall(cur)]

    @retrying
    def list_summaries(self) -> Sequence[WorkerSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT w.worker_id, w.external_id, w.email, w.name, w.role, w.created_at,
                       COUNT(s.shift_id) AS shift_count
                FROM workers w
                LEFT JOIN shifts s ON s.worker_id = w.worker_id
                GROUP BY w.worker_id, w.external_id, w.email, w.name, w.role, w.created_at
                ORDER BY w.created_at DESC, w.worker_id DESC
                """
            )
            return [
                WorkerSummary(worker=_to_worker(r), shift_count=int(r["shift_count"] or 0))
                for r in fetchall(cur)
            ]

    @retrying
    def count_by_role(self, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM workers WHERE role=%s", (role.value,))
            return int(fetchone(cur)["n"])

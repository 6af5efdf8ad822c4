from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import as_utc, to_db
from ..core.exceptions import AlreadyActiveError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, retrying
from .model import GeoPoint, ShiftFilter, ShiftRecord
from .repository import ShiftRepository

_COLUMNS = """
    shift_id, worker_id, clock_in_at, clock_out_at, clock_in_note, clock_out_note,
    clock_in_lat, clock_in_lng, clock_out_lat, clock_out_lng
"""

ACTIVE_SHIFT_KEY = "uq_shifts_one_active"


def _point(lat, lng) -> Optional[GeoPoint]:
    if lat is None or lng is None:
        return None
    return GeoPoint(latitude=float(lat), longitude=float(lng))


def _to_record(r: dict) -> ShiftRecord:
    return ShiftRecord(
        shift_id=int(r["shift_id"]),
        worker_id=int(r["worker_id"]),
        clock_in_at=as_utc(r["clock_in_at"]),
        clock_out_at=as_utc(r["clock_out_at"]) if r.get("clock_out_at") else None,
        clock_in_note=r.get("clock_in_note"),
        clock_out_note=r.get("clock_out_note"),
        clock_in_location=_point(r.get("clock_in_lat"), r.get("clock_in_lng")),
        clock_out_location=_point(r.get("clock_out_lat"), r.get("clock_out_lng")),
    )


def _where(shift_filter: ShiftFilter) -> tuple[str, tuple]:
    clauses: list[str] = []
    params: list[object] = []

    if shift_filter.worker_id is not None:
        clauses.append("worker_id=%s")
        params.append(int(shift_filter.worker_id))
    if shift_filter.started_from is not None:
        clauses.append("clock_in_at >= %s")
        params.append(to_db(shift_filter.started_from))
    if shift_filter.started_before is not None:
        clauses.append("clock_in_at < %s")
        params.append(to_db(shift_filter.started_before))
    if shift_filter.completed_only:
        clauses.append("clock_out_at IS NOT NULL")
    if shift_filter.active_only:
        clauses.append("clock_out_at IS NULL")

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, tuple(params)


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @retrying
    def find_active_shift(self, worker_id: int) -> Optional[ShiftRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM shifts
                WHERE worker_id=%s AND clock_out_at IS NULL
                ORDER BY clock_in_at DESC, shift_id DESC
                LIMIT 1
                """,
                (int(worker_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    @retrying
    def create_shift(
        self,
        *,
        worker_id: int,
        clock_in_at: datetime,
        note: Optional[str] = None,
        location: Optional[GeoPoint] = None,
    ) -> ShiftRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO shifts(worker_id, clock_in_at, clock_in_note, clock_in_lat, clock_in_lng)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (
                        int(worker_id),
                        to_db(clock_in_at),
                        note,
                        location.latitude if location else None,
                        location.longitude if location else None,
                    ),
                )
                shift_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e, key_name=ACTIVE_SHIFT_KEY):
                raise AlreadyActiveError() from e
            raise

        return ShiftRecord(
            shift_id=shift_id,
            worker_id=int(worker_id),
            clock_in_at=clock_in_at,
            clock_in_note=note,
            clock_in_location=location,
        )

    @retrying
    def close_shift(
        self,
        shift_id: int,
        *,
        clock_out_at: datetime,
        note: Optional[str] = None,
        location: Optional[GeoPoint] = None,
    ) -> Optional[ShiftRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shifts
                SET clock_out_at=%s, clock_out_note=%s, clock_out_lat=%s, clock_out_lng=%s
                WHERE shift_id=%s AND clock_out_at IS NULL
                """,
                (
                    to_db(clock_out_at),
                    note,
                    location.latitude if location else None,
                    location.longitude if location else None,
                    int(shift_id),
                ),
            )
            updated = cur.rowcount > 0
            cur.execute(f"SELECT {_COLUMNS} FROM shifts WHERE shift_id=%s", (int(shift_id),))
            r = fetchone(cur)
            if r is None:
                return None
            record = _to_record(r)
            # zero rows on a retry can mean our own earlier UPDATE committed before the link dropped
            if not updated and record.clock_out_at != as_utc(clock_out_at):
                return None
            return record

    @retrying
    def list_shifts(
        self,
        shift_filter: ShiftFilter,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Sequence[ShiftRecord]:
        where, params = _where(shift_filter)
        sql = f"SELECT {_COLUMNS} FROM shifts {where} ORDER BY clock_in_at DESC, shift_id DESC"
        if limit is not None:
            sql += " LIMIT %s OFFSET %s"
            params = params + (int(limit), int(offset))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_record(r) for r in fetchall(cur)]

    @retrying
    def count_shifts(self, shift_filter: ShiftFilter) -> int:
        where, params = _where(shift_filter)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM shifts {where}", params)
            return int(fetchone(cur)["n"])

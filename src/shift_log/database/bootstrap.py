from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..common.datetime_utils import now_utc, to_db

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"
SEED_PATH = Path(__file__).resolve().parent / "seed.sql"


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "shift_log_db")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in iter_sql_statements(_strip_line_comments(sql)):
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied schema from %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path = SEED_PATH) -> None:
    sql = _strip_create_db_and_use(Path(seed_path).read_text(encoding="utf-8"))

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()


DEMO_WORKERS = (
    ("auth0|manager1_12345", "manager1@healthcare.com", "Dr. Sarah Wilson", "MANAGER"),
    ("auth0|careworker1_11111", "nurse.alice@healthcare.com", "Alice Johnson", "CAREWORKER"),
    ("auth0|careworker2_22222", "nurse.bob@healthcare.com", "Bob Smith", "CAREWORKER"),
)


def ensure_demo_workers(db_config: dict) -> None:
    """Upsert demo workers and give each care worker one completed shift from yesterday."""
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        for external_id, email, name, role in DEMO_WORKERS:
            cur.execute(
                """
                INSERT INTO workers (external_id, email, name, role)
                VALUES (%s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE email=VALUES(email), name=VALUES(name), role=VALUES(role)
                """,
                (external_id, email, name, role),
            )

        yesterday = now_utc() - timedelta(days=1)
        clock_in = to_db(yesterday.replace(hour=8, minute=0, second=0, microsecond=0))
        clock_out = to_db(yesterday.replace(hour=16, minute=0, second=0, microsecond=0))

        for external_id, _, _, role in DEMO_WORKERS:
            if role != "CAREWORKER":
                continue
            cur.execute("SELECT worker_id FROM workers WHERE external_id=%s", (external_id,))
            worker_id = int(cur.fetchone()["worker_id"])
            cur.execute(
                "SELECT COUNT(*) AS n FROM shifts WHERE worker_id=%s AND clock_in_at=%s",
                (worker_id, clock_in),
            )
            if int(cur.fetchone()["n"]):
                continue
            cur.execute(
                """
                INSERT INTO shifts (worker_id, clock_in_at, clock_out_at, clock_in_note, clock_out_note,
                                    clock_in_lat, clock_in_lng, clock_out_lat, clock_out_lng)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    worker_id, clock_in, clock_out, "Morning shift", "Handover done",
                    13.067014, 77.466541, 13.067014, 77.466541,
                ),
            )

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()

from __future__ import annotations

import functools
import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import TransientStoreError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

_TRANSIENT_ERRNOS = {
    errorcode.ER_LOCK_DEADLOCK,
    errorcode.ER_LOCK_WAIT_TIMEOUT,
    errorcode.CR_SERVER_GONE_ERROR,
    errorcode.CR_SERVER_LOST,
    errorcode.CR_CONN_HOST_ERROR,
    errorcode.CR_CONNECTION_ERROR,
}


def is_transient(exc: BaseException) -> bool:
    if isinstance(exc, (mysql.connector.errors.OperationalError, mysql.connector.errors.InterfaceError)):
        return True
    if isinstance(exc, mysql.connector.errors.PoolError):
        return True
    return isinstance(exc, mysql.connector.Error) and getattr(exc, "errno", None) in _TRANSIENT_ERRNOS


def is_duplicate_key(exc: BaseException, *, key_name: Optional[str] = None) -> bool:
    if not isinstance(exc, mysql.connector.errors.IntegrityError):
        return False
    if exc.errno != errorcode.ER_DUP_ENTRY:
        return False
    return key_name is None or key_name in str(exc.msg)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def retrying(method):
    """Retry a repository method on transient connector errors.

    The method's object must expose ``_conn_factory``. Writes stay safe to
    retry: creates are guarded by the active-shift unique index and closes are
    conditional updates.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        conn_factory: DatabaseConnection = self._conn_factory
        attempts = conn_factory.retry_attempts
        for attempt in range(1, attempts + 1):
            try:
                return method(self, *args, **kwargs)
            except mysql.connector.Error as exc:
                if not is_transient(exc):
                    raise
                logger.warning(
                    "Transient store error in %s (attempt %d/%d): %s",
                    method.__qualname__, attempt, attempts, exc,
                )
                if attempt == attempts:
                    raise TransientStoreError(cause=exc) from exc
                time.sleep(conn_factory.retry_backoff * attempt)

    return wrapper


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.constants import MYSQL_DUPLICATE_ENTRY
from ..core.exceptions import DuplicateKeyError, StorageError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) inside one transaction.

    Commits when the block exits cleanly, rolls back otherwise. Driver errors
    are re-raised as StorageError; a unique index violation becomes
    DuplicateKeyError so services can turn it into a conflict.
    """

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StorageError(f"Database unavailable: {e}") from e
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        if e.errno == MYSQL_DUPLICATE_ENTRY:
            raise DuplicateKeyError(str(e)) from e
        raise StorageError(str(e)) from e
    except mysql.connector.Error as e:
        conn.rollback()
        raise StorageError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def build_where(filters: Dict[str, Any]) -> tuple[str, list[object]]:
    """Turn {"column op": value} pairs into a WHERE clause, skipping None values.

    Keys are trusted column expressions such as "ar.batch_id =" or
    "ar.attendance_date >=".
    """

    clauses: list[str] = []
    params: list[object] = []
    for expr, value in filters.items():
        if value is None:
            continue
        clauses.append(f"{expr} %s")
        params.append(value)
    where = " AND ".join(clauses) if clauses else "1=1"
    return where, params

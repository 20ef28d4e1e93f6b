from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection

_EPOCH = datetime(1970, 1, 1)


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


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_datetime(value: Any) -> Optional[datetime]:
    """Normalize timestamp columns across schema versions and connectors.

    Values can come back as:
    - datetime.datetime (DATETIME(3) columns)
    - int epoch milliseconds (rows migrated from the old integer columns)
    - string (e.g. '2025-01-01 08:30:00.123')
    """

    if value is None:
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, bool):
        raise TypeError(f"Unsupported MySQL DATETIME value type: {type(value)!r}")

    if isinstance(value, int):
        return _EPOCH + timedelta(milliseconds=value)

    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty datetime string")
        return datetime.fromisoformat(text.replace("T", " ", 1))

    raise TypeError(f"Unsupported MySQL DATETIME value type: {type(value)!r}")

from __future__ import annotations

from contextlib import closing, contextmanager
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Borrow a pooled connection for one transaction: commit on success, rollback on error."""

    with closing(conn_factory.connect()) as conn, closing(conn.cursor(dictionary=dictionary)) as cur:
        try:
            yield conn, cur
        except Exception:
            conn.rollback()
            raise
        conn.commit()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def as_decimal(value: Any) -> Optional[Decimal]:
    """DECIMAL columns come back as Decimal; FLOAT/str ones do not."""

    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def as_time(value: Any) -> Optional[time]:
    """TIME columns arrive as timedelta from the pure-Python connector."""

    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        minutes = int(value.total_seconds()) // 60 % (24 * 60)
        return time(minutes // 60, minutes % 60)
    return datetime.strptime(str(value).strip()[:5], "%H:%M").time()

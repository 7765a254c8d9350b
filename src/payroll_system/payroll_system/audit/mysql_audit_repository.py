from __future__ import annotations

import json
from typing import Sequence

from ..core.enums import AuditAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import SalaryAuditEntry
from .repository import SalaryAuditRepository


def _to_entry(r: dict) -> SalaryAuditEntry:
    meta = r.get("meta")
    if isinstance(meta, (bytes, bytearray)):
        meta = meta.decode("utf-8")
    return SalaryAuditEntry(
        audit_id=int(r["audit_id"]),
        salary_id=int(r["salary_id"]),
        staff_id=int(r["staff_id"]),
        action=AuditAction(r["action"]),
        actor_id=int(r["actor_id"]) if r.get("actor_id") is not None else None,
        created_at=r["created_at"],
        meta=json.loads(meta) if meta else {},
    )


class MySQLSalaryAuditRepository(SalaryAuditRepository):
    """Insert-only access to ``salary_audit``."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, entry: SalaryAuditEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_audit(salary_id, staff_id, action, actor_id, created_at, meta)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(entry.salary_id),
                    int(entry.staff_id),
                    entry.action.value,
                    entry.actor_id,
                    entry.created_at,
                    json.dumps(entry.meta) if entry.meta else None,
                ),
            )
            return int(cur.lastrowid)

    def list_for_salary(self, salary_id: int) -> Sequence[SalaryAuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT audit_id, salary_id, staff_id, action, actor_id, created_at, meta
                FROM salary_audit
                WHERE salary_id=%s
                ORDER BY audit_id
                """,
                (int(salary_id),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

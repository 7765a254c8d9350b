from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import LedgerEntryType
from ..core.exceptions import StateError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import SalaryLedgerEntry
from .repository import LedgerRepository

_COLUMNS = "entry_id, salary_id, staff_id, type, amount, reason, created_by, created_at, reversal_of"


def _to_entry(r: dict) -> SalaryLedgerEntry:
    return SalaryLedgerEntry(
        entry_id=int(r["entry_id"]),
        salary_id=int(r["salary_id"]),
        staff_id=int(r["staff_id"]),
        type=LedgerEntryType(r["type"]),
        amount=as_decimal(r["amount"]),
        reason=r["reason"],
        created_by=int(r["created_by"]),
        created_at=r["created_at"],
        reversal_of=int(r["reversal_of"]) if r.get("reversal_of") is not None else None,
    )


class MySQLLedgerRepository(LedgerRepository):
    """Insert-only access to ``salary_ledger``."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, entry: SalaryLedgerEntry) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO salary_ledger(salary_id, staff_id, type, amount, reason, created_by, created_at, reversal_of)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(entry.salary_id),
                        int(entry.staff_id),
                        entry.type.value,
                        entry.amount,
                        entry.reason,
                        int(entry.created_by),
                        entry.created_at,
                        entry.reversal_of,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError:
            if entry.reversal_of is None:
                raise
            # uq_ledger_reversal: a concurrent reversal of the same entry won.
            raise StateError(f"Ledger entry {entry.reversal_of} was already reversed")

    def get_entry(self, entry_id: int) -> Optional[SalaryLedgerEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_ledger WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
        return _to_entry(r) if r else None

    def list_for_salary(self, salary_id: int) -> Sequence[SalaryLedgerEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_ledger WHERE salary_id=%s ORDER BY entry_id",
                (int(salary_id),),
            )
            return [_to_entry(r) for r in fetchall(cur)]

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..attendance.model import DayClassification
from ..core.enums import BreakdownType, DayKind, PayType, SalaryStatus
from ..core.exceptions import NotFoundError, StateError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import SalaryBreakdownEntry, SalaryRecord
from .repository import SalaryRepository

_COLUMNS = """
    salary_id, staff_id, month, year, pay_type, total_working_days, total_working_hours,
    overtime_hours, late_minutes, half_days, absent_days, base_amount, overtime_amount,
    penalty_amount, deductions, gross_amount, net_amount, status, version,
    approved_by, approved_at, paid_at, note
"""


def _to_record(r: dict) -> SalaryRecord:
    return SalaryRecord(
        salary_id=int(r["salary_id"]),
        staff_id=int(r["staff_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        pay_type=PayType(r["pay_type"]),
        total_working_days=int(r["total_working_days"]),
        total_working_hours=as_decimal(r["total_working_hours"]),
        overtime_hours=as_decimal(r["overtime_hours"]),
        late_minutes=int(r["late_minutes"]),
        half_days=int(r["half_days"]),
        absent_days=int(r["absent_days"]),
        base_amount=as_decimal(r["base_amount"]),
        overtime_amount=as_decimal(r["overtime_amount"]),
        penalty_amount=as_decimal(r["penalty_amount"]),
        deductions=as_decimal(r["deductions"]),
        gross_amount=as_decimal(r["gross_amount"]),
        net_amount=as_decimal(r["net_amount"]),
        status=SalaryStatus(r["status"]),
        version=int(r["version"]),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        paid_at=r.get("paid_at"),
        note=r.get("note"),
    )


def _amounts(record: SalaryRecord) -> tuple:
    return (
        record.pay_type.value,
        record.total_working_days,
        record.total_working_hours,
        record.overtime_hours,
        record.late_minutes,
        record.half_days,
        record.absent_days,
        record.base_amount,
        record.overtime_amount,
        record.penalty_amount,
        record.deductions,
        record.gross_amount,
        record.net_amount,
    )


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, salary_id: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salaries WHERE salary_id=%s", (int(salary_id),))
            r = fetchone(cur)
        return _to_record(r) if r else None

    def get_for_staff_period(self, *, staff_id: int, month: int, year: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salaries WHERE staff_id=%s AND month=%s AND year=%s",
                (int(staff_id), int(month), int(year)),
            )
            r = fetchone(cur)
        return _to_record(r) if r else None

    def save_calculation(
        self,
        record: SalaryRecord,
        breakdown: Sequence[SalaryBreakdownEntry],
        days: Sequence[DayClassification] = (),
    ) -> SalaryRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                if record.salary_id is None:
                    cur.execute(
                        """
                        INSERT INTO salaries(
                            staff_id, company_id, month, year, pay_type, total_working_days,
                            total_working_hours, overtime_hours, late_minutes, half_days, absent_days,
                            base_amount, overtime_amount, penalty_amount, deductions, gross_amount,
                            net_amount, status, version
                        )
                        SELECT %s, sc.company_id, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s
                        FROM staff_compensation sc
                        WHERE sc.staff_id=%s
                        """,
                        (record.staff_id, record.month, record.year)
                        + _amounts(record)
                        + (SalaryStatus.PENDING.value, record.version, record.staff_id),
                    )
                    if cur.rowcount != 1:
                        raise NotFoundError(f"No salary setup for staff {record.staff_id}")
                    salary_id = int(cur.lastrowid)
                else:
                    salary_id = int(record.salary_id)
                    cur.execute(
                        """
                        UPDATE salaries
                        SET pay_type=%s, total_working_days=%s, total_working_hours=%s, overtime_hours=%s,
                            late_minutes=%s, half_days=%s, absent_days=%s, base_amount=%s,
                            overtime_amount=%s, penalty_amount=%s, deductions=%s, gross_amount=%s,
                            net_amount=%s, version=%s
                        WHERE salary_id=%s AND status=%s AND version=%s
                        """,
                        _amounts(record)
                        + (record.version, salary_id, SalaryStatus.PENDING.value, record.version - 1),
                    )
                    if cur.rowcount != 1:
                        raise StateError(f"Salary {salary_id} is no longer PENDING or was recalculated concurrently")
                    cur.execute("DELETE FROM salary_breakdowns WHERE salary_id=%s", (salary_id,))
                    cur.execute("DELETE FROM salary_days WHERE salary_id=%s", (salary_id,))

                cur.executemany(
                    """
                    INSERT INTO salary_breakdowns(salary_id, position, type, description, amount, quantity)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (salary_id, pos, e.type.value, e.description, e.amount, e.quantity)
                        for pos, e in enumerate(breakdown)
                    ],
                )
                if days:
                    cur.executemany(
                        """
                        INSERT INTO salary_days(salary_id, work_date, kind, working_hours, overtime_hours, late_minutes)
                        VALUES(%s,%s,%s,%s,%s,%s)
                        """,
                        [
                            (salary_id, d.work_date, d.kind.value, d.working_hours, d.overtime_hours, d.late_minutes)
                            for d in days
                        ],
                    )
        except mysql.connector.IntegrityError:
            raise StateError(
                f"Salary of staff {record.staff_id} for {record.period} was created concurrently; reload and retry"
            )
        return replace(record, salary_id=salary_id)

    def list_breakdown(self, salary_id: int) -> Sequence[SalaryBreakdownEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT salary_id, type, description, amount, quantity
                FROM salary_breakdowns
                WHERE salary_id=%s
                ORDER BY position
                """,
                (int(salary_id),),
            )
            rows = fetchall(cur)
        return [
            SalaryBreakdownEntry(
                salary_id=int(r["salary_id"]),
                type=BreakdownType(r["type"]),
                description=r["description"],
                amount=as_decimal(r["amount"]),
                quantity=as_decimal(r.get("quantity")),
            )
            for r in rows
        ]

    def list_days(self, salary_id: int) -> Sequence[DayClassification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT work_date, kind, working_hours, overtime_hours, late_minutes
                FROM salary_days
                WHERE salary_id=%s
                ORDER BY work_date
                """,
                (int(salary_id),),
            )
            rows = fetchall(cur)
        return [
            DayClassification(
                work_date=r["work_date"],
                kind=DayKind(r["kind"]),
                working_hours=as_decimal(r["working_hours"]),
                overtime_hours=as_decimal(r["overtime_hours"]),
                late_minutes=int(r["late_minutes"]),
            )
            for r in rows
        ]

    def update_status(
        self,
        *,
        salary_id: int,
        expected: SalaryStatus,
        status: SalaryStatus,
        approved_by: Optional[int] = None,
        approved_at: Optional[datetime] = None,
        paid_at: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salaries
                SET status=%s, approved_by=%s, approved_at=%s, paid_at=%s, note=%s
                WHERE salary_id=%s AND status=%s
                """,
                (status.value, approved_by, approved_at, paid_at, note, int(salary_id), expected.value),
            )
            return cur.rowcount == 1

    def list_for_staff(self, staff_id: int) -> Sequence[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salaries WHERE staff_id=%s ORDER BY year DESC, month DESC",
                (int(staff_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_period(self, *, month: int, year: int, company_id: Optional[int] = None) -> Sequence[SalaryRecord]:
        clauses = ["month=%s", "year=%s"]
        params: list[object] = [int(month), int(year)]
        if company_id is not None:
            clauses.append("company_id=%s")
            params.append(int(company_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salaries WHERE {' AND '.join(clauses)} ORDER BY staff_id",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import month_bounds
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall
from .model import AttendanceRecord
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_staff_month(self, *, staff_id: int, month: int, year: int) -> Sequence[AttendanceRecord]:
        start, end = month_bounds(month, year)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, staff_id, work_date, punch_in, punch_out, working_hours, status
                FROM attendance
                WHERE staff_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(staff_id), start, end),
            )
            rows = fetchall(cur)
        return [
            AttendanceRecord(
                attendance_id=int(r["attendance_id"]),
                staff_id=int(r["staff_id"]),
                work_date=r["work_date"],
                punch_in=r.get("punch_in"),
                punch_out=r.get("punch_out"),
                working_hours=as_decimal(r.get("working_hours")),
                status=AttendanceStatus(r["status"]),
            )
            for r in rows
        ]

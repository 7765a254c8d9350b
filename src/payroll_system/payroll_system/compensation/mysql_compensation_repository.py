from __future__ import annotations

from typing import Optional

from ..core.enums import EsiCeilingMode, PayType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, as_time
from .model import CompanyPayrollPolicy, StaffCompensation
from .repository import CompensationRepository


class MySQLCompensationRepository(CompensationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_staff_compensation(self, staff_id: int) -> Optional[StaffCompensation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT staff_id, company_id, pay_type, base_salary, hourly_rate, daily_rate,
                       contracted_working_days, overtime_rate, statutory_eligible
                FROM staff_compensation
                WHERE staff_id=%s
                """,
                (int(staff_id),),
            )
            r = fetchone(cur)
        if not r:
            return None
        return StaffCompensation(
            staff_id=int(r["staff_id"]),
            company_id=int(r["company_id"]),
            pay_type=PayType(r["pay_type"]) if r.get("pay_type") else None,
            base_salary=as_decimal(r.get("base_salary")),
            hourly_rate=as_decimal(r.get("hourly_rate")),
            daily_rate=as_decimal(r.get("daily_rate")),
            contracted_working_days=r.get("contracted_working_days"),
            overtime_rate=as_decimal(r.get("overtime_rate")),
            statutory_eligible=bool(r.get("statutory_eligible")),
        )

    def get_company_policy(self, company_id: int) -> Optional[CompanyPayrollPolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM company_payroll_policies WHERE company_id=%s", (int(company_id),))
            r = fetchone(cur)
        if not r:
            return None
        return CompanyPayrollPolicy(
            company_id=int(r["company_id"]),
            default_pay_type=PayType(r["default_pay_type"]),
            contracted_working_days=int(r["contracted_working_days"]),
            standard_hours_per_day=as_decimal(r["standard_hours_per_day"]),
            half_day_threshold_hours=as_decimal(r["half_day_threshold_hours"]),
            half_day_pay_fraction=as_decimal(r["half_day_pay_fraction"]),
            overtime_multiplier=as_decimal(r["overtime_multiplier"]),
            late_penalty_enabled=bool(r["late_penalty_enabled"]),
            late_penalty_per_minute=as_decimal(r["late_penalty_per_minute"]),
            absence_penalty_enabled=bool(r["absence_penalty_enabled"]),
            absence_penalty_per_day=as_decimal(r["absence_penalty_per_day"]),
            shift_start=as_time(r.get("shift_start")),
            grace_minutes=int(r["grace_minutes"]),
            pf_percentage=as_decimal(r["pf_percentage"]),
            esi_percentage=as_decimal(r["esi_percentage"]),
            esi_wage_ceiling=as_decimal(r["esi_wage_ceiling"]),
            esi_ceiling_mode=EsiCeilingMode(r["esi_ceiling_mode"]),
            count_pending_attendance=bool(r["count_pending_attendance"]),
        )

    def list_active_staff_ids(self, company_id: Optional[int] = None) -> list[int]:
        sql = "SELECT staff_id FROM staff_compensation WHERE is_active=1"
        params: tuple = ()
        if company_id is not None:
            sql += " AND company_id=%s"
            params = (int(company_id),)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY staff_id", params)
            return [int(r["staff_id"]) for r in fetchall(cur)]

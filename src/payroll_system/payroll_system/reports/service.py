from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ..attendance.model import DayClassification
from ..common.datetime_utils import iter_month_days, validate_period
from ..common.money import format_amount
from ..core.enums import DayKind
from ..core.exceptions import NotFoundError
from ..ledger.service import LedgerService
from ..payroll.repository import SalaryRepository

REPORT_FIELDS = [
    "salary_id",
    "staff_id",
    "period",
    "pay_type",
    "status",
    "total_working_days",
    "half_days",
    "absent_days",
    "overtime_hours",
    "late_minutes",
    "base_amount",
    "overtime_amount",
    "penalty_amount",
    "deductions",
    "gross_amount",
    "net_amount",
    "total_paid",
    "balance_amount",
]


def month_calendar(month: int, year: int, days: Iterable[DayClassification]) -> dict[str, str]:
    """Every day of the month mapped to PRESENT / HALF_DAY / ABSENT; days without a row are ABSENT."""

    out = {d.isoformat(): DayKind.ABSENT.value for d in iter_month_days(month, year)}
    for day in days:
        key = day.work_date.isoformat()
        if key in out:
            out[key] = day.kind.value
    return out


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


class SalaryReportService:
    """Read models for salary slips and monthly exports.

    All amounts here are rounded for display; stored values keep full
    precision.
    """

    def __init__(self, salaries: SalaryRepository, ledger: LedgerService):
        self._salaries = salaries
        self._ledger = ledger

    def build_salary_slip(self, salary_id: int) -> dict:
        record = self._salaries.get_by_id(int(salary_id))
        if not record:
            raise NotFoundError(f"Salary {salary_id} not found")

        breakdown = self._salaries.list_breakdown(int(salary_id))
        balance = self._ledger.reconcile(int(salary_id))

        return {
            "salary_id": record.salary_id,
            "staff_id": record.staff_id,
            "period": record.period,
            "pay_type": record.pay_type.value,
            "status": record.status.value,
            "attendance": {
                "total_working_days": record.total_working_days,
                "half_days": record.half_days,
                "absent_days": record.absent_days,
                "total_working_hours": format_amount(record.total_working_hours),
                "overtime_hours": format_amount(record.overtime_hours),
                "late_minutes": record.late_minutes,
            },
            "earnings": [
                {"type": e.type.value, "description": e.description, "amount": format_amount(e.amount)}
                for e in breakdown
                if e.type.is_earning
            ],
            "deductions": [
                {"type": e.type.value, "description": e.description, "amount": format_amount(e.amount)}
                for e in breakdown
                if not e.type.is_earning
            ],
            "totals": {
                "gross_amount": format_amount(record.gross_amount),
                "penalty_amount": format_amount(record.penalty_amount),
                "deductions": format_amount(record.deductions),
                "net_amount": format_amount(record.net_amount),
                "total_paid": format_amount(balance.total_paid),
                "total_deducted": format_amount(balance.total_deducted),
                "total_recovered": format_amount(balance.total_recovered),
                "balance_amount": format_amount(balance.balance_amount),
            },
            "calendar": month_calendar(record.month, record.year, self._salaries.list_days(int(salary_id))),
            "paid_at": record.paid_at.isoformat() if record.paid_at else None,
        }

    def build_monthly_report(self, *, month: int, year: int, company_id: Optional[int] = None) -> ReportData:
        validate_period(month, year)
        rows: list[dict] = []
        sums = {key: Decimal("0") for key in ("gross_amount", "net_amount", "total_paid", "balance_amount")}

        for record in self._salaries.list_for_period(month=month, year=year, company_id=company_id):
            balance = self._ledger.reconcile(int(record.salary_id))
            rows.append(
                {
                    "salary_id": record.salary_id,
                    "staff_id": record.staff_id,
                    "period": record.period,
                    "pay_type": record.pay_type.value,
                    "status": record.status.value,
                    "total_working_days": record.total_working_days,
                    "half_days": record.half_days,
                    "absent_days": record.absent_days,
                    "overtime_hours": format_amount(record.overtime_hours),
                    "late_minutes": record.late_minutes,
                    "base_amount": format_amount(record.base_amount),
                    "overtime_amount": format_amount(record.overtime_amount),
                    "penalty_amount": format_amount(record.penalty_amount),
                    "deductions": format_amount(record.deductions),
                    "gross_amount": format_amount(record.gross_amount),
                    "net_amount": format_amount(record.net_amount),
                    "total_paid": format_amount(balance.total_paid),
                    "balance_amount": format_amount(balance.balance_amount),
                }
            )
            for key, value in (
                ("gross_amount", record.gross_amount),
                ("net_amount", record.net_amount),
                ("total_paid", balance.total_paid),
                ("balance_amount", balance.balance_amount),
            ):
                sums[key] += value

        rows.sort(key=lambda r: r["staff_id"])
        summary = {"staff_count": len(rows)}
        summary.update({key: format_amount(value) for key, value in sums.items()})
        return ReportData(rows=rows, summary=summary)

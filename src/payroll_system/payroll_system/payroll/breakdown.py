from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ..common.money import format_amount
from ..compensation.model import CompensationConfig, DailyPay, HourlyPay, MonthlyPay
from ..core.constants import RECONCILIATION_TOLERANCE
from ..core.enums import BreakdownType
from ..core.exceptions import ReconciliationMismatch
from .model import SalaryBreakdownEntry, SalaryRecord
from .salary_calculator import penalty_parts, statutory_deductions


def _base_description(config: CompensationConfig) -> str:
    rate = config.pay_rate
    if isinstance(rate, MonthlyPay):
        return f"Monthly Base Salary ({format_amount(rate.base_salary)}/month)"
    if isinstance(rate, DailyPay):
        return f"Daily Rate ({format_amount(rate.rate)}/day)"
    if isinstance(rate, HourlyPay):
        return f"Hourly Rate ({format_amount(rate.rate)}/hr)"
    return "Base Salary"


def build_breakdown(record: SalaryRecord, config: CompensationConfig) -> list[SalaryBreakdownEntry]:
    """Itemize a computed salary, earnings first, then deductions."""

    entries = [
        SalaryBreakdownEntry(
            type=BreakdownType.BASE_SALARY,
            description=_base_description(config),
            amount=record.base_amount,
            quantity=Decimal(record.total_working_days),
            salary_id=record.salary_id,
        )
    ]

    if record.overtime_amount > 0:
        entries.append(
            SalaryBreakdownEntry(
                type=BreakdownType.OVERTIME,
                description="Overtime Pay",
                amount=record.overtime_amount,
                quantity=record.overtime_hours,
                salary_id=record.salary_id,
            )
        )

    penalty = penalty_parts(config, late_minutes=record.late_minutes, absent_days=record.absent_days)
    if penalty.late > 0:
        entries.append(
            SalaryBreakdownEntry(
                type=BreakdownType.LATE_PENALTY,
                description="Late Arrival Penalty",
                amount=penalty.late,
                quantity=Decimal(record.late_minutes),
                salary_id=record.salary_id,
            )
        )
    if penalty.absence > 0:
        entries.append(
            SalaryBreakdownEntry(
                type=BreakdownType.ABSENCE_DEDUCTION,
                description="Absent Days Penalty",
                amount=penalty.absence,
                quantity=Decimal(record.absent_days),
                salary_id=record.salary_id,
            )
        )

    statutory = statutory_deductions(config, record.base_amount)
    if statutory.pf > 0:
        entries.append(
            SalaryBreakdownEntry(
                type=BreakdownType.PF_DEDUCTION,
                description="Provident Fund",
                amount=statutory.pf,
                salary_id=record.salary_id,
            )
        )
    if statutory.esi > 0:
        entries.append(
            SalaryBreakdownEntry(
                type=BreakdownType.ESI_DEDUCTION,
                description="Employee State Insurance",
                amount=statutory.esi,
                salary_id=record.salary_id,
            )
        )
    return entries


def breakdown_totals(entries: Sequence[SalaryBreakdownEntry]) -> tuple[Decimal, Decimal]:
    """(earnings, deductions) of a breakdown, both as positive sums."""

    earnings = sum((e.amount for e in entries if e.type.is_earning), Decimal("0"))
    deductions = sum((e.amount for e in entries if not e.type.is_earning), Decimal("0"))
    return earnings, deductions


def verify_breakdown(
    record: SalaryRecord,
    entries: Sequence[SalaryBreakdownEntry],
    *,
    tolerance: Decimal = RECONCILIATION_TOLERANCE,
) -> None:
    earnings, deductions = breakdown_totals(entries)
    where = f"staff {record.staff_id} {record.period}"
    if abs(earnings - record.gross_amount) > tolerance:
        raise ReconciliationMismatch(
            f"{where}: breakdown earnings {earnings} do not match gross {record.gross_amount}"
        )
    if abs(earnings - deductions - record.net_amount) > tolerance:
        raise ReconciliationMismatch(
            f"{where}: breakdown total {earnings - deductions} does not match net {record.net_amount}"
        )

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..attendance.classifier import classify
from ..attendance.model import AttendanceRecord, DayClassification
from ..common.datetime_utils import month_bounds
from ..compensation.model import CompensationConfig
from ..core.enums import DayKind, EsiCeilingMode, SalaryStatus
from ..core.exceptions import StateError, ValidationError
from .calculator.factory import PayCalculatorFactory
from .model import AttendanceSummary, SalaryRecord

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class StatutoryDeductions:
    pf: Decimal
    esi: Decimal

    @property
    def total(self) -> Decimal:
        return self.pf + self.esi


@dataclass(frozen=True)
class PenaltyParts:
    late: Decimal
    absence: Decimal

    @property
    def total(self) -> Decimal:
        return self.late + self.absence


def classify_month(
    config: CompensationConfig,
    attendance: Iterable[AttendanceRecord],
    *,
    staff_id: int,
    month: int,
    year: int,
) -> list[DayClassification]:
    """Classify every record of one staff member's month, in date order."""

    first, last = month_bounds(month, year)
    seen = set()
    out: list[DayClassification] = []
    for record in attendance:
        if record.staff_id != staff_id:
            raise ValidationError(f"Attendance of staff {record.staff_id} passed for staff {staff_id}")
        day = classify(record, config)
        if not first <= day.work_date <= last:
            raise ValidationError(
                f"staff {staff_id}: attendance on {day.work_date.isoformat()} is outside {year:04d}-{month:02d}"
            )
        if day.work_date in seen:
            raise ValidationError(f"staff {staff_id}: duplicate attendance on {day.work_date.isoformat()}")
        seen.add(day.work_date)
        out.append(day)
    out.sort(key=lambda d: d.work_date)
    return out


def summarize(config: CompensationConfig, days: Sequence[DayClassification]) -> AttendanceSummary:
    present = sum(1 for d in days if d.kind == DayKind.PRESENT)
    half = sum(1 for d in days if d.kind == DayKind.HALF_DAY)
    worked = [d for d in days if d.counts_as_working_day]
    total_working_days = present + half

    return AttendanceSummary(
        total_working_days=total_working_days,
        present_days=present,
        half_days=half,
        absent_days=max(0, config.contracted_working_days - total_working_days),
        actual_working_days=Decimal(present) + Decimal(half) * config.half_day_pay_fraction,
        total_working_hours=sum((d.working_hours for d in worked), _ZERO),
        overtime_hours=sum((d.overtime_hours for d in worked), _ZERO),
        late_minutes=sum(d.late_minutes for d in worked),
        late_days=sum(1 for d in worked if d.is_late),
    )


def penalty_parts(config: CompensationConfig, *, late_minutes: int, absent_days: int) -> PenaltyParts:
    late = _ZERO
    absence = _ZERO
    if config.late_penalty_enabled:
        late = Decimal(late_minutes) * config.late_penalty_per_minute
    if config.absence_penalty_enabled:
        absence = Decimal(absent_days) * config.absence_penalty_per_day
    return PenaltyParts(late=late, absence=absence)


def statutory_deductions(config: CompensationConfig, base_amount: Decimal) -> StatutoryDeductions:
    if not config.statutory_eligible:
        return StatutoryDeductions(pf=_ZERO, esi=_ZERO)

    pf = base_amount * config.pf_percentage / _HUNDRED
    if config.esi_ceiling_mode == EsiCeilingMode.EXEMPT and base_amount > config.esi_wage_ceiling:
        esi = _ZERO
    else:
        esi = min(base_amount, config.esi_wage_ceiling) * config.esi_percentage / _HUNDRED
    return StatutoryDeductions(pf=pf, esi=esi)


def ensure_recalculable(existing: Optional[SalaryRecord]) -> None:
    if existing is not None and existing.status != SalaryStatus.PENDING:
        raise StateError(
            f"Salary of staff {existing.staff_id} for {existing.period} is {existing.status.value}; "
            "only PENDING salaries can be recalculated"
        )


@dataclass(frozen=True)
class MonthCalculation:
    record: SalaryRecord
    days: list[DayClassification]


def calculate_month(
    config: CompensationConfig,
    attendance: Iterable[AttendanceRecord],
    *,
    staff_id: int,
    month: int,
    year: int,
    existing: Optional[SalaryRecord] = None,
    factory: Optional[PayCalculatorFactory] = None,
) -> MonthCalculation:
    """Compute a PENDING salary record plus the classified days it was built from.

    ``existing`` is the stored record for the same period, if any; it must
    still be PENDING and lends its id and version to the result.
    """

    ensure_recalculable(existing)
    if existing is not None and (existing.staff_id, existing.month, existing.year) != (staff_id, month, year):
        raise ValidationError(f"Existing salary {existing.salary_id} belongs to a different staff member or period")
    config.validate()

    days = classify_month(config, attendance, staff_id=staff_id, month=month, year=year)
    summary = summarize(config, days)
    calculator = (factory or PayCalculatorFactory()).for_pay_type(config.pay_type)

    base = calculator.base_amount(config, actual_working_days=summary.actual_working_days)
    overtime = calculator.overtime_amount(config, overtime_hours=summary.overtime_hours)
    penalty = penalty_parts(config, late_minutes=summary.late_minutes, absent_days=summary.absent_days)
    deductions = statutory_deductions(config, base)

    gross = base + overtime
    net = gross - penalty.total - deductions.total

    record = SalaryRecord(
        staff_id=staff_id,
        month=month,
        year=year,
        pay_type=config.pay_type,
        total_working_days=summary.total_working_days,
        total_working_hours=summary.total_working_hours,
        overtime_hours=summary.overtime_hours,
        late_minutes=summary.late_minutes,
        half_days=summary.half_days,
        absent_days=summary.absent_days,
        base_amount=base,
        overtime_amount=overtime,
        penalty_amount=penalty.total,
        deductions=deductions.total,
        gross_amount=gross,
        net_amount=net,
        status=SalaryStatus.PENDING,
        version=(existing.version + 1) if existing else 1,
        salary_id=existing.salary_id if existing else None,
    )
    return MonthCalculation(record=record, days=days)


def calculate_salary(config: CompensationConfig, attendance: Iterable[AttendanceRecord], **kwargs) -> SalaryRecord:
    return calculate_month(config, attendance, **kwargs).record

from __future__ import annotations

import json
import random
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest

from src.payroll_system.payroll_system.attendance.model import AttendanceRecord
from src.payroll_system.payroll_system.common.money import format_amount
from src.payroll_system.payroll_system.compensation.model import CompensationConfig, DailyPay, HourlyPay, MonthlyPay
from src.payroll_system.payroll_system.core.enums import AttendanceStatus, EsiCeilingMode, PayType, SalaryStatus
from src.payroll_system.payroll_system.core.exceptions import ConfigurationError, StateError, ValidationError
from src.payroll_system.payroll_system.payroll.salary_calculator import calculate_salary, statutory_deductions


def _day(d: int, *, start=time(9, 0), hours: float = 8, staff_id: int = 1, month: int = 3) -> AttendanceRecord:
    punch_in = datetime.combine(date(2024, month, d), start)
    return AttendanceRecord(
        staff_id=staff_id,
        work_date=date(2024, month, d),
        punch_in=punch_in,
        punch_out=punch_in + timedelta(hours=hours),
        working_hours=None,
        status=AttendanceStatus.APPROVED,
    )


def _calc(config, attendance, **kwargs):
    return calculate_salary(config, attendance, staff_id=1, month=3, year=2024, **kwargs)


MONTHLY_STATUTORY = CompensationConfig(
    pay_rate=MonthlyPay(base_salary=Decimal("30000")),
    contracted_working_days=26,
    statutory_eligible=True,
)


def test_monthly_salary_with_statutory_deductions():
    record = _calc(MONTHLY_STATUTORY, [_day(d) for d in range(1, 25)])

    assert record.pay_type == PayType.MONTHLY
    assert record.total_working_days == 24
    assert record.absent_days == 2
    assert format_amount(record.base_amount) == "27692.31"
    assert format_amount(record.deductions) == "3480.58"
    assert format_amount(record.net_amount) == "24211.73"
    assert record.status == SalaryStatus.PENDING
    assert record.version == 1


def test_daily_salary_with_late_penalty():
    config = CompensationConfig(
        pay_rate=DailyPay(rate=Decimal("1000")),
        contracted_working_days=22,
        late_penalty_enabled=True,
        late_penalty_per_minute=Decimal("2"),
        shift_start=time(9, 0),
        grace_minutes=0,
    )
    attendance = [_day(d, start=time(9, 30) if d <= 2 else time(9, 0)) for d in range(1, 23)]

    record = _calc(config, attendance)

    assert record.base_amount == Decimal("22000")
    assert record.late_minutes == 60
    assert record.penalty_amount == Decimal("120")
    assert record.net_amount == Decimal("21880")


def test_identical_inputs_give_identical_output():
    attendance = [_day(d, hours=9 if d % 5 == 0 else 8) for d in range(1, 25)]
    shuffled = list(attendance)
    random.Random(4).shuffle(shuffled)

    first = _calc(MONTHLY_STATUTORY, attendance)
    second = _calc(MONTHLY_STATUTORY, shuffled)

    assert json.dumps(first.to_dict(), sort_keys=True) == json.dumps(second.to_dict(), sort_keys=True)


def test_half_days_are_paid_at_configured_fraction():
    config = CompensationConfig(pay_rate=MonthlyPay(base_salary=Decimal("26000")), contracted_working_days=26)
    attendance = [_day(d) for d in range(1, 21)] + [_day(21, hours=3), _day(22, hours=3)]

    record = _calc(config, attendance)

    assert record.total_working_days == 22
    assert record.half_days == 2
    assert record.absent_days == 4
    assert record.base_amount == Decimal("21000")


def test_monthly_overtime_priced_from_contracted_hours():
    config = CompensationConfig(pay_rate=MonthlyPay(base_salary=Decimal("26000")), contracted_working_days=26)
    record = _calc(config, [_day(1, hours=10)])

    # 26000 / (26 * 8) = 125 per hour, 2 hours at 1.5x
    assert record.overtime_hours == Decimal("2")
    assert record.overtime_amount == Decimal("375")
    assert record.gross_amount == Decimal("1375")


def test_fixed_overtime_rate_replaces_multiplier():
    config = CompensationConfig(pay_rate=DailyPay(rate=Decimal("800")), overtime_rate=Decimal("200"))
    record = _calc(config, [_day(1, hours=10)])
    assert record.overtime_amount == Decimal("400")


def test_hourly_pay_uses_standard_day():
    config = CompensationConfig(pay_rate=HourlyPay(rate=Decimal("100")))
    record = _calc(config, [_day(d) for d in range(1, 10)] + [_day(10, hours=9)])

    assert record.base_amount == Decimal("8000")
    assert record.overtime_amount == Decimal("150")


def test_absence_penalty_per_missing_contracted_day():
    config = CompensationConfig(
        pay_rate=DailyPay(rate=Decimal("1000")),
        absence_penalty_enabled=True,
        absence_penalty_per_day=Decimal("100"),
    )
    record = _calc(config, [_day(d) for d in range(1, 21)])
    assert record.absent_days == 6
    assert record.penalty_amount == Decimal("600")
    assert record.net_amount == Decimal("19400")


def test_esi_modes_above_ceiling():
    base = Decimal("30000")
    capped = statutory_deductions(MONTHLY_STATUTORY, base)
    exempt = statutory_deductions(replace(MONTHLY_STATUTORY, esi_ceiling_mode=EsiCeilingMode.EXEMPT), base)

    assert capped.esi == Decimal("157.5")
    assert exempt.esi == 0
    assert capped.pf == exempt.pf == Decimal("3600")


def test_esi_below_ceiling_is_same_in_both_modes():
    base = Decimal("20000")
    exempt = replace(MONTHLY_STATUTORY, esi_ceiling_mode=EsiCeilingMode.EXEMPT)
    assert statutory_deductions(MONTHLY_STATUTORY, base).esi == statutory_deductions(exempt, base).esi == Decimal("150")


def test_no_statutory_deductions_when_not_eligible():
    config = replace(MONTHLY_STATUTORY, statutory_eligible=False)
    assert _calc(config, [_day(1)]).deductions == 0


def test_counts_never_negative():
    empty = _calc(MONTHLY_STATUTORY, [])
    assert (empty.total_working_days, empty.absent_days, empty.late_minutes) == (0, 26, 0)
    assert empty.overtime_hours == 0
    assert empty.net_amount == 0

    busy = _calc(MONTHLY_STATUTORY, [_day(d) for d in range(1, 31)])
    assert busy.total_working_days == 30
    assert busy.absent_days == 0


def test_zero_contracted_days_is_configuration_error():
    with pytest.raises(ConfigurationError):
        _calc(replace(MONTHLY_STATUTORY, contracted_working_days=0), [_day(1)])


@pytest.mark.parametrize(
    "attendance",
    [
        [_day(1, month=4)],
        [_day(1), _day(1)],
        [_day(1, staff_id=2)],
    ],
)
def test_bad_attendance_is_validation_error(attendance):
    with pytest.raises(ValidationError):
        _calc(MONTHLY_STATUTORY, attendance)


def test_recalculation_bumps_version_and_keeps_id():
    first = replace(_calc(MONTHLY_STATUTORY, [_day(1)]), salary_id=41, version=3)
    again = _calc(MONTHLY_STATUTORY, [_day(1), _day(2)], existing=first)
    assert again.salary_id == 41
    assert again.version == 4
    assert again.total_working_days == 2


@pytest.mark.parametrize("status", [SalaryStatus.APPROVED, SalaryStatus.PAID, SalaryStatus.REJECTED])
def test_recalculating_finalized_salary_is_state_error(status):
    existing = replace(_calc(MONTHLY_STATUTORY, [_day(1)]), salary_id=41, status=status)
    with pytest.raises(StateError):
        _calc(MONTHLY_STATUTORY, [_day(1)], existing=existing)

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from decimal import Decimal
from typing import ClassVar, Optional, Union

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_int, to_decimal
from ..core import constants
from ..core.enums import EsiCeilingMode, PayType
from ..core.exceptions import ConfigurationError


@dataclass(frozen=True)
class MonthlyPay:
    base_salary: Decimal
    pay_type: ClassVar[PayType] = PayType.MONTHLY


@dataclass(frozen=True)
class HourlyPay:
    rate: Decimal
    pay_type: ClassVar[PayType] = PayType.HOURLY


@dataclass(frozen=True)
class DailyPay:
    rate: Decimal
    pay_type: ClassVar[PayType] = PayType.DAILY


PayRate = Union[MonthlyPay, HourlyPay, DailyPay]


def _check_percentage(value: Decimal, name: str) -> None:
    if not Decimal("0") <= value <= Decimal("100"):
        raise ConfigurationError(f"{name} must be between 0 and 100 (got {value})")


def _check_non_negative(value: Decimal, name: str) -> None:
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative (got {value})")


@dataclass(frozen=True)
class CompensationConfig:
    """Effective pay rules for one staff member at calculation time."""

    pay_rate: PayRate
    contracted_working_days: int = constants.DEFAULT_CONTRACTED_WORKING_DAYS
    standard_hours_per_day: Decimal = constants.DEFAULT_STANDARD_HOURS_PER_DAY
    half_day_threshold_hours: Decimal = constants.DEFAULT_HALF_DAY_THRESHOLD_HOURS
    half_day_pay_fraction: Decimal = constants.DEFAULT_HALF_DAY_PAY_FRACTION
    overtime_multiplier: Decimal = constants.DEFAULT_OVERTIME_MULTIPLIER
    overtime_rate: Optional[Decimal] = None
    late_penalty_enabled: bool = False
    late_penalty_per_minute: Decimal = Decimal("0")
    absence_penalty_enabled: bool = False
    absence_penalty_per_day: Decimal = Decimal("0")
    shift_start: Optional[time] = None
    grace_minutes: int = 0
    statutory_eligible: bool = False
    pf_percentage: Decimal = constants.DEFAULT_PF_PERCENTAGE
    esi_percentage: Decimal = constants.DEFAULT_ESI_PERCENTAGE
    esi_wage_ceiling: Decimal = constants.DEFAULT_ESI_WAGE_CEILING
    esi_ceiling_mode: EsiCeilingMode = EsiCeilingMode.CAP
    count_pending_attendance: bool = False

    @property
    def pay_type(self) -> PayType:
        return self.pay_rate.pay_type

    def validate(self) -> "CompensationConfig":
        if not isinstance(self.pay_rate, (MonthlyPay, HourlyPay, DailyPay)):
            raise ConfigurationError(f"Unsupported pay rate {self.pay_rate!r}")
        rate = self.pay_rate.base_salary if isinstance(self.pay_rate, MonthlyPay) else self.pay_rate.rate
        _check_non_negative(rate, f"{self.pay_type.value.lower()} rate")

        if self.contracted_working_days <= 0:
            raise ConfigurationError(
                f"contracted_working_days must be greater than 0 (got {self.contracted_working_days})"
            )
        if not Decimal("0") < self.standard_hours_per_day <= constants.MAX_DAILY_HOURS:
            raise ConfigurationError(f"standard_hours_per_day must be in (0, 24] (got {self.standard_hours_per_day})")
        if not Decimal("0") <= self.half_day_pay_fraction <= Decimal("1"):
            raise ConfigurationError(f"half_day_pay_fraction must be in [0, 1] (got {self.half_day_pay_fraction})")
        if self.grace_minutes < 0:
            raise ConfigurationError(f"grace_minutes must not be negative (got {self.grace_minutes})")

        _check_non_negative(self.half_day_threshold_hours, "half_day_threshold_hours")
        _check_non_negative(self.overtime_multiplier, "overtime_multiplier")
        _check_non_negative(self.late_penalty_per_minute, "late_penalty_per_minute")
        _check_non_negative(self.absence_penalty_per_day, "absence_penalty_per_day")
        _check_non_negative(self.esi_wage_ceiling, "esi_wage_ceiling")
        if self.overtime_rate is not None:
            _check_non_negative(self.overtime_rate, "overtime_rate")
        _check_percentage(self.pf_percentage, "pf_percentage")
        _check_percentage(self.esi_percentage, "esi_percentage")
        return self


@dataclass(frozen=True)
class CompanyPayrollPolicy:
    """Company-wide defaults every staff member inherits."""

    company_id: int
    default_pay_type: PayType = PayType.MONTHLY
    contracted_working_days: int = constants.DEFAULT_CONTRACTED_WORKING_DAYS
    standard_hours_per_day: Decimal = constants.DEFAULT_STANDARD_HOURS_PER_DAY
    half_day_threshold_hours: Decimal = constants.DEFAULT_HALF_DAY_THRESHOLD_HOURS
    half_day_pay_fraction: Decimal = constants.DEFAULT_HALF_DAY_PAY_FRACTION
    overtime_multiplier: Decimal = constants.DEFAULT_OVERTIME_MULTIPLIER
    late_penalty_enabled: bool = False
    late_penalty_per_minute: Decimal = Decimal("0")
    absence_penalty_enabled: bool = False
    absence_penalty_per_day: Decimal = Decimal("0")
    shift_start: Optional[time] = time(9, 0)
    grace_minutes: int = constants.DEFAULT_LATE_GRACE_MINUTES
    pf_percentage: Decimal = constants.DEFAULT_PF_PERCENTAGE
    esi_percentage: Decimal = constants.DEFAULT_ESI_PERCENTAGE
    esi_wage_ceiling: Decimal = constants.DEFAULT_ESI_WAGE_CEILING
    esi_ceiling_mode: EsiCeilingMode = EsiCeilingMode.CAP
    count_pending_attendance: bool = False


@dataclass(frozen=True)
class StaffCompensation:
    """Per-staff salary setup as stored (rate columns are nullable)."""

    staff_id: int
    company_id: int
    pay_type: Optional[PayType] = None
    base_salary: Optional[Decimal] = None
    hourly_rate: Optional[Decimal] = None
    daily_rate: Optional[Decimal] = None
    contracted_working_days: Optional[int] = None
    overtime_rate: Optional[Decimal] = None
    statutory_eligible: bool = False


def build_pay_rate(pay_type: PayType, staff: StaffCompensation) -> PayRate:
    """Turn nullable rate columns into the tagged pay rate for ``pay_type``."""

    if pay_type == PayType.MONTHLY:
        if staff.base_salary is None:
            raise ConfigurationError(f"Staff {staff.staff_id}: monthly pay type has no base salary")
        return MonthlyPay(base_salary=Decimal(staff.base_salary))
    if pay_type == PayType.HOURLY:
        if staff.hourly_rate is None:
            raise ConfigurationError(f"Staff {staff.staff_id}: hourly pay type has no hourly rate")
        return HourlyPay(rate=Decimal(staff.hourly_rate))
    if pay_type == PayType.DAILY:
        if staff.daily_rate is None:
            raise ConfigurationError(f"Staff {staff.staff_id}: daily pay type has no daily rate")
        return DailyPay(rate=Decimal(staff.daily_rate))
    raise ConfigurationError(f"Staff {staff.staff_id}: unknown pay type {pay_type!r}")


def merge_compensation(policy: CompanyPayrollPolicy, staff: StaffCompensation) -> CompensationConfig:
    """Company defaults overlaid with the staff member's own settings."""

    if staff.company_id != policy.company_id:
        raise ConfigurationError(
            f"Staff {staff.staff_id} belongs to company {staff.company_id}, not {policy.company_id}"
        )

    pay_type = staff.pay_type or policy.default_pay_type
    contracted = policy.contracted_working_days
    if staff.contracted_working_days is not None:
        contracted = int(staff.contracted_working_days)

    config = CompensationConfig(
        pay_rate=build_pay_rate(pay_type, staff),
        contracted_working_days=contracted,
        standard_hours_per_day=policy.standard_hours_per_day,
        half_day_threshold_hours=policy.half_day_threshold_hours,
        half_day_pay_fraction=policy.half_day_pay_fraction,
        overtime_multiplier=policy.overtime_multiplier,
        overtime_rate=staff.overtime_rate,
        late_penalty_enabled=policy.late_penalty_enabled,
        late_penalty_per_minute=policy.late_penalty_per_minute,
        absence_penalty_enabled=policy.absence_penalty_enabled,
        absence_penalty_per_day=policy.absence_penalty_per_day,
        shift_start=policy.shift_start,
        grace_minutes=policy.grace_minutes,
        statutory_eligible=staff.statutory_eligible,
        pf_percentage=policy.pf_percentage,
        esi_percentage=policy.esi_percentage,
        esi_wage_ceiling=policy.esi_wage_ceiling,
        esi_ceiling_mode=policy.esi_ceiling_mode,
        count_pending_attendance=policy.count_pending_attendance,
    )
    return config.validate()


def policy_from_settings(defaults: dict, *, company_id: int = 0) -> CompanyPayrollPolicy:
    """Company policy built from a settings ``PAYROLL_DEFAULTS`` mapping.

    Missing keys keep the dataclass defaults; ``shift_start`` is "HH:MM".
    """

    values: dict = {}
    for key in (
        "standard_hours_per_day",
        "half_day_threshold_hours",
        "half_day_pay_fraction",
        "overtime_multiplier",
        "late_penalty_per_minute",
        "absence_penalty_per_day",
        "pf_percentage",
        "esi_percentage",
        "esi_wage_ceiling",
    ):
        if defaults.get(key) is not None:
            values[key] = to_decimal(defaults[key], key)
    for key in ("contracted_working_days", "grace_minutes"):
        if defaults.get(key) is not None:
            values[key] = require_int(defaults[key], key)
    for key in ("late_penalty_enabled", "absence_penalty_enabled", "count_pending_attendance"):
        if key in defaults:
            values[key] = bool(defaults[key])
    try:
        if defaults.get("default_pay_type"):
            values["default_pay_type"] = PayType(str(defaults["default_pay_type"]).upper())
        if defaults.get("esi_ceiling_mode"):
            values["esi_ceiling_mode"] = EsiCeilingMode(str(defaults["esi_ceiling_mode"]).upper())
    except ValueError as e:
        raise ConfigurationError(f"Invalid payroll default: {e}")
    if "shift_start" in defaults:
        values["shift_start"] = parse_hhmm(defaults["shift_start"]) if defaults["shift_start"] else None

    return CompanyPayrollPolicy(company_id=company_id, **values)

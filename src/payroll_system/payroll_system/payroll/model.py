from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.serialization import dataclass_to_dict
from ..core.enums import BreakdownType, PayType, SalaryStatus


@dataclass(frozen=True)
class AttendanceSummary:
    """Month totals derived from classified attendance days."""

    total_working_days: int
    present_days: int
    half_days: int
    absent_days: int
    actual_working_days: Decimal
    total_working_hours: Decimal
    overtime_hours: Decimal
    late_minutes: int
    late_days: int


@dataclass(frozen=True)
class SalaryRecord:
    staff_id: int
    month: int
    year: int
    pay_type: PayType
    total_working_days: int
    total_working_hours: Decimal
    overtime_hours: Decimal
    late_minutes: int
    half_days: int
    absent_days: int
    base_amount: Decimal
    overtime_amount: Decimal
    penalty_amount: Decimal
    deductions: Decimal
    gross_amount: Decimal
    net_amount: Decimal
    status: SalaryStatus = SalaryStatus.PENDING
    version: int = 1
    salary_id: Optional[int] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    note: Optional[str] = None

    @property
    def period(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)


@dataclass(frozen=True)
class SalaryBreakdownEntry:
    """One itemized line of a salary.

    ``amount`` is always a positive magnitude; ``type`` says whether it is
    added (earning) or subtracted (deduction).
    """

    type: BreakdownType
    description: str
    amount: Decimal
    quantity: Optional[Decimal] = None
    salary_id: Optional[int] = None

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type.is_earning else -self.amount

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)

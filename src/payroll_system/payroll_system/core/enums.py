from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Review state of a punched attendance day."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    ABSENT = "ABSENT"
    LEAVE = "LEAVE"


class DayKind(str, Enum):
    """Outcome of classifying one attendance day for pay purposes."""

    PRESENT = "PRESENT"
    HALF_DAY = "HALF_DAY"
    ABSENT = "ABSENT"


class PayType(str, Enum):
    MONTHLY = "MONTHLY"
    HOURLY = "HOURLY"
    DAILY = "DAILY"


class EsiCeilingMode(str, Enum):
    """How ESI behaves when base pay is above the wage ceiling.

    CAP charges ESI on the ceiling amount, EXEMPT charges nothing.
    """

    CAP = "CAP"
    EXEMPT = "EXEMPT"


class SalaryStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    PAID = "PAID"
    REJECTED = "REJECTED"


class BreakdownType(str, Enum):
    BASE_SALARY = "BASE_SALARY"
    OVERTIME = "OVERTIME"
    LATE_PENALTY = "LATE_PENALTY"
    ABSENCE_DEDUCTION = "ABSENCE_DEDUCTION"
    PF_DEDUCTION = "PF_DEDUCTION"
    ESI_DEDUCTION = "ESI_DEDUCTION"

    @property
    def is_earning(self) -> bool:
        return self in {BreakdownType.BASE_SALARY, BreakdownType.OVERTIME}


class LedgerEntryType(str, Enum):
    PAYMENT = "PAYMENT"
    DEDUCTION = "DEDUCTION"
    RECOVERY = "RECOVERY"


class AuditAction(str, Enum):
    CREATED = "CREATED"
    REGENERATED = "REGENERATED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PAID = "PAID"

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus, DayKind


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one staff member's attendance for one calendar day."""

    staff_id: int
    work_date: date
    punch_in: Optional[datetime]
    punch_out: Optional[datetime]
    working_hours: Optional[Decimal]
    status: AttendanceStatus
    attendance_id: Optional[int] = None


@dataclass(frozen=True)
class DayClassification:
    """How a single day counts towards pay."""

    work_date: date
    kind: DayKind
    working_hours: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    late_minutes: int = 0

    @property
    def is_late(self) -> bool:
        return self.late_minutes > 0

    @property
    def counts_as_working_day(self) -> bool:
        return self.kind in {DayKind.PRESENT, DayKind.HALF_DAY}

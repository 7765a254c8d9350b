from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..attendance.model import DayClassification
from ..core.enums import SalaryStatus
from .model import SalaryBreakdownEntry, SalaryRecord


class SalaryRepository(Protocol):
    def get_by_id(self, salary_id: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def get_for_staff_period(self, *, staff_id: int, month: int, year: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def save_calculation(
        self,
        record: SalaryRecord,
        breakdown: Sequence[SalaryBreakdownEntry],
        days: Sequence[DayClassification] = (),
    ) -> SalaryRecord:
        """Insert or replace the record, its breakdown and its classified days in one transaction.

        Returns the stored record (with ``salary_id`` set). Implementations
        must refuse to overwrite a row that is no longer PENDING or whose
        version moved on since ``record.version - 1``.
        """

        raise NotImplementedError

    def list_breakdown(self, salary_id: int) -> Sequence[SalaryBreakdownEntry]:
        raise NotImplementedError

    def list_days(self, salary_id: int) -> Sequence[DayClassification]:
        """Days as classified when the salary was last calculated, in date order."""

        raise NotImplementedError

    def update_status(
        self,
        *,
        salary_id: int,
        expected: SalaryStatus,
        status: SalaryStatus,
        approved_by: Optional[int] = None,
        approved_at: Optional[datetime] = None,
        paid_at: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> bool:
        """Compare-and-set on status; False when the row was not in ``expected``."""

        raise NotImplementedError

    def list_for_staff(self, staff_id: int) -> Sequence[SalaryRecord]:
        raise NotImplementedError

    def list_for_period(self, *, month: int, year: int, company_id: Optional[int] = None) -> Sequence[SalaryRecord]:
        raise NotImplementedError

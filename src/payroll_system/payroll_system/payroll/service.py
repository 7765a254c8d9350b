from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from ..attendance.model import DayClassification
from ..attendance.repository import AttendanceRepository
from ..audit.model import SalaryAuditEntry
from ..audit.repository import SalaryAuditRepository
from ..common.datetime_utils import now_local, validate_period
from ..common.validators import require_non_empty
from ..compensation.service import CompensationService
from ..core.enums import AuditAction, SalaryStatus
from ..core.exceptions import DomainError, NotFoundError, StateError
from .breakdown import build_breakdown, verify_breakdown
from .calculator.factory import PayCalculatorFactory
from .lifecycle import transition
from .model import SalaryBreakdownEntry, SalaryRecord
from .notifier import LoggingSalaryNotifier, SalaryNotifier
from .repository import SalaryRepository
from .salary_calculator import calculate_month, ensure_recalculable

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalaryCalculation:
    record: SalaryRecord
    breakdown: list[SalaryBreakdownEntry]
    days: list[DayClassification] = field(default_factory=list)


@dataclass
class BatchResult:
    processed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


class SalaryService:
    """Use cases around a salary: generate, approve, reject, pay."""

    def __init__(
        self,
        salaries: SalaryRepository,
        attendance: AttendanceRepository,
        compensation: CompensationService,
        audit: SalaryAuditRepository,
        *,
        notifier: Optional[SalaryNotifier] = None,
        calculator_factory: Optional[PayCalculatorFactory] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._salaries = salaries
        self._attendance = attendance
        self._compensation = compensation
        self._audit = audit
        self._notifier = notifier or LoggingSalaryNotifier()
        self._factory = calculator_factory or PayCalculatorFactory()
        self._clock = clock

    def _get(self, salary_id: int) -> SalaryRecord:
        record = self._salaries.get_by_id(int(salary_id))
        if not record:
            raise NotFoundError(f"Salary {salary_id} not found")
        return record

    def _record_audit(
        self,
        record: SalaryRecord,
        action: AuditAction,
        *,
        actor_id: Optional[int] = None,
        at: Optional[datetime] = None,
        **meta,
    ) -> None:
        self._audit.append(
            SalaryAuditEntry(
                salary_id=int(record.salary_id),
                staff_id=record.staff_id,
                action=action,
                actor_id=actor_id,
                created_at=at or self._clock(),
                meta=meta,
            )
        )

    def _calculate(self, staff_id: int, month: int, year: int, existing: Optional[SalaryRecord]) -> SalaryCalculation:
        config = self._compensation.effective_config(staff_id)
        attendance = self._attendance.list_for_staff_month(staff_id=staff_id, month=month, year=year)
        month_calc = calculate_month(
            config,
            attendance,
            staff_id=staff_id,
            month=month,
            year=year,
            existing=existing,
            factory=self._factory,
        )
        breakdown = build_breakdown(month_calc.record, config)
        verify_breakdown(month_calc.record, breakdown)
        return SalaryCalculation(record=month_calc.record, breakdown=breakdown, days=month_calc.days)

    def preview_salary(self, *, staff_id: int, month: int, year: int) -> SalaryCalculation:
        """Compute without storing anything."""

        validate_period(month, year)
        return self._calculate(int(staff_id), month, year, existing=None)

    def generate_salary(
        self, *, staff_id: int, month: int, year: int, actor_id: Optional[int] = None
    ) -> SalaryCalculation:
        """Create the period's salary, or overwrite it while still PENDING."""

        validate_period(month, year)
        staff_id = int(staff_id)
        existing = self._salaries.get_for_staff_period(staff_id=staff_id, month=month, year=year)
        ensure_recalculable(existing)

        calc = self._calculate(staff_id, month, year, existing)
        saved = self._salaries.save_calculation(calc.record, calc.breakdown, calc.days)
        log.info(
            "salary %s staff=%s period=%s version=%s net=%s",
            "regenerated" if existing else "created",
            staff_id,
            saved.period,
            saved.version,
            saved.net_amount,
        )
        meta = {"version": saved.version, "net_amount": str(saved.net_amount)}
        if existing:
            meta["previous_version"] = existing.version
            meta["previous_net_amount"] = str(existing.net_amount)
        self._record_audit(
            saved,
            AuditAction.REGENERATED if existing else AuditAction.CREATED,
            actor_id=int(actor_id) if actor_id is not None else None,
            **meta,
        )
        breakdown = [replace(e, salary_id=saved.salary_id) for e in calc.breakdown]
        return SalaryCalculation(record=saved, breakdown=breakdown, days=calc.days)

    def recalculate(self, salary_id: int, *, actor_id: Optional[int] = None) -> SalaryCalculation:
        existing = self._get(salary_id)
        ensure_recalculable(existing)
        return self.generate_salary(
            staff_id=existing.staff_id, month=existing.month, year=existing.year, actor_id=actor_id
        )

    def generate_for_staff(self, staff_ids: Iterable[int], *, month: int, year: int) -> BatchResult:
        """Generate a month for many staff; one failure never stops the batch."""

        validate_period(month, year)
        result = BatchResult()
        for staff_id in staff_ids:
            try:
                self.generate_salary(staff_id=staff_id, month=month, year=year)
                result.processed += 1
            except DomainError as e:
                log.warning("salary generation failed for staff %s (%04d-%02d): %s", staff_id, year, month, e)
                result.errors.append(f"Staff {staff_id}: {e}")

        log.info(
            "salary batch %04d-%02d: %s processed, %s errors",
            year,
            month,
            result.processed,
            len(result.errors),
        )
        return result

    def _move(self, record: SalaryRecord, updated: SalaryRecord) -> SalaryRecord:
        ok = self._salaries.update_status(
            salary_id=int(record.salary_id),
            expected=record.status,
            status=updated.status,
            approved_by=updated.approved_by,
            approved_at=updated.approved_at,
            paid_at=updated.paid_at,
            note=updated.note,
        )
        if not ok:
            raise StateError(f"Salary {record.salary_id} was changed concurrently; reload and retry")
        return updated

    def approve(self, salary_id: int, *, actor_id: int) -> SalaryRecord:
        record = self._get(salary_id)
        at = self._clock()
        updated = self._move(record, transition(record, SalaryStatus.APPROVED, actor_id=int(actor_id), at=at))
        self._record_audit(updated, AuditAction.APPROVED, actor_id=int(actor_id), at=at)
        log.info("salary %s approved by %s", record.salary_id, actor_id)
        return updated

    def reject(self, salary_id: int, *, actor_id: int, reason: str) -> SalaryRecord:
        reason = require_non_empty(reason, "reason")
        record = self._get(salary_id)
        at = self._clock()
        updated = self._move(
            record,
            transition(record, SalaryStatus.REJECTED, actor_id=int(actor_id), at=at, note=reason),
        )
        self._record_audit(updated, AuditAction.REJECTED, actor_id=int(actor_id), at=at, reason=reason)
        log.info("salary %s rejected by %s: %s", record.salary_id, actor_id, reason)
        return updated

    def mark_paid(self, salary_id: int, *, actor_id: int, paid_at: Optional[datetime] = None) -> SalaryRecord:
        record = self._get(salary_id)
        updated = self._move(
            record,
            transition(record, SalaryStatus.PAID, actor_id=int(actor_id), at=paid_at or self._clock()),
        )
        self._record_audit(
            updated,
            AuditAction.PAID,
            actor_id=int(actor_id),
            paid_at=updated.paid_at.isoformat(),
            net_amount=str(updated.net_amount),
        )
        log.info("salary %s marked paid by %s", record.salary_id, actor_id)
        self._notifier.salary_paid(updated)
        return updated

    def get_salary(self, salary_id: int) -> SalaryCalculation:
        record = self._get(salary_id)
        return SalaryCalculation(
            record=record,
            breakdown=list(self._salaries.list_breakdown(int(salary_id))),
            days=list(self._salaries.list_days(int(salary_id))),
        )

    def audit_trail(self, salary_id: int) -> Sequence[SalaryAuditEntry]:
        record = self._get(salary_id)
        return self._audit.list_for_salary(int(record.salary_id))

    def list_for_staff(self, staff_id: int) -> Sequence[SalaryRecord]:
        return self._salaries.list_for_staff(int(staff_id))

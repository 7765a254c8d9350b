from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Callable

from ..common.datetime_utils import now_local
from ..core.enums import LedgerEntryType
from ..core.exceptions import NotFoundError
from ..payroll.model import SalaryRecord
from ..payroll.repository import SalaryRepository
from .model import LedgerBalance, SalaryLedgerEntry
from .reconciler import build_posting, build_reversal, reconcile
from .repository import LedgerRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalaryBalanceRow:
    record: SalaryRecord
    balance: LedgerBalance


@dataclass(frozen=True)
class StaffOverview:
    staff_id: int
    salaries: list[SalaryBalanceRow]
    total_net: Decimal
    total_paid: Decimal
    total_deducted: Decimal
    total_recovered: Decimal
    total_owed: Decimal
    total_owe: Decimal


class LedgerService:
    """Use cases: post to a salary's ledger and read its balance."""

    def __init__(
        self,
        ledger: LedgerRepository,
        salaries: SalaryRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._ledger = ledger
        self._salaries = salaries
        self._clock = clock

    def _salary(self, salary_id: int) -> SalaryRecord:
        record = self._salaries.get_by_id(int(salary_id))
        if not record:
            raise NotFoundError(f"Salary {salary_id} not found")
        return record

    def _post(self, entry_type: LedgerEntryType, salary_id: int, amount, reason: str, actor_id: int) -> SalaryLedgerEntry:
        record = self._salary(salary_id)
        entry = build_posting(
            record,
            entry_type=entry_type,
            amount=amount,
            reason=reason,
            actor_id=actor_id,
            at=self._clock(),
        )
        entry_id = self._ledger.append(entry)
        log.info(
            "ledger %s posted: salary=%s entry=%s amount=%s by=%s",
            entry_type.value,
            record.salary_id,
            entry_id,
            entry.amount,
            actor_id,
        )
        return replace(entry, entry_id=entry_id)

    def post_payment(self, salary_id: int, amount, reason: str, actor_id: int) -> SalaryLedgerEntry:
        return self._post(LedgerEntryType.PAYMENT, salary_id, amount, reason, actor_id)

    def post_deduction(self, salary_id: int, amount, reason: str, actor_id: int) -> SalaryLedgerEntry:
        return self._post(LedgerEntryType.DEDUCTION, salary_id, amount, reason, actor_id)

    def post_recovery(self, salary_id: int, amount, reason: str, actor_id: int) -> SalaryLedgerEntry:
        return self._post(LedgerEntryType.RECOVERY, salary_id, amount, reason, actor_id)

    def post_reversal(self, entry_id: int, reason: str, actor_id: int) -> SalaryLedgerEntry:
        original = self._ledger.get_entry(int(entry_id))
        if not original:
            raise NotFoundError(f"Ledger entry {entry_id} not found")
        record = self._salary(original.salary_id)
        history = self._ledger.list_for_salary(int(record.salary_id))
        entry = build_reversal(record, original, history, reason=reason, actor_id=actor_id, at=self._clock())
        new_id = self._ledger.append(entry)
        log.info("ledger entry %s reversed by entry %s (by %s)", entry_id, new_id, actor_id)
        return replace(entry, entry_id=new_id)

    def entries(self, salary_id: int) -> list[SalaryLedgerEntry]:
        self._salary(salary_id)
        return list(self._ledger.list_for_salary(int(salary_id)))

    def reconcile(self, salary_id: int) -> LedgerBalance:
        record = self._salary(salary_id)
        return reconcile(record, self._ledger.list_for_salary(int(salary_id)))

    def staff_overview(self, staff_id: int) -> StaffOverview:
        rows = []
        for record in self._salaries.list_for_staff(int(staff_id)):
            rows.append(SalaryBalanceRow(record=record, balance=reconcile(record, self._ledger.list_for_salary(int(record.salary_id)))))

        zero = Decimal("0")
        return StaffOverview(
            staff_id=int(staff_id),
            salaries=rows,
            total_net=sum((r.record.net_amount for r in rows), zero),
            total_paid=sum((r.balance.total_paid for r in rows), zero),
            total_deducted=sum((r.balance.total_deducted for r in rows), zero),
            total_recovered=sum((r.balance.total_recovered for r in rows), zero),
            total_owed=sum((r.balance.owed_to_staff for r in rows), zero),
            total_owe=sum((r.balance.owed_by_staff for r in rows), zero),
        )

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Sequence

from ..common.validators import require_ledger_amount, require_non_empty
from ..core.enums import LedgerEntryType, SalaryStatus
from ..core.exceptions import StateError, ValidationError
from ..payroll.model import SalaryRecord
from .model import LedgerBalance, SalaryLedgerEntry

POSTABLE_STATUSES = frozenset({SalaryStatus.APPROVED, SalaryStatus.PAID})

# How one unit of stored amount moves the balance still owed to the staff member.
_BALANCE_EFFECT = {
    LedgerEntryType.PAYMENT: Decimal("1"),
    LedgerEntryType.DEDUCTION: Decimal("1"),
    LedgerEntryType.RECOVERY: Decimal("-1"),
}


def authorize_post(record: SalaryRecord) -> None:
    if record.status not in POSTABLE_STATUSES:
        raise StateError(
            f"Salary {record.salary_id} of staff {record.staff_id} for {record.period} is "
            f"{record.status.value}; ledger postings need APPROVED or PAID"
        )


def reconcile(record: SalaryRecord, entries: Iterable[SalaryLedgerEntry]) -> LedgerBalance:
    """Fold a salary's ledger into totals and the balance still owed.

    balance = net - paid - deducted + recovered, where the totals are the
    negated sums of the stored amounts per type. Positive balance: the
    company owes the staff member; negative: the staff member owes back.
    """

    zero = Decimal("0")
    sums = {t: zero for t in LedgerEntryType}
    count = 0
    for entry in entries:
        if entry.salary_id != record.salary_id:
            raise ValidationError(f"Ledger entry {entry.entry_id} belongs to salary {entry.salary_id}, not {record.salary_id}")
        sums[entry.type] += entry.amount
        count += 1

    balance = record.net_amount + sum((_BALANCE_EFFECT[t] * s for t, s in sums.items()), zero)
    return LedgerBalance(
        salary_id=record.salary_id,
        net_amount=record.net_amount,
        total_paid=-sums[LedgerEntryType.PAYMENT],
        total_deducted=-sums[LedgerEntryType.DEDUCTION],
        total_recovered=-sums[LedgerEntryType.RECOVERY],
        balance_amount=balance,
        entry_count=count,
    )


def build_posting(
    record: SalaryRecord,
    *,
    entry_type: LedgerEntryType,
    amount,
    reason: str,
    actor_id: int,
    at: datetime,
) -> SalaryLedgerEntry:
    """New PAYMENT/DEDUCTION/RECOVERY entry for a positive ``amount``."""

    authorize_post(record)
    magnitude = require_ledger_amount(amount)
    return SalaryLedgerEntry(
        salary_id=int(record.salary_id),
        staff_id=record.staff_id,
        type=entry_type,
        amount=-magnitude,
        reason=require_non_empty(reason, "reason"),
        created_by=int(actor_id),
        created_at=at,
    )


def build_reversal(
    record: SalaryRecord,
    original: SalaryLedgerEntry,
    history: Sequence[SalaryLedgerEntry],
    *,
    reason: str,
    actor_id: int,
    at: datetime,
) -> SalaryLedgerEntry:
    authorize_post(record)
    reason = require_non_empty(reason, "reason")
    if original.salary_id != record.salary_id:
        raise ValidationError(f"Ledger entry {original.entry_id} does not belong to salary {record.salary_id}")
    if original.is_reversal:
        raise StateError(f"Ledger entry {original.entry_id} is itself a reversal")
    if any(e.reversal_of == original.entry_id for e in history):
        raise StateError(f"Ledger entry {original.entry_id} was already reversed")

    return SalaryLedgerEntry(
        salary_id=original.salary_id,
        staff_id=original.staff_id,
        type=original.type,
        amount=-original.amount,
        reason=f"Reversal of entry #{original.entry_id}: {reason}",
        created_by=int(actor_id),
        created_at=at,
        reversal_of=original.entry_id,
    )

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime
from decimal import Decimal

import pytest

from src.payroll_system.payroll_system.core.enums import LedgerEntryType, PayType, SalaryStatus
from src.payroll_system.payroll_system.core.exceptions import StateError, ValidationError
from src.payroll_system.payroll_system.ledger.model import SalaryLedgerEntry
from src.payroll_system.payroll_system.ledger.reconciler import authorize_post, build_posting, build_reversal, reconcile
from src.payroll_system.payroll_system.payroll.model import SalaryRecord

AT = datetime(2024, 4, 5, 9, 0)


def _salary(net="20000", status=SalaryStatus.APPROVED) -> SalaryRecord:
    net = Decimal(net)
    return SalaryRecord(
        salary_id=1,
        staff_id=7,
        month=3,
        year=2024,
        pay_type=PayType.MONTHLY,
        total_working_days=26,
        total_working_hours=Decimal("208"),
        overtime_hours=Decimal("0"),
        late_minutes=0,
        half_days=0,
        absent_days=0,
        base_amount=net,
        overtime_amount=Decimal("0"),
        penalty_amount=Decimal("0"),
        deductions=Decimal("0"),
        gross_amount=net,
        net_amount=net,
        status=status,
    )


def _entry(entry_id, entry_type, amount, reversal_of=None) -> SalaryLedgerEntry:
    return SalaryLedgerEntry(
        entry_id=entry_id,
        salary_id=1,
        staff_id=7,
        type=entry_type,
        amount=Decimal(amount),
        reason="test",
        created_by=99,
        created_at=AT,
        reversal_of=reversal_of,
    )


def test_payment_and_recovery_leave_recovery_outstanding():
    # Postings are stored negative; a recovery adds back to what is still owed.
    entries = [_entry(1, LedgerEntryType.PAYMENT, "-20000"), _entry(2, LedgerEntryType.RECOVERY, "-500")]

    balance = reconcile(_salary(), entries)

    assert balance.total_paid == Decimal("20000")
    assert balance.total_recovered == Decimal("500")
    assert balance.total_deducted == 0
    assert balance.balance_amount == Decimal("500")
    assert balance.entry_count == 2
    assert balance.owed_to_staff == Decimal("500")
    assert balance.owed_by_staff == 0


def test_deduction_reduces_balance():
    balance = reconcile(_salary("1000"), [_entry(1, LedgerEntryType.DEDUCTION, "-100")])
    assert balance.total_deducted == Decimal("100")
    assert balance.balance_amount == Decimal("900")


def test_overpayment_gives_negative_balance():
    balance = reconcile(_salary("1000"), [_entry(1, LedgerEntryType.PAYMENT, "-1200")])
    assert balance.balance_amount == Decimal("-200")
    assert balance.owed_by_staff == Decimal("200")


def test_no_entries_means_full_net_outstanding():
    balance = reconcile(_salary(), [])
    assert balance.balance_amount == Decimal("20000")
    assert balance.entry_count == 0


def test_balance_is_order_independent():
    entries = [
        _entry(1, LedgerEntryType.PAYMENT, "-15000"),
        _entry(2, LedgerEntryType.DEDUCTION, "-250.55"),
        _entry(3, LedgerEntryType.RECOVERY, "-500"),
        _entry(4, LedgerEntryType.PAYMENT, "15000", reversal_of=1),
    ]
    balances = {reconcile(_salary(), list(p)).balance_amount for p in itertools.permutations(entries)}
    assert balances == {Decimal("20249.45")}


def test_entry_from_other_salary_is_rejected():
    stray = replace(_entry(1, LedgerEntryType.PAYMENT, "-10"), salary_id=2)
    with pytest.raises(ValidationError):
        reconcile(_salary(), [stray])


@pytest.mark.parametrize("status", [SalaryStatus.PENDING, SalaryStatus.REJECTED])
def test_posting_needs_approved_or_paid(status):
    with pytest.raises(StateError):
        authorize_post(_salary(status=status))
    with pytest.raises(StateError):
        build_posting(
            _salary(status=status), entry_type=LedgerEntryType.PAYMENT, amount="10", reason="x", actor_id=1, at=AT
        )


@pytest.mark.parametrize("status", [SalaryStatus.APPROVED, SalaryStatus.PAID])
def test_posting_is_stored_negative(status):
    entry = build_posting(
        _salary(status=status), entry_type=LedgerEntryType.RECOVERY, amount="500", reason="advance", actor_id=3, at=AT
    )
    assert entry.amount == Decimal("-500")
    assert entry.type == LedgerEntryType.RECOVERY
    assert entry.created_by == 3
    assert entry.entry_id is None


@pytest.mark.parametrize(
    "amount, reason",
    [("0", "x"), ("-5", "x"), ("abc", "x"), ("10", "   "), ("10.0049", "x"), (Decimal("0.001"), "x")],
)
def test_posting_validates_amount_and_reason(amount, reason):
    with pytest.raises(ValidationError):
        build_posting(_salary(), entry_type=LedgerEntryType.PAYMENT, amount=amount, reason=reason, actor_id=1, at=AT)


def test_reversal_inverts_entry_and_references_it():
    original = _entry(5, LedgerEntryType.PAYMENT, "-20000")
    reversal = build_reversal(_salary(), original, [original], reason="wrong account", actor_id=2, at=AT)

    assert reversal.amount == Decimal("20000")
    assert reversal.type == LedgerEntryType.PAYMENT
    assert reversal.reversal_of == 5
    assert reversal.reason == "Reversal of entry #5: wrong account"
    assert reconcile(_salary(), [original, reversal]).balance_amount == Decimal("20000")


def test_reversal_of_reversal_is_state_error():
    original = _entry(5, LedgerEntryType.PAYMENT, "-100")
    reversal = _entry(6, LedgerEntryType.PAYMENT, "100", reversal_of=5)
    with pytest.raises(StateError):
        build_reversal(_salary(), reversal, [original, reversal], reason="again", actor_id=2, at=AT)


def test_double_reversal_is_state_error():
    original = _entry(5, LedgerEntryType.PAYMENT, "-100")
    reversal = _entry(6, LedgerEntryType.PAYMENT, "100", reversal_of=5)
    with pytest.raises(StateError):
        build_reversal(_salary(), original, [original, reversal], reason="again", actor_id=2, at=AT)


def test_posting_keeps_paise_precision():
    entry = build_posting(_salary(), entry_type=LedgerEntryType.PAYMENT, amount="10.50", reason="x", actor_id=1, at=AT)
    assert entry.amount == Decimal("-10.50")
    assert entry.amount.as_tuple().exponent == -2

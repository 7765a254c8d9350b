from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.serialization import dataclass_to_dict
from ..core.enums import LedgerEntryType


@dataclass(frozen=True)
class SalaryLedgerEntry:
    """Append-only posting against a salary.

    Sign convention: a posting is stored as the change it makes to the
    salary account's cash flow, so PAYMENT, DEDUCTION and RECOVERY are stored
    negative and their reversals positive. See ``reconciler.reconcile`` for
    how each type moves the balance.
    """

    salary_id: int
    staff_id: int
    type: LedgerEntryType
    amount: Decimal
    reason: str
    created_by: int
    created_at: datetime
    entry_id: Optional[int] = None
    reversal_of: Optional[int] = None

    @property
    def is_reversal(self) -> bool:
        return self.reversal_of is not None

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)


@dataclass(frozen=True)
class LedgerBalance:
    salary_id: Optional[int]
    net_amount: Decimal
    total_paid: Decimal
    total_deducted: Decimal
    total_recovered: Decimal
    balance_amount: Decimal
    entry_count: int

    @property
    def owed_to_staff(self) -> Decimal:
        return max(self.balance_amount, Decimal("0"))

    @property
    def owed_by_staff(self) -> Decimal:
        return max(-self.balance_amount, Decimal("0"))

    def to_dict(self) -> dict:
        out = dataclass_to_dict(self)
        out["owed_to_staff"] = str(self.owed_to_staff)
        out["owed_by_staff"] = str(self.owed_by_staff)
        return out

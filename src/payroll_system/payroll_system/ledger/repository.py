from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SalaryLedgerEntry


class LedgerRepository(Protocol):
    def append(self, entry: SalaryLedgerEntry) -> int:
        """Insert one entry and return its id. Entries are never updated or deleted."""

        raise NotImplementedError

    def get_entry(self, entry_id: int) -> Optional[SalaryLedgerEntry]:
        raise NotImplementedError

    def list_for_salary(self, salary_id: int) -> Sequence[SalaryLedgerEntry]:
        """Entries in insertion order."""

        raise NotImplementedError

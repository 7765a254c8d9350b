from __future__ import annotations

from typing import Protocol, Sequence

from .model import SalaryAuditEntry


class SalaryAuditRepository(Protocol):
    def append(self, entry: SalaryAuditEntry) -> int:
        """Insert one entry and return its id. Entries are never updated or deleted."""

        raise NotImplementedError

    def list_for_salary(self, salary_id: int) -> Sequence[SalaryAuditEntry]:
        """Entries in insertion order."""

        raise NotImplementedError

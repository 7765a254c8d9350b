from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..core.enums import SalaryStatus
from ..core.exceptions import StateError
from .model import SalaryRecord

ALLOWED_TRANSITIONS: dict[SalaryStatus, frozenset[SalaryStatus]] = {
    SalaryStatus.PENDING: frozenset({SalaryStatus.APPROVED, SalaryStatus.REJECTED}),
    SalaryStatus.APPROVED: frozenset({SalaryStatus.PAID}),
    SalaryStatus.PAID: frozenset(),
    SalaryStatus.REJECTED: frozenset(),
}


def can_transition(current: SalaryStatus, target: SalaryStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def transition(
    record: SalaryRecord,
    target: SalaryStatus,
    *,
    actor_id: int,
    at: datetime,
    note: Optional[str] = None,
) -> SalaryRecord:
    """Return ``record`` moved to ``target``; raise StateError if not allowed."""

    if not can_transition(record.status, target):
        raise StateError(
            f"Salary {record.salary_id} of staff {record.staff_id} for {record.period} "
            f"cannot move from {record.status.value} to {target.value}"
        )

    if target == SalaryStatus.APPROVED:
        return replace(record, status=target, approved_by=actor_id, approved_at=at)
    if target == SalaryStatus.PAID:
        return replace(record, status=target, paid_at=at)
    return replace(record, status=target, note=note)

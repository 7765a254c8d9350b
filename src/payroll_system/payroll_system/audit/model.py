from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..common.serialization import dataclass_to_dict
from ..core.enums import AuditAction


@dataclass(frozen=True)
class SalaryAuditEntry:
    """One step in a salary's history. ``meta`` holds JSON-safe values only."""

    salary_id: int
    staff_id: int
    action: AuditAction
    created_at: datetime
    actor_id: Optional[int] = None
    meta: dict = field(default_factory=dict)
    audit_id: Optional[int] = None

    def to_dict(self) -> dict:
        return dataclass_to_dict(self)

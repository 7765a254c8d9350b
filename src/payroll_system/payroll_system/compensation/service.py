from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..core.exceptions import NotFoundError
from .model import CompanyPayrollPolicy, CompensationConfig, merge_compensation
from .repository import CompensationRepository


class CompensationService:
    """Use case: resolve the effective compensation config of a staff member."""

    def __init__(self, compensation: CompensationRepository, *, fallback_policy: Optional[CompanyPayrollPolicy] = None):
        self._compensation = compensation
        self._fallback_policy = fallback_policy

    def company_id_for(self, staff_id: int) -> int:
        staff = self._compensation.get_staff_compensation(int(staff_id))
        if not staff:
            raise NotFoundError(f"No salary setup for staff {staff_id}")
        return staff.company_id

    def effective_config(self, staff_id: int) -> CompensationConfig:
        staff = self._compensation.get_staff_compensation(int(staff_id))
        if not staff:
            raise NotFoundError(f"No salary setup for staff {staff_id}")

        policy = self._compensation.get_company_policy(staff.company_id)
        if policy is None and self._fallback_policy is not None:
            # Settings defaults stand in for companies that never saved a policy.
            policy = replace(self._fallback_policy, company_id=staff.company_id)
        if policy is None:
            raise NotFoundError(f"No payroll policy for company {staff.company_id}")

        return merge_compensation(policy, staff)

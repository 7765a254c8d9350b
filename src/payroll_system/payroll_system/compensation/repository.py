from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CompanyPayrollPolicy, StaffCompensation


class CompensationRepository(Protocol):
    def get_staff_compensation(self, staff_id: int) -> Optional[StaffCompensation]:
        raise NotImplementedError

    def get_company_policy(self, company_id: int) -> Optional[CompanyPayrollPolicy]:
        raise NotImplementedError

    def list_active_staff_ids(self, company_id: Optional[int] = None) -> Sequence[int]:
        raise NotImplementedError

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

import pytest

from src.payroll_system.payroll_system.attendance.model import AttendanceRecord
from src.payroll_system.payroll_system.compensation.model import CompanyPayrollPolicy, StaffCompensation
from src.payroll_system.payroll_system.compensation.service import CompensationService
from src.payroll_system.payroll_system.core.enums import AttendanceStatus, PayType, SalaryStatus
from src.payroll_system.payroll_system.core.exceptions import StateError
from src.payroll_system.payroll_system.ledger.service import LedgerService
from src.payroll_system.payroll_system.payroll.service import SalaryService
from src.payroll_system.payroll_system.reports.service import SalaryReportService


def worked_day(staff_id: int, work_date: date, *, start=time(9, 0), hours: int = 8, status=AttendanceStatus.APPROVED):
    punch_in = datetime.combine(work_date, start)
    return AttendanceRecord(
        staff_id=staff_id,
        work_date=work_date,
        punch_in=punch_in,
        punch_out=punch_in + timedelta(hours=hours),
        working_hours=None,
        status=status,
    )


class InMemoryAttendance:
    def __init__(self, records=()):
        self.records: list[AttendanceRecord] = list(records)

    def add(self, *records: AttendanceRecord) -> None:
        self.records.extend(records)

    def list_for_staff_month(self, *, staff_id: int, month: int, year: int):
        return [
            r
            for r in self.records
            if r.staff_id == staff_id and r.work_date.month == month and r.work_date.year == year
        ]


class InMemoryCompensation:
    def __init__(self):
        self.staff: dict[int, StaffCompensation] = {}
        self.policies: dict[int, CompanyPayrollPolicy] = {}

    def get_staff_compensation(self, staff_id: int) -> Optional[StaffCompensation]:
        return self.staff.get(staff_id)

    def get_company_policy(self, company_id: int) -> Optional[CompanyPayrollPolicy]:
        return self.policies.get(company_id)

    def list_active_staff_ids(self, company_id: Optional[int] = None):
        return sorted(s.staff_id for s in self.staff.values() if company_id is None or s.company_id == company_id)


class InMemorySalaries:
    """Mirrors the MySQL repository: unique period, version check, compare-and-set status."""

    def __init__(self):
        self.records: dict[int, object] = {}
        self.breakdowns: dict[int, list] = {}
        self.days: dict[int, list] = {}
        self._id = 0

    def get_by_id(self, salary_id: int):
        return self.records.get(salary_id)

    def get_for_staff_period(self, *, staff_id: int, month: int, year: int):
        for r in self.records.values():
            if (r.staff_id, r.month, r.year) == (staff_id, month, year):
                return r
        return None

    def save_calculation(self, record, breakdown, days=()):
        if record.salary_id is None:
            if self.get_for_staff_period(staff_id=record.staff_id, month=record.month, year=record.year):
                raise StateError("duplicate salary period")
            self._id += 1
            salary_id = self._id
        else:
            salary_id = record.salary_id
            stored = self.records.get(salary_id)
            if stored is None or stored.status != SalaryStatus.PENDING or stored.version != record.version - 1:
                raise StateError("stale salary version")
        saved = replace(record, salary_id=salary_id)
        self.records[salary_id] = saved
        self.breakdowns[salary_id] = [replace(e, salary_id=salary_id) for e in breakdown]
        self.days[salary_id] = sorted(days, key=lambda d: d.work_date)
        return saved

    def list_breakdown(self, salary_id: int):
        return list(self.breakdowns.get(salary_id, []))

    def list_days(self, salary_id: int):
        return list(self.days.get(salary_id, []))

    def update_status(self, *, salary_id, expected, status, approved_by=None, approved_at=None, paid_at=None, note=None):
        stored = self.records.get(salary_id)
        if stored is None or stored.status != expected:
            return False
        self.records[salary_id] = replace(
            stored, status=status, approved_by=approved_by, approved_at=approved_at, paid_at=paid_at, note=note
        )
        return True

    def list_for_staff(self, staff_id: int):
        items = [r for r in self.records.values() if r.staff_id == staff_id]
        return sorted(items, key=lambda r: (r.year, r.month), reverse=True)

    def list_for_period(self, *, month: int, year: int, company_id: Optional[int] = None):
        return [r for r in self.records.values() if (r.month, r.year) == (month, year)]


class InMemoryLedger:
    def __init__(self):
        self.entries: list = []

    def append(self, entry) -> int:
        if entry.reversal_of is not None and any(e.reversal_of == entry.reversal_of for e in self.entries):
            raise StateError("already reversed")
        entry_id = len(self.entries) + 1
        self.entries.append(replace(entry, entry_id=entry_id))
        return entry_id

    def get_entry(self, entry_id: int):
        for e in self.entries:
            if e.entry_id == entry_id:
                return e
        return None

    def list_for_salary(self, salary_id: int):
        return [e for e in self.entries if e.salary_id == salary_id]


class InMemoryAudit:
    def __init__(self):
        self.entries: list = []

    def append(self, entry) -> int:
        audit_id = len(self.entries) + 1
        self.entries.append(replace(entry, audit_id=audit_id))
        return audit_id

    def list_for_salary(self, salary_id: int):
        return [e for e in self.entries if e.salary_id == salary_id]


class RecordingNotifier:
    def __init__(self):
        self.paid = []

    def salary_paid(self, record) -> None:
        self.paid.append(record)


@pytest.fixture
def fixed_now():
    return datetime(2024, 4, 2, 10, 0, 0)


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def compensation_repo():
    repo = InMemoryCompensation()
    repo.policies[1] = CompanyPayrollPolicy(company_id=1, shift_start=time(9, 0), grace_minutes=0)
    # Staff 7: monthly, statutory; staff 8: daily, no statutory.
    repo.staff[7] = StaffCompensation(
        staff_id=7, company_id=1, pay_type=PayType.MONTHLY, base_salary=Decimal("30000"), statutory_eligible=True
    )
    repo.staff[8] = StaffCompensation(staff_id=8, company_id=1, pay_type=PayType.DAILY, daily_rate=Decimal("1000"))
    return repo


@pytest.fixture
def salaries_repo():
    return InMemorySalaries()


@pytest.fixture
def ledger_repo():
    return InMemoryLedger()


@pytest.fixture
def audit_repo():
    return InMemoryAudit()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def compensation_service(compensation_repo):
    return CompensationService(compensation_repo)


@pytest.fixture
def salary_service(salaries_repo, attendance_repo, compensation_service, audit_repo, notifier, fixed_now):
    return SalaryService(
        salaries_repo,
        attendance_repo,
        compensation_service,
        audit_repo,
        notifier=notifier,
        clock=lambda: fixed_now,
    )


@pytest.fixture
def ledger_service(ledger_repo, salaries_repo, fixed_now):
    return LedgerService(ledger_repo, salaries_repo, clock=lambda: fixed_now)


@pytest.fixture
def report_service(salaries_repo, ledger_service):
    return SalaryReportService(salaries_repo, ledger_service)


@pytest.fixture
def march_attendance(attendance_repo):
    """24 full days for staff 7 and 22 days for staff 8 (two of them 30 minutes late)."""

    days = [date(2024, 3, d) for d in range(1, 25)]
    attendance_repo.add(*(worked_day(7, d) for d in days))
    for i, d in enumerate(days[:22]):
        attendance_repo.add(worked_day(8, d, start=time(9, 30) if i < 2 else time(9, 0)))
    return attendance_repo

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .audit.mysql_audit_repository import MySQLSalaryAuditRepository
from .compensation.model import policy_from_settings
from .compensation.mysql_compensation_repository import MySQLCompensationRepository
from .compensation.service import CompensationService
from .database.connection import DBConfig, DatabaseConnection
from .ledger.mysql_ledger_repository import MySQLLedgerRepository
from .ledger.service import LedgerService
from .payroll.mysql_salary_repository import MySQLSalaryRepository
from .payroll.notifier import LoggingSalaryNotifier
from .payroll.service import SalaryService
from .reports.service import SalaryReportService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    attendance_repo: MySQLAttendanceRepository
    compensation_repo: MySQLCompensationRepository
    salaries_repo: MySQLSalaryRepository
    ledger_repo: MySQLLedgerRepository
    audit_repo: MySQLSalaryAuditRepository

    compensation_service: CompensationService
    salary_service: SalaryService
    ledger_service: LedgerService
    report_service: SalaryReportService


def build_container(*, db_config: dict, payroll_defaults: Optional[dict] = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    attendance_repo = MySQLAttendanceRepository(conn)
    compensation_repo = MySQLCompensationRepository(conn)
    salaries_repo = MySQLSalaryRepository(conn)
    ledger_repo = MySQLLedgerRepository(conn)
    audit_repo = MySQLSalaryAuditRepository(conn)

    compensation_service = CompensationService(
        compensation_repo,
        fallback_policy=policy_from_settings(payroll_defaults) if payroll_defaults else None,
    )
    salary_service = SalaryService(
        salaries_repo,
        attendance_repo,
        compensation_service,
        audit_repo,
        notifier=LoggingSalaryNotifier(),
    )
    ledger_service = LedgerService(ledger_repo, salaries_repo)
    report_service = SalaryReportService(salaries_repo, ledger_service)

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        compensation_repo=compensation_repo,
        salaries_repo=salaries_repo,
        ledger_repo=ledger_repo,
        audit_repo=audit_repo,
        compensation_service=compensation_service,
        salary_service=salary_service,
        ledger_service=ledger_service,
        report_service=report_service,
    )

from __future__ import annotations

import logging
from typing import Protocol

from .model import SalaryRecord

log = logging.getLogger(__name__)


class SalaryNotifier(Protocol):
    def salary_paid(self, record: SalaryRecord) -> None:
        raise NotImplementedError


class LoggingSalaryNotifier:
    """Default notifier: delivery transport lives outside this service."""

    def salary_paid(self, record: SalaryRecord) -> None:
        log.info(
            "salary %s paid: staff=%s period=%s net=%s",
            record.salary_id,
            record.staff_id,
            record.period,
            record.net_amount,
        )

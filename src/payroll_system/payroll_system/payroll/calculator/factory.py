from __future__ import annotations

from dataclasses import dataclass

from ...core.enums import PayType
from ...core.exceptions import ConfigurationError
from .base import BasePayCalculator
from .daily_calculator import DailyPayCalculator
from .hourly_calculator import HourlyPayCalculator
from .monthly_calculator import MonthlyPayCalculator


@dataclass
class PayCalculatorFactory:
    """Factory Pattern: choose the base-pay calculator for a pay type."""

    def for_pay_type(self, pay_type: PayType) -> BasePayCalculator:
        if pay_type == PayType.MONTHLY:
            return MonthlyPayCalculator()
        if pay_type == PayType.DAILY:
            return DailyPayCalculator()
        if pay_type == PayType.HOURLY:
            return HourlyPayCalculator()
        raise ConfigurationError(f"Unsupported pay type {pay_type!r}")

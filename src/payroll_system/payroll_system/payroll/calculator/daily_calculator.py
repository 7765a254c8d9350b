from __future__ import annotations

from decimal import Decimal

from ...compensation.model import CompensationConfig
from .base import BasePayCalculator


class DailyPayCalculator(BasePayCalculator):
    """Daily rate times worked days."""

    def base_amount(self, config: CompensationConfig, *, actual_working_days: Decimal) -> Decimal:
        return config.pay_rate.rate * actual_working_days

    def hourly_rate(self, config: CompensationConfig) -> Decimal:
        return config.pay_rate.rate / config.standard_hours_per_day

from __future__ import annotations

from decimal import Decimal

from ...compensation.model import CompensationConfig
from .base import BasePayCalculator


class HourlyPayCalculator(BasePayCalculator):
    """Hourly rate over a standard day for every worked day."""

    def base_amount(self, config: CompensationConfig, *, actual_working_days: Decimal) -> Decimal:
        return config.pay_rate.rate * config.standard_hours_per_day * actual_working_days

    def hourly_rate(self, config: CompensationConfig) -> Decimal:
        return config.pay_rate.rate

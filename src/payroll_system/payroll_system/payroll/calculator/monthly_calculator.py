from __future__ import annotations

from decimal import Decimal

from ...compensation.model import CompensationConfig
from .base import BasePayCalculator


class MonthlyPayCalculator(BasePayCalculator):
    """Base salary pro-rated by worked days over contracted days."""

    def base_amount(self, config: CompensationConfig, *, actual_working_days: Decimal) -> Decimal:
        return config.pay_rate.base_salary * actual_working_days / Decimal(config.contracted_working_days)

    def hourly_rate(self, config: CompensationConfig) -> Decimal:
        contracted_hours = Decimal(config.contracted_working_days) * config.standard_hours_per_day
        return config.pay_rate.base_salary / contracted_hours

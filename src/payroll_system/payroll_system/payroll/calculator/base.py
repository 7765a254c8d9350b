from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...compensation.model import CompensationConfig


class BasePayCalculator(ABC):
    """Calculator interface (Strategy Pattern for pay types)."""

    @abstractmethod
    def base_amount(self, config: CompensationConfig, *, actual_working_days: Decimal) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def hourly_rate(self, config: CompensationConfig) -> Decimal:
        """Per-hour rate overtime is priced from."""

        raise NotImplementedError

    def overtime_amount(self, config: CompensationConfig, *, overtime_hours: Decimal) -> Decimal:
        if overtime_hours <= 0:
            return Decimal("0")
        if config.overtime_rate is not None:
            return config.overtime_rate * overtime_hours
        return self.hourly_rate(config) * config.overtime_multiplier * overtime_hours

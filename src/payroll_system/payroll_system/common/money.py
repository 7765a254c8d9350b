from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import DISPLAY_QUANTUM


def to_display(amount: Decimal) -> Decimal:
    """Round a monetary value to paise for display/export only."""
    return Decimal(amount).quantize(DISPLAY_QUANTUM, rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal) -> str:
    return f"{to_display(amount):.2f}"

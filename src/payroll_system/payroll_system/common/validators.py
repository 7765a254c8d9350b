from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ..core.constants import LEDGER_QUANTUM
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def to_decimal(value, field_name: str) -> Decimal:
    """Coerce user/driver input into a Decimal.

    Floats go through ``str`` so 0.1 stays 0.1.
    """

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError(f"{field_name} must be a number")
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    return result


def require_positive_amount(value, field_name: str = "amount") -> Decimal:
    amount = to_decimal(value, field_name)
    if amount <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return amount


def require_ledger_amount(value, field_name: str = "amount") -> Decimal:
    """Positive amount in whole paise, the precision of the ledger column."""

    amount = require_positive_amount(value, field_name)
    if amount != amount.quantize(LEDGER_QUANTUM):
        raise ValidationError(f"{field_name} must have at most 2 decimal places (got {amount})")
    return amount.quantize(LEDGER_QUANTUM)


def require_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field_name} must be an integer (got {value})")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")

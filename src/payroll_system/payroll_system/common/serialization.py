from __future__ import annotations

from dataclasses import fields
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum


def to_plain(value):
    """JSON-safe form of a field value; Decimals keep full precision as strings."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


def dataclass_to_dict(obj) -> dict:
    return {f.name: to_plain(getattr(obj, f.name)) for f in fields(obj)}

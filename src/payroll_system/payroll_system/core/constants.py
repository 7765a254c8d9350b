"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_CONTRACTED_WORKING_DAYS = 26
DEFAULT_STANDARD_HOURS_PER_DAY = Decimal("8")
DEFAULT_HALF_DAY_THRESHOLD_HOURS = Decimal("4")
DEFAULT_HALF_DAY_PAY_FRACTION = Decimal("0.5")
DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")
DEFAULT_PF_PERCENTAGE = Decimal("12")
DEFAULT_ESI_PERCENTAGE = Decimal("0.75")
DEFAULT_ESI_WAGE_CEILING = Decimal("21000")
DEFAULT_LATE_GRACE_MINUTES = 30

MAX_DAILY_HOURS = Decimal("24")
RECONCILIATION_TOLERANCE = Decimal("0.01")
DISPLAY_QUANTUM = Decimal("0.01")
LEDGER_QUANTUM = Decimal("0.01")

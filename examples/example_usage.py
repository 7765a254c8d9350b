"""Example: use the service layer directly (no Flask).

Previews one staff member's salary for a month and prints the itemized lines.
"""

import importlib
import sys

from dotenv import load_dotenv

from config import get_settings_module

from src.payroll_system.payroll_system.common.money import format_amount
from src.payroll_system.payroll_system.container import build_container


def main(staff_id: int, month: int, year: int) -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, payroll_defaults=settings.PAYROLL_DEFAULTS)

    calc = container.salary_service.preview_salary(staff_id=staff_id, month=month, year=year)
    print(f"staff {staff_id} {calc.record.period} ({calc.record.pay_type.value})")
    for line in calc.breakdown:
        print(f"  {line.description:<45} {format_amount(line.signed_amount):>12}")
    print(f"  {'Net':<45} {format_amount(calc.record.net_amount):>12}")


if __name__ == "__main__":
    main(*(int(a) for a in sys.argv[1:4]))

"""Generate (or regenerate while PENDING) one month of salaries.

Meant for a monthly cron job:

    python scripts/generate_salaries.py --month 3 --year 2024 [--company 1] [--staff 7 --staff 9]
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.payroll_system.payroll_system.common.datetime_utils import now_local
from src.payroll_system.payroll_system.container import build_container


def _parse_args(argv=None) -> argparse.Namespace:
    today = now_local()
    parser = argparse.ArgumentParser(description="Generate monthly salaries")
    parser.add_argument("--month", type=int, default=today.month)
    parser.add_argument("--year", type=int, default=today.year)
    parser.add_argument("--company", type=int, default=None, help="only staff of this company")
    parser.add_argument("--staff", type=int, action="append", default=None, help="staff id (repeatable)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    load_dotenv(override=False)
    args = _parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        payroll_defaults=getattr(settings, "PAYROLL_DEFAULTS", None),
    )
    staff_ids = args.staff or container.compensation_repo.list_active_staff_ids(company_id=args.company)

    result = container.salary_service.generate_for_staff(staff_ids, month=args.month, year=args.year)
    print(f"{args.year:04d}-{args.month:02d}: processed={result.processed} errors={len(result.errors)}")
    for error in result.errors:
        print(f"  {error}")
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())

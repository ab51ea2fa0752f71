"""Example: call the service layer directly (no Flask).

Prints last month's payroll for every owner with a salary configured.
"""

import importlib
from datetime import date, timedelta

from config import get_settings_module

from src.timekeeping.timekeeping.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    last_month_end = date.today().replace(day=1) - timedelta(days=1)
    rows = container.payroll_service.build_payroll_report(last_month_end.replace(day=1), last_month_end)
    for row in rows:
        if row.result is None:
            print(f"{row.owner_id}: not computable ({row.reason})")
            continue
        r = row.result
        print(f"{r.owner_id}: {r.currency}{r.net_salary:.2f} (lop={r.lop_days}, missed={r.missed_days})")


if __name__ == "__main__":
    main()

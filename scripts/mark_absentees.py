"""Close an attendance day for one company.

Usage: python scripts/mark_absentees.py <company_id> [YYYY-MM-DD]
The date defaults to yesterday. Intended to run from cron after midnight.
"""

from __future__ import annotations

import importlib
import sys
from datetime import timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src" / "hrm_system"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from dotenv import load_dotenv

from config import get_settings_module

from hrm_system.common.datetime_utils import now_local, parse_iso_date
from hrm_system.common.logging import setup_logging
from hrm_system.container import build_container
from hrm_system.core.tenant import TenantContext
from hrm_system.main import payroll_settings_from

# user_id recorded as created_by on rows written by the job
SYSTEM_USER_ID = 0


def main(argv: list[str]) -> int:
    if len(argv) < 2 or not argv[1].isdigit():
        print(__doc__)
        return 2

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(str(getattr(settings, "LOG_LEVEL", "INFO")))

    work_date = parse_iso_date(argv[2]) if len(argv) > 2 else now_local().date() - timedelta(days=1)
    container = build_container(db_config=dict(settings.DB_CONFIG), settings=payroll_settings_from(settings))

    summary = container.attendance_service.mark_absentees(
        TenantContext(company_id=int(argv[1]), user_id=SYSTEM_USER_ID), work_date
    )
    print(f"OK: {summary.to_dict()}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))

from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.validators import require_date_order, require_non_empty
from ..core.tenant import TenantContext
from .model import Holiday
from .repository import HolidayRepository


class HolidayService:
    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    def create(self, tenant: TenantContext, *, name: str, start_date: date, end_date: date) -> int:
        name = require_non_empty(name, "Holiday name")
        require_date_order(start_date, end_date)
        return self._holidays.create(
            company_id=tenant.company_id, name=name, start_date=start_date, end_date=end_date
        )

    def list_between(self, tenant: TenantContext, start: date, end: date) -> Sequence[Holiday]:
        require_date_order(start, end)
        return self._holidays.list_overlapping(tenant.company_id, start, end)

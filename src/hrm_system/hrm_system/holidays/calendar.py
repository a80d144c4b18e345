from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import iter_dates
from ..core.constants import DEFAULT_WORKING_DAYS
from .model import Holiday
from .repository import HolidayRepository


@dataclass(frozen=True)
class WorkCalendar:
    """Working weekdays of a company plus its declared holidays."""

    holidays: HolidayRepository
    working_days: tuple[int, ...] = DEFAULT_WORKING_DAYS

    def is_working_day(self, day: date) -> bool:
        return day.weekday() in self.working_days

    def holiday_on(self, company_id: int, day: date) -> Optional[Holiday]:
        for h in self.holidays.list_overlapping(company_id, day, day):
            if h.covers(day):
                return h
        return None


def count_working_days(start: date, end: date, working_days: Iterable[int]) -> int:
    allowed = set(working_days)
    return sum(1 for d in iter_dates(start, end) if d.weekday() in allowed)

from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def list_overlapping(self, company_id: int, start: date, end: date) -> Sequence[Holiday]:
        raise NotImplementedError

    def create(self, *, company_id: int, name: str, start_date: date, end_date: date) -> int:
        raise NotImplementedError

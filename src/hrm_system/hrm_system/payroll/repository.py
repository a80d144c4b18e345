from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import PayrollEntry, PayrollRun


class PayrollRunRepository(Protocol):
    def create(self, run: PayrollRun) -> int:
        raise NotImplementedError

    def get_by_id(self, company_id: int, run_id: int) -> Optional[PayrollRun]:
        raise NotImplementedError

    def list(self, company_id: int, *, limit: int = 100) -> Sequence[PayrollRun]:
        raise NotImplementedError

    def find_by_period(self, company_id: int, period_start: date, period_end: date) -> Optional[PayrollRun]:
        raise NotImplementedError

    def update(self, run: PayrollRun) -> bool:
        raise NotImplementedError

    def delete(self, company_id: int, run_id: int) -> bool:
        raise NotImplementedError


class PayrollEntryRepository(Protocol):
    def add_many(self, entries: Iterable[PayrollEntry]) -> None:
        raise NotImplementedError

    def list_for_run(self, company_id: int, run_id: int) -> Sequence[PayrollEntry]:
        raise NotImplementedError

    def get_for_employee(self, company_id: int, run_id: int, employee_id: int) -> Optional[PayrollEntry]:
        raise NotImplementedError

    def delete_for_run(self, company_id: int, run_id: int) -> None:
        raise NotImplementedError

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, company_id: int, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, company_id: int, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_employee_between(
        self, company_id: int, employee_id: int, start: date, end: date
    ) -> Sequence[AttendanceRecord]:
        """Records ordered by work_date, both bounds inclusive."""

        raise NotImplementedError

    def search(
        self,
        company_id: int,
        *,
        employee_id: Optional[int] = None,
        status: Optional[AttendanceStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def add(self, record: AttendanceRecord) -> int:
        """Insert a new record; raises ConflictError on a duplicate (employee, date)."""

        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> bool:
        raise NotImplementedError

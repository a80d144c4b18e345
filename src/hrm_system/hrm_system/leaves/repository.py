from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LeaveApplication, LeaveBalance, LeaveType


class LeaveTypeRepository(Protocol):
    def get_by_id(self, company_id: int, leave_type_id: int) -> Optional[LeaveType]:
        raise NotImplementedError

    def list_for_company(self, company_id: int) -> Sequence[LeaveType]:
        raise NotImplementedError


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        company_id: int,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        reason: str,
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, company_id: int, leave_id: int) -> Optional[LeaveApplication]:
        raise NotImplementedError

    def list(
        self,
        company_id: int,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[LeaveApplication]:
        raise NotImplementedError

    def decide(
        self,
        company_id: int,
        leave_id: int,
        *,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        manager_comments: Optional[str] = None,
    ) -> bool:
        """Only pending applications can be decided; returns False otherwise."""

        raise NotImplementedError

    def find_approved_covering(self, company_id: int, employee_id: int, day: date) -> Optional[LeaveApplication]:
        raise NotImplementedError

    def list_approved_overlapping(
        self, company_id: int, employee_id: int, start: date, end: date
    ) -> Sequence[LeaveApplication]:
        raise NotImplementedError


class LeaveBalanceRepository(Protocol):
    def get(self, company_id: int, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_for_employee(
        self, company_id: int, employee_id: int, *, year: Optional[int] = None
    ) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def save(self, balance: LeaveBalance) -> int:
        """Insert when balance_id is 0, otherwise update the allocation columns."""

        raise NotImplementedError

    def add_used(self, company_id: int, balance_id: int, days: float) -> bool:
        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class LeaveType:
    leave_type_id: int
    company_id: int
    name: str
    is_paid: bool = True


@dataclass(frozen=True)
class LeaveApplication:
    leave_id: int
    company_id: int
    employee_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    reason: str
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    manager_comments: Optional[str] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    @property
    def total_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True)
class LeaveBalance:
    """Yearly allowance of one leave type for one employee."""

    balance_id: int
    company_id: int
    employee_id: int
    leave_type_id: int
    year: int
    allocated_days: float
    carried_forward: float = 0.0
    manual_adjustment: float = 0.0
    used_days: float = 0.0

    @property
    def remaining_days(self) -> float:
        return self.allocated_days + self.carried_forward + self.manual_adjustment - self.used_days

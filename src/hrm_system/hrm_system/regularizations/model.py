from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class AttendanceRegularization:
    """An employee's request to correct the clock times of one attendance record.

    original_clock_in/out are captured when the request is filed so reviewers
    see what is being replaced even after the record changes.
    """

    regularization_id: int
    company_id: int
    employee_id: int
    attendance_id: int
    work_date: date
    original_clock_in: Optional[time]
    original_clock_out: Optional[time]
    requested_clock_in: Optional[time]
    requested_clock_out: Optional[time]
    reason: str
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    manager_comments: Optional[str] = None

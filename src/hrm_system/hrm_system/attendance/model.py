from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import AttendanceStatus
from ..leaves.model import LeaveType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one day.

    shift_id/attendance_policy_id are resolved when the record is created and
    only change through a manual edit. The derived fields (worked_hours,
    overtime_hours, is_late, is_early_departure) come from the classifier.
    """

    attendance_id: int
    company_id: int
    employee_id: int
    work_date: date
    clock_in: Optional[time]
    clock_out: Optional[time]
    status: AttendanceStatus
    shift_id: Optional[int] = None
    attendance_policy_id: Optional[int] = None
    break_hours: float = 0.0
    is_weekend: bool = False
    is_holiday: bool = False
    worked_hours: float = 0.0
    overtime_hours: float = 0.0
    is_late: bool = False
    is_early_departure: bool = False
    notes: Optional[str] = None
    created_by: Optional[int] = None


@dataclass(frozen=True)
class AttendanceView:
    """Read-model: a record enriched with leave-type info for display."""

    record: AttendanceRecord
    display_status: AttendanceStatus
    leave_type: Optional[LeaveType] = None

    def to_dict(self) -> dict:
        r = self.record
        return {
            "attendance_id": r.attendance_id,
            "employee_id": r.employee_id,
            "date": r.work_date.strftime("%Y-%m-%d"),
            "clock_in": r.clock_in.strftime("%H:%M") if r.clock_in else None,
            "clock_out": r.clock_out.strftime("%H:%M") if r.clock_out else None,
            "status": self.display_status.value,
            "worked_hours": r.worked_hours,
            "overtime_hours": r.overtime_hours,
            "is_late": r.is_late,
            "is_early_departure": r.is_early_departure,
            "is_weekend": r.is_weekend,
            "is_holiday": r.is_holiday,
            "shift_id": r.shift_id,
            "attendance_policy_id": r.attendance_policy_id,
            "leave_type": (
                {"id": self.leave_type.leave_type_id, "name": self.leave_type.name, "is_paid": self.leave_type.is_paid}
                if self.leave_type
                else None
            ),
            "notes": r.notes,
        }

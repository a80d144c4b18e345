from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Mapping, Sequence

from ...attendance.model import AttendanceRecord
from ...leaves.model import LeaveApplication, LeaveType
from ...salary.model import EmployeeSalary, SalaryComponent
from ..model import PayrollEntry, PayrollSettings


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def aggregate(
        self,
        *,
        salary: EmployeeSalary,
        components: Sequence[SalaryComponent],
        records: Sequence[AttendanceRecord],
        leaves: Sequence[LeaveApplication],
        leave_types: Mapping[int, LeaveType],
        period_start: date,
        period_end: date,
        settings: PayrollSettings,
        run_id: int = 0,
    ) -> PayrollEntry:
        raise NotImplementedError

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.money import ZERO
from ..core.constants import DEFAULT_OVERTIME_MULTIPLIER, DEFAULT_STANDARD_DAILY_HOURS, DEFAULT_WORKING_DAYS
from ..core.enums import PayrollFrequency, PayrollRunStatus
from ..salary.model import BreakdownLine


@dataclass(frozen=True)
class PayrollSettings:
    working_days: tuple[int, ...] = DEFAULT_WORKING_DAYS
    standard_daily_hours: Decimal = Decimal(str(DEFAULT_STANDARD_DAILY_HOURS))
    overtime_multiplier: Decimal = Decimal(DEFAULT_OVERTIME_MULTIPLIER)


@dataclass(frozen=True)
class AttendanceSummary:
    """Day counts of one employee over a pay period.

    present_days includes holiday days; holiday_days is the holiday share of it.
    unpaid_leave_days counts only approved unpaid leave, absences excluded.
    """

    working_days: int = 0
    present_days: int = 0
    half_days: int = 0
    absent_days: int = 0
    holiday_days: int = 0
    paid_leave_days: int = 0
    unpaid_leave_days: int = 0
    overtime_hours: Decimal = ZERO

    @property
    def unpaid_days(self) -> Decimal:
        return Decimal(self.absent_days) + Decimal(self.half_days) * Decimal("0.5") + Decimal(self.unpaid_leave_days)

    def to_dict(self) -> dict:
        return {
            "working_days": self.working_days,
            "present_days": self.present_days,
            "half_days": self.half_days,
            "absent_days": self.absent_days,
            "holiday_days": self.holiday_days,
            "paid_leave_days": self.paid_leave_days,
            "unpaid_leave_days": self.unpaid_leave_days,
            "unpaid_days": str(self.unpaid_days),
            "overtime_hours": str(self.overtime_hours),
        }


@dataclass(frozen=True)
class PayrollRun:
    run_id: int
    company_id: int
    title: str
    frequency: PayrollFrequency
    period_start: date
    period_end: date
    pay_date: date
    status: PayrollRunStatus = PayrollRunStatus.DRAFT
    total_gross_pay: Decimal = ZERO
    total_deductions: Decimal = ZERO
    total_net_pay: Decimal = ZERO
    employee_count: int = 0
    notes: Optional[str] = None
    created_by: Optional[int] = None

    @property
    def is_draft(self) -> bool:
        return self.status == PayrollRunStatus.DRAFT

    def to_dict(self) -> dict:
        return {
            "id": self.run_id,
            "title": self.title,
            "frequency": self.frequency.value,
            "period_start": self.period_start.strftime("%Y-%m-%d"),
            "period_end": self.period_end.strftime("%Y-%m-%d"),
            "pay_date": self.pay_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "total_gross_pay": str(self.total_gross_pay),
            "total_deductions": str(self.total_deductions),
            "total_net_pay": str(self.total_net_pay),
            "employee_count": self.employee_count,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class PayrollEntry:
    """Snapshot of one employee's pay for one run; never recomputed once the run completes."""

    entry_id: int
    run_id: int
    company_id: int
    employee_id: int
    basic_salary: Decimal
    summary: AttendanceSummary
    per_day_salary: Decimal
    overtime_amount: Decimal
    unpaid_leave_deduction: Decimal
    earnings: tuple[BreakdownLine, ...]
    deductions: tuple[BreakdownLine, ...]
    gross_pay: Decimal
    total_deductions: Decimal
    net_pay: Decimal

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "payroll_run_id": self.run_id,
            "employee_id": self.employee_id,
            "basic_salary": str(self.basic_salary),
            "attendance": self.summary.to_dict(),
            "per_day_salary": str(self.per_day_salary),
            "overtime_amount": str(self.overtime_amount),
            "unpaid_leave_deduction": str(self.unpaid_leave_deduction),
            "earnings": [line.to_dict() for line in self.earnings],
            "deductions": [line.to_dict() for line in self.deductions],
            "gross_pay": str(self.gross_pay),
            "total_deductions": str(self.total_deductions),
            "net_pay": str(self.net_pay),
        }

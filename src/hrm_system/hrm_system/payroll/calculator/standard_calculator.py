from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Mapping, Sequence

from ...attendance.model import AttendanceRecord
from ...common.money import ZERO, to_money
from ...core.enums import AttendanceStatus, RequestStatus
from ...holidays.calendar import count_working_days
from ...leaves.model import LeaveApplication, LeaveType
from ...salary.model import BreakdownLine, EmployeeSalary, SalaryComponent, calculate_breakdown
from ..model import AttendanceSummary, PayrollEntry, PayrollSettings
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: basic salary prorated over working weekdays.

    Each absent day and unpaid leave day costs one day's rate, a half day half
    of it. Overtime is paid at (daily rate / standard hours) x multiplier.
    """

    @staticmethod
    def summarize(
        records: Sequence[AttendanceRecord],
        leaves: Sequence[LeaveApplication],
        leave_types: Mapping[int, LeaveType],
        period_start: date,
        period_end: date,
        settings: PayrollSettings,
    ) -> AttendanceSummary:
        in_period = [r for r in records if period_start <= r.work_date <= period_end]

        paid_leave = unpaid_leave = 0
        for leave in leaves:
            if leave.status != RequestStatus.APPROVED:
                continue
            start = max(leave.start_date, period_start)
            end = min(leave.end_date, period_end)
            if end < start:
                continue
            days = count_working_days(start, end, settings.working_days)
            leave_type = leave_types.get(leave.leave_type_id)
            # an unknown leave type is treated as paid
            if leave_type is None or leave_type.is_paid:
                paid_leave += days
            else:
                unpaid_leave += days

        def count(*statuses: AttendanceStatus) -> int:
            return sum(1 for r in in_period if r.status in statuses)

        return AttendanceSummary(
            working_days=count_working_days(period_start, period_end, settings.working_days),
            present_days=count(AttendanceStatus.PRESENT, AttendanceStatus.HOLIDAY),
            half_days=count(AttendanceStatus.HALF_DAY),
            absent_days=count(AttendanceStatus.ABSENT),
            holiday_days=count(AttendanceStatus.HOLIDAY),
            paid_leave_days=paid_leave,
            unpaid_leave_days=unpaid_leave,
            overtime_hours=sum((Decimal(str(r.overtime_hours or 0)) for r in in_period), ZERO),
        )

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
        summary = self.summarize(records, leaves, leave_types, period_start, period_end, settings)
        basic = Decimal(salary.basic_salary)

        # Kept unrounded; only the money lines are rounded.
        per_day = basic / summary.working_days if summary.working_days > 0 else Decimal(0)

        unpaid_deduction = to_money(per_day * summary.unpaid_days)
        hourly = per_day / settings.standard_daily_hours if settings.standard_daily_hours > 0 else Decimal(0)
        overtime_amount = to_money(summary.overtime_hours * hourly * settings.overtime_multiplier)

        breakdown = calculate_breakdown(basic, components)
        earnings = [BreakdownLine(name="Basic Salary", amount=to_money(basic))]
        earnings.extend(breakdown.earnings)
        if overtime_amount > 0:
            earnings.append(BreakdownLine(name="Overtime", amount=overtime_amount))

        deductions = list(breakdown.deductions)
        if unpaid_deduction > 0:
            deductions.append(BreakdownLine(name="Unpaid Leave", amount=unpaid_deduction))

        gross = sum((line.amount for line in earnings), ZERO)
        total_deductions = sum((line.amount for line in deductions), ZERO)

        return PayrollEntry(
            entry_id=0,
            run_id=run_id,
            company_id=salary.company_id,
            employee_id=salary.employee_id,
            basic_salary=to_money(basic),
            summary=summary,
            per_day_salary=to_money(per_day),
            overtime_amount=overtime_amount,
            unpaid_leave_deduction=unpaid_deduction,
            earnings=tuple(earnings),
            deductions=tuple(deductions),
            gross_pay=gross,
            total_deductions=total_deductions,
            net_pay=gross - total_deductions,
        )

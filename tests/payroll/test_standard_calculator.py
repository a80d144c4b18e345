from datetime import date, datetime
from decimal import Decimal

from hrm_system.attendance.model import AttendanceRecord
from hrm_system.core.enums import AttendanceStatus, ComponentType, RequestStatus
from hrm_system.leaves.model import LeaveApplication, LeaveType
from hrm_system.payroll.calculator.standard_calculator import StandardPayrollCalculator
from hrm_system.payroll.model import PayrollSettings
from hrm_system.salary.model import EmployeeSalary, FixedAmount, PercentOfBasic, SalaryComponent

JUNE_START = date(2026, 6, 1)
JUNE_END = date(2026, 6, 30)
SALARY = EmployeeSalary(salary_id=1, company_id=1, employee_id=1, basic_salary=Decimal("3000.00"))
LEAVE_TYPES = {1: LeaveType(1, 1, "Annual Leave", is_paid=True), 2: LeaveType(2, 1, "Unpaid Leave", is_paid=False)}


def _day(day: int, status: AttendanceStatus, overtime: float = 0.0) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=day,
        company_id=1,
        employee_id=1,
        work_date=date(2026, 6, day),
        clock_in=None,
        clock_out=None,
        status=status,
        overtime_hours=overtime,
    )


def _leave(leave_id: int, leave_type_id: int, start: date, end: date) -> LeaveApplication:
    return LeaveApplication(
        leave_id=leave_id,
        company_id=1,
        employee_id=1,
        leave_type_id=leave_type_id,
        start_date=start,
        end_date=end,
        reason="r",
        status=RequestStatus.APPROVED,
        created_at=datetime(2026, 5, 1, 9, 0),
    )


def _aggregate(records=(), leaves=(), components=(), settings=PayrollSettings()):
    return StandardPayrollCalculator().aggregate(
        salary=SALARY,
        components=components,
        records=records,
        leaves=leaves,
        leave_types=LEAVE_TYPES,
        period_start=JUNE_START,
        period_end=JUNE_END,
        settings=settings,
        run_id=5,
    )


def test_absent_and_half_day_are_deducted():
    records = [_day(1, AttendanceStatus.PRESENT), _day(2, AttendanceStatus.ABSENT), _day(3, AttendanceStatus.HALF_DAY)]

    entry = _aggregate(records)

    assert entry.summary.working_days == 22
    assert entry.summary.unpaid_days == Decimal("1.5")
    assert entry.per_day_salary == Decimal("136.36")
    assert entry.unpaid_leave_deduction == Decimal("204.55")
    assert entry.gross_pay == Decimal("3000.00")
    assert entry.net_pay == Decimal("2795.45")
    assert entry.deductions[-1].name == "Unpaid Leave"
    assert entry.run_id == 5


def test_no_records_means_zero_counts():
    entry = _aggregate()

    assert entry.summary.present_days == 0
    assert entry.summary.absent_days == 0
    assert entry.summary.overtime_hours == Decimal("0")
    assert entry.unpaid_leave_deduction == Decimal("0.00")
    assert entry.deductions == ()
    assert entry.net_pay == Decimal("3000.00")


def test_holiday_days_count_as_present():
    entry = _aggregate([_day(1, AttendanceStatus.HOLIDAY), _day(2, AttendanceStatus.PRESENT)])

    assert entry.summary.present_days == 2
    assert entry.summary.holiday_days == 1


def test_leave_days_clipped_to_period_and_split_by_paid():
    leaves = [
        # Thu 28 May .. Wed 3 June: only 1-3 June fall in the period
        _leave(1, 2, date(2026, 5, 28), date(2026, 6, 3)),
        # Mon 29 June .. Fri 3 July
        _leave(2, 1, date(2026, 6, 29), date(2026, 7, 3)),
        # unknown type counts as paid; Sat 6 June is not a working day
        _leave(3, 99, date(2026, 6, 5), date(2026, 6, 6)),
    ]

    entry = _aggregate(leaves=leaves)

    assert entry.summary.unpaid_leave_days == 3
    assert entry.summary.paid_leave_days == 3
    assert entry.unpaid_leave_deduction == Decimal("409.09")


def test_overtime_is_paid_at_multiplier():
    entry = _aggregate([_day(1, AttendanceStatus.PRESENT, overtime=2.0)])

    assert entry.summary.overtime_hours == Decimal("2.0")
    assert entry.overtime_amount == Decimal("51.14")
    assert [line.name for line in entry.earnings] == ["Basic Salary", "Overtime"]
    assert entry.gross_pay == Decimal("3051.14")


def test_components_are_included():
    components = [
        SalaryComponent(1, 1, "Housing", ComponentType.EARNING, PercentOfBasic(Decimal("10"))),
        SalaryComponent(2, 1, "Insurance", ComponentType.DEDUCTION, FixedAmount(Decimal("120"))),
    ]

    entry = _aggregate(components=components)

    assert entry.gross_pay == Decimal("3300.00")
    assert entry.total_deductions == Decimal("120.00")
    assert entry.net_pay == Decimal("3180.00")


def test_period_without_working_days_has_zero_rate():
    entry = StandardPayrollCalculator().aggregate(
        salary=SALARY,
        components=(),
        records=[],
        leaves=[],
        leave_types=LEAVE_TYPES,
        period_start=date(2026, 6, 6),
        period_end=date(2026, 6, 7),
        settings=PayrollSettings(),
    )

    assert entry.summary.working_days == 0
    assert entry.per_day_salary == Decimal("0.00")
    assert entry.net_pay == Decimal("3000.00")

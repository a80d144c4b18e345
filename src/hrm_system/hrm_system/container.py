from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.overlay import LeaveOverlay
from .attendance.resolver import PolicyResolver
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .holidays.calendar import WorkCalendar
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayService
from .leaves.mysql_leave_balance_repository import MySQLLeaveBalanceRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.mysql_leave_type_repository import MySQLLeaveTypeRepository
from .leaves.service import LeaveService
from .payroll.model import PayrollSettings
from .payroll.mysql_payroll_entry_repository import MySQLPayrollEntryRepository
from .payroll.mysql_payroll_run_repository import MySQLPayrollRunRepository
from .payroll.service import PayrollService
from .policies.mysql_policy_repository import MySQLAttendancePolicyRepository
from .policies.service import AttendancePolicyService
from .regularizations.mysql_regularization_repository import MySQLRegularizationRepository
from .regularizations.service import RegularizationService
from .salary.mysql_employee_salary_repository import MySQLEmployeeSalaryRepository
from .salary.mysql_salary_component_repository import MySQLSalaryComponentRepository
from .salary.service import EmployeeSalaryService, SalaryComponentService
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.service import ShiftService


@dataclass(frozen=True)
class Repositories:
    """Every persistence port; MySQL in production, in-memory fakes in tests."""

    employees: Any
    shifts: Any
    policies: Any
    attendance: Any
    leaves: Any
    leave_types: Any
    leave_balances: Any
    holidays: Any
    regularizations: Any
    salary_components: Any
    employee_salaries: Any
    payroll_runs: Any
    payroll_entries: Any


@dataclass(frozen=True)
class Container:
    repos: Repositories

    shift_service: ShiftService
    policy_service: AttendancePolicyService
    holiday_service: HolidayService
    attendance_service: AttendanceService
    leave_service: LeaveService
    regularization_service: RegularizationService
    salary_component_service: SalaryComponentService
    employee_salary_service: EmployeeSalaryService
    payroll_service: PayrollService

    conn: Optional[DatabaseConnection] = None


def wire(repos: Repositories, *, settings: PayrollSettings | None = None, conn: DatabaseConnection | None = None) -> Container:
    settings = settings or PayrollSettings()

    calendar = WorkCalendar(repos.holidays, working_days=settings.working_days)
    resolver = PolicyResolver(repos.shifts, repos.policies)
    overlay = LeaveOverlay(repos.leaves, repos.leave_types)

    attendance_service = AttendanceService(
        repos.attendance,
        repos.employees,
        resolver,
        calendar,
        repos.leaves,
        overlay,
    )
    employee_salary_service = EmployeeSalaryService(repos.employee_salaries, repos.salary_components, repos.employees)

    return Container(
        repos=repos,
        shift_service=ShiftService(repos.shifts),
        policy_service=AttendancePolicyService(repos.policies),
        holiday_service=HolidayService(repos.holidays),
        attendance_service=attendance_service,
        leave_service=LeaveService(
            repos.leaves, repos.leave_types, repos.employees, attendance_service, repos.leave_balances
        ),
        regularization_service=RegularizationService(repos.regularizations, repos.attendance, attendance_service),
        salary_component_service=SalaryComponentService(repos.salary_components),
        employee_salary_service=employee_salary_service,
        payroll_service=PayrollService(
            repos.payroll_runs,
            repos.payroll_entries,
            repos.employees,
            employee_salary_service,
            repos.attendance,
            repos.leaves,
            repos.leave_types,
            settings=settings,
        ),
        conn=conn,
    )


def build_container(*, db_config: dict, settings: PayrollSettings | None = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    repos = Repositories(
        employees=MySQLEmployeeRepository(conn),
        shifts=MySQLShiftRepository(conn),
        policies=MySQLAttendancePolicyRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        leaves=MySQLLeaveRepository(conn),
        leave_types=MySQLLeaveTypeRepository(conn),
        leave_balances=MySQLLeaveBalanceRepository(conn),
        holidays=MySQLHolidayRepository(conn),
        regularizations=MySQLRegularizationRepository(conn),
        salary_components=MySQLSalaryComponentRepository(conn),
        employee_salaries=MySQLEmployeeSalaryRepository(conn),
        payroll_runs=MySQLPayrollRunRepository(conn),
        payroll_entries=MySQLPayrollEntryRepository(conn),
    )
    return wire(repos, settings=settings, conn=conn)

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

import pytest

from hrm_system.attendance.model import AttendanceRecord
from hrm_system.container import Repositories, wire
from hrm_system.core.enums import RequestStatus
from hrm_system.core.exceptions import ConflictError
from hrm_system.core.tenant import TenantContext
from hrm_system.employees.model import Employee
from hrm_system.holidays.model import Holiday
from hrm_system.leaves.model import LeaveApplication, LeaveBalance, LeaveType
from hrm_system.main import create_app
from hrm_system.payroll.model import PayrollEntry, PayrollRun
from hrm_system.policies.model import AttendancePolicy
from hrm_system.regularizations.model import AttendanceRegularization
from hrm_system.salary.model import EmployeeSalary, SalaryComponent
from hrm_system.shifts.model import Shift

COMPANY_ID = 1


class InMemoryEmployees:
    def __init__(self, employees=()):
        self.by_id: dict[int, Employee] = {e.employee_id: e for e in employees}

    def get_by_id(self, company_id: int, employee_id: int) -> Optional[Employee]:
        e = self.by_id.get(employee_id)
        return e if e and e.company_id == company_id else None

    def list_active(self, company_id: int):
        return [e for _, e in sorted(self.by_id.items()) if e.company_id == company_id and e.is_active]


class InMemoryShifts:
    def __init__(self, shifts=()):
        self.by_id: dict[int, Shift] = {s.shift_id: s for s in shifts}

    def list_for_company(self, company_id: int):
        return [s for _, s in sorted(self.by_id.items()) if s.company_id == company_id]

    def get_by_id(self, company_id: int, shift_id: int) -> Optional[Shift]:
        s = self.by_id.get(shift_id)
        return s if s and s.company_id == company_id else None

    def get_by_name(self, company_id: int, shift_name: str) -> Optional[Shift]:
        return next((s for s in self.list_for_company(company_id) if s.shift_name == shift_name), None)

    def save(self, shift: Shift) -> int:
        shift_id = shift.shift_id or max(self.by_id, default=0) + 1
        self.by_id[shift_id] = replace(shift, shift_id=shift_id)
        return shift_id


class InMemoryPolicies:
    def __init__(self, policies=()):
        self.by_id: dict[int, AttendancePolicy] = {p.policy_id: p for p in policies}

    def list_for_company(self, company_id: int):
        return [p for _, p in sorted(self.by_id.items()) if p.company_id == company_id]

    def get_by_id(self, company_id: int, policy_id: int) -> Optional[AttendancePolicy]:
        p = self.by_id.get(policy_id)
        return p if p and p.company_id == company_id else None

    def get_by_name(self, company_id: int, policy_name: str) -> Optional[AttendancePolicy]:
        return next((p for p in self.list_for_company(company_id) if p.policy_name == policy_name), None)

    def save(self, policy: AttendancePolicy) -> int:
        policy_id = policy.policy_id or max(self.by_id, default=0) + 1
        self.by_id[policy_id] = replace(policy, policy_id=policy_id)
        return policy_id


class InMemoryAttendance:
    def __init__(self):
        self.by_id: dict[int, AttendanceRecord] = {}
        self._next_id = 1

    def get_by_id(self, company_id: int, attendance_id: int) -> Optional[AttendanceRecord]:
        r = self.by_id.get(attendance_id)
        return r if r and r.company_id == company_id else None

    def get_for_employee_and_date(self, company_id: int, employee_id: int, work_date: date):
        for r in self.by_id.values():
            if (r.company_id, r.employee_id, r.work_date) == (company_id, employee_id, work_date):
                return r
        return None

    def list_for_employee_between(self, company_id: int, employee_id: int, start: date, end: date):
        rows = [
            r
            for r in self.by_id.values()
            if r.company_id == company_id and r.employee_id == employee_id and start <= r.work_date <= end
        ]
        return sorted(rows, key=lambda r: r.work_date)

    def search(self, company_id, *, employee_id=None, status=None, date_from=None, date_to=None, limit=50, offset=0):
        rows = [
            r
            for r in self.by_id.values()
            if r.company_id == company_id
            and (employee_id is None or r.employee_id == employee_id)
            and (status is None or r.status == status)
            and (date_from is None or r.work_date >= date_from)
            and (date_to is None or r.work_date <= date_to)
        ]
        rows.sort(key=lambda r: (r.work_date, r.attendance_id), reverse=True)
        return rows[offset : offset + limit]

    def add(self, record: AttendanceRecord) -> int:
        if self.get_for_employee_and_date(record.company_id, record.employee_id, record.work_date):
            raise ConflictError("Record already exists")
        attendance_id = self._next_id
        self._next_id += 1
        self.by_id[attendance_id] = replace(record, attendance_id=attendance_id)
        return attendance_id

    def update(self, record: AttendanceRecord) -> bool:
        if record.attendance_id not in self.by_id:
            return False
        self.by_id[record.attendance_id] = record
        return True


class InMemoryLeaveTypes:
    def __init__(self, leave_types=()):
        self.by_id: dict[int, LeaveType] = {t.leave_type_id: t for t in leave_types}

    def get_by_id(self, company_id: int, leave_type_id: int) -> Optional[LeaveType]:
        t = self.by_id.get(leave_type_id)
        return t if t and t.company_id == company_id else None

    def list_for_company(self, company_id: int):
        return [t for t in self.by_id.values() if t.company_id == company_id]


class InMemoryLeaves:
    def __init__(self):
        self.by_id: dict[int, LeaveApplication] = {}

    def create(self, *, company_id, employee_id, leave_type_id, start_date, end_date, reason, created_at) -> int:
        leave_id = len(self.by_id) + 1
        self.by_id[leave_id] = LeaveApplication(
            leave_id=leave_id,
            company_id=company_id,
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=created_at,
        )
        return leave_id

    def get_by_id(self, company_id: int, leave_id: int):
        a = self.by_id.get(leave_id)
        return a if a and a.company_id == company_id else None

    def list(self, company_id, *, status=None, employee_id=None, limit=200):
        return [
            a
            for a in self.by_id.values()
            if a.company_id == company_id
            and (status is None or a.status == status)
            and (employee_id is None or a.employee_id == employee_id)
        ][:limit]

    def decide(self, company_id, leave_id, *, status, decided_by, decided_at, manager_comments=None) -> bool:
        a = self.get_by_id(company_id, leave_id)
        if not a or a.status != RequestStatus.PENDING:
            return False
        self.by_id[leave_id] = replace(
            a, status=status, decided_by=decided_by, decided_at=decided_at, manager_comments=manager_comments
        )
        return True

    def find_approved_covering(self, company_id, employee_id, day):
        return next(iter(self.list_approved_overlapping(company_id, employee_id, day, day)), None)

    def list_approved_overlapping(self, company_id, employee_id, start, end):
        return [
            a
            for a in self.by_id.values()
            if a.company_id == company_id
            and a.employee_id == employee_id
            and a.status == RequestStatus.APPROVED
            and a.start_date <= end
            and a.end_date >= start
        ]

    def put_approved(self, *, employee_id: int, leave_type_id: int, start_date: date, end_date: date) -> int:
        leave_id = self.create(
            company_id=COMPANY_ID,
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            start_date=start_date,
            end_date=end_date,
            reason="seeded",
            created_at=datetime(2026, 5, 1, 9, 0),
        )
        self.by_id[leave_id] = replace(self.by_id[leave_id], status=RequestStatus.APPROVED)
        return leave_id


class InMemoryLeaveBalances:
    def __init__(self):
        self.by_id: dict[int, LeaveBalance] = {}

    def get(self, company_id, employee_id, leave_type_id, year):
        return next(
            (
                b
                for b in self.by_id.values()
                if (b.company_id, b.employee_id, b.leave_type_id, b.year)
                == (company_id, employee_id, leave_type_id, year)
            ),
            None,
        )

    def list_for_employee(self, company_id, employee_id, *, year=None):
        return [
            b
            for b in self.by_id.values()
            if b.company_id == company_id and b.employee_id == employee_id and (year is None or b.year == year)
        ]

    def save(self, balance: LeaveBalance) -> int:
        if not balance.balance_id:
            if self.get(balance.company_id, balance.employee_id, balance.leave_type_id, balance.year):
                raise ConflictError("duplicate balance")
            balance = replace(balance, balance_id=len(self.by_id) + 1)
        self.by_id[balance.balance_id] = balance
        return balance.balance_id

    def add_used(self, company_id, balance_id, days) -> bool:
        b = self.by_id.get(balance_id)
        if not b or b.company_id != company_id:
            return False
        self.by_id[balance_id] = replace(b, used_days=b.used_days + days)
        return True


class InMemoryHolidays:
    def __init__(self):
        self.by_id: dict[int, Holiday] = {}

    def list_overlapping(self, company_id, start, end):
        return [
            h
            for h in self.by_id.values()
            if h.company_id == company_id and h.start_date <= end and h.end_date >= start
        ]

    def create(self, *, company_id, name, start_date, end_date) -> int:
        holiday_id = len(self.by_id) + 1
        self.by_id[holiday_id] = Holiday(holiday_id, company_id, name, start_date, end_date)
        return holiday_id


class InMemoryRegularizations:
    def __init__(self):
        self.by_id: dict[int, AttendanceRegularization] = {}

    def create(self, regularization: AttendanceRegularization) -> int:
        rid = len(self.by_id) + 1
        self.by_id[rid] = replace(regularization, regularization_id=rid)
        return rid

    def get_by_id(self, company_id, regularization_id):
        g = self.by_id.get(regularization_id)
        return g if g and g.company_id == company_id else None

    def get_for_attendance(self, company_id, attendance_id):
        return next(
            (g for g in self.by_id.values() if g.company_id == company_id and g.attendance_id == attendance_id),
            None,
        )

    def list(self, company_id, *, status=None, employee_id=None, limit=200):
        return [
            g
            for g in self.by_id.values()
            if g.company_id == company_id
            and (status is None or g.status == status)
            and (employee_id is None or g.employee_id == employee_id)
        ][:limit]

    def update_request(self, regularization) -> bool:
        current = self.by_id.get(regularization.regularization_id)
        if not current or current.status != RequestStatus.PENDING:
            return False
        self.by_id[regularization.regularization_id] = regularization
        return True

    def delete(self, company_id, regularization_id) -> bool:
        g = self.get_by_id(company_id, regularization_id)
        if not g or g.status != RequestStatus.PENDING:
            return False
        del self.by_id[regularization_id]
        return True

    def decide(self, company_id, regularization_id, *, status, decided_by, decided_at, manager_comments=None):
        g = self.get_by_id(company_id, regularization_id)
        if not g or g.status != RequestStatus.PENDING:
            return False
        self.by_id[regularization_id] = replace(
            g, status=status, decided_by=decided_by, decided_at=decided_at, manager_comments=manager_comments
        )
        return True


class InMemorySalaryComponents:
    def __init__(self, components=()):
        self.by_id: dict[int, SalaryComponent] = {c.component_id: c for c in components}

    def list_for_company(self, company_id):
        return [c for _, c in sorted(self.by_id.items()) if c.company_id == company_id]

    def get_by_id(self, company_id, component_id):
        c = self.by_id.get(component_id)
        return c if c and c.company_id == company_id else None

    def get_by_name(self, company_id, name):
        return next((c for c in self.list_for_company(company_id) if c.name == name), None)

    def get_many(self, company_id, component_ids):
        wanted = {int(i) for i in component_ids}
        return [c for c in self.list_for_company(company_id) if c.component_id in wanted]

    def save(self, component: SalaryComponent) -> int:
        component_id = component.component_id or max(self.by_id, default=0) + 1
        self.by_id[component_id] = replace(component, component_id=component_id)
        return component_id


class InMemoryEmployeeSalaries:
    def __init__(self):
        self.by_id: dict[int, EmployeeSalary] = {}

    def get_by_id(self, company_id, salary_id):
        s = self.by_id.get(salary_id)
        return s if s and s.company_id == company_id else None

    def get_active(self, company_id, employee_id):
        active = [
            s
            for s in self.by_id.values()
            if s.company_id == company_id and s.employee_id == employee_id and s.is_active
        ]
        return max(active, key=lambda s: s.salary_id) if active else None

    def list(self, company_id, *, employee_id=None):
        return [
            s
            for s in self.by_id.values()
            if s.company_id == company_id and (employee_id is None or s.employee_id == employee_id)
        ]

    def save(self, salary: EmployeeSalary) -> int:
        salary_id = salary.salary_id or max(self.by_id, default=0) + 1
        self.by_id[salary_id] = replace(salary, salary_id=salary_id)
        return salary_id

    def deactivate_others(self, company_id, employee_id, keep_salary_id):
        for sid, s in list(self.by_id.items()):
            if s.company_id == company_id and s.employee_id == employee_id and sid != keep_salary_id:
                self.by_id[sid] = replace(s, is_active=False)


class InMemoryPayrollRuns:
    def __init__(self):
        self.by_id: dict[int, PayrollRun] = {}

    def create(self, run: PayrollRun) -> int:
        run_id = len(self.by_id) + 1
        self.by_id[run_id] = replace(run, run_id=run_id)
        return run_id

    def get_by_id(self, company_id, run_id):
        r = self.by_id.get(run_id)
        return r if r and r.company_id == company_id else None

    def list(self, company_id, *, limit=100):
        return [r for r in self.by_id.values() if r.company_id == company_id][:limit]

    def find_by_period(self, company_id, period_start, period_end):
        return next(
            (
                r
                for r in self.by_id.values()
                if r.company_id == company_id and (r.period_start, r.period_end) == (period_start, period_end)
            ),
            None,
        )

    def update(self, run: PayrollRun) -> bool:
        if run.run_id not in self.by_id:
            return False
        self.by_id[run.run_id] = run
        return True

    def delete(self, company_id, run_id) -> bool:
        return self.by_id.pop(run_id, None) is not None


class InMemoryPayrollEntries:
    def __init__(self):
        self.rows: list[PayrollEntry] = []
        self.fail_on_add = False

    def add_many(self, entries):
        if self.fail_on_add:
            raise RuntimeError("disk full")
        for e in entries:
            self.rows.append(replace(e, entry_id=len(self.rows) + 1))

    def list_for_run(self, company_id, run_id):
        return [e for e in self.rows if e.company_id == company_id and e.run_id == run_id]

    def get_for_employee(self, company_id, run_id, employee_id):
        return next((e for e in self.list_for_run(company_id, run_id) if e.employee_id == employee_id), None)

    def delete_for_run(self, company_id, run_id):
        self.rows = [e for e in self.rows if not (e.company_id == company_id and e.run_id == run_id)]


@pytest.fixture
def general_shift() -> Shift:
    return Shift(
        shift_id=1,
        company_id=COMPANY_ID,
        shift_name="General",
        start_time=time(9, 0),
        end_time=time(18, 0),
        break_minutes=60,
        break_start_time=time(13, 0),
        break_end_time=time(14, 0),
    )


@pytest.fixture
def night_shift() -> Shift:
    return Shift(
        shift_id=2,
        company_id=COMPANY_ID,
        shift_name="Night",
        start_time=time(22, 0),
        end_time=time(6, 0),
        break_minutes=30,
        is_night_shift=True,
    )


@pytest.fixture
def standard_policy() -> AttendancePolicy:
    return AttendancePolicy(policy_id=1, company_id=COMPANY_ID, policy_name="Standard")


@pytest.fixture
def repos(general_shift, night_shift, standard_policy) -> Repositories:
    return Repositories(
        employees=InMemoryEmployees(
            [
                Employee(1, COMPANY_ID, "Alex Morgan", base_salary=Decimal("3000")),
                Employee(2, COMPANY_ID, "Sam Rivera", shift_id=2, attendance_policy_id=1, base_salary=Decimal("3600")),
                Employee(3, 2, "Other Company", base_salary=Decimal("1000")),
            ]
        ),
        shifts=InMemoryShifts([general_shift, night_shift]),
        policies=InMemoryPolicies([standard_policy]),
        attendance=InMemoryAttendance(),
        leaves=InMemoryLeaves(),
        leave_types=InMemoryLeaveTypes(
            [
                LeaveType(1, COMPANY_ID, "Annual Leave", is_paid=True),
                LeaveType(2, COMPANY_ID, "Unpaid Leave", is_paid=False),
            ]
        ),
        leave_balances=InMemoryLeaveBalances(),
        holidays=InMemoryHolidays(),
        regularizations=InMemoryRegularizations(),
        salary_components=InMemorySalaryComponents(),
        employee_salaries=InMemoryEmployeeSalaries(),
        payroll_runs=InMemoryPayrollRuns(),
        payroll_entries=InMemoryPayrollEntries(),
    )


@pytest.fixture
def container(repos):
    return wire(repos)


@pytest.fixture
def tenant() -> TenantContext:
    return TenantContext(company_id=COMPANY_ID, user_id=99)


@pytest.fixture
def client(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container)
    return app.test_client()


@pytest.fixture
def headers() -> dict:
    return {"X-Company-Id": str(COMPANY_ID), "X-User-Id": "99"}

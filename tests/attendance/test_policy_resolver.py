from dataclasses import replace
from datetime import date, time

import pytest

from hrm_system.attendance.model import AttendanceRecord
from hrm_system.attendance.resolver import PolicyResolver
from hrm_system.core.enums import AttendanceStatus, RecordStatus
from hrm_system.core.exceptions import NoActivePolicyError, NoActiveShiftError
from hrm_system.employees.model import Employee
from hrm_system.policies.model import AttendancePolicy
from hrm_system.shifts.model import Shift


def _resolver(repos) -> PolicyResolver:
    return PolicyResolver(repos.shifts, repos.policies)


def test_default_shift_is_lowest_active_id(repos, tenant):
    repos.shifts.save(Shift(0, 1, "Late", time(12, 0), time(21, 0)))
    employee = Employee(1, 1, "Alex Morgan")

    rules = _resolver(repos).resolve(tenant, employee)

    assert rules.shift.shift_id == 1
    assert rules.policy.policy_id == 1


def test_default_skips_inactive_shift(repos, tenant):
    repos.shifts.by_id[1] = replace(repos.shifts.by_id[1], status=RecordStatus.INACTIVE)

    shift = _resolver(repos).resolve_shift(tenant, Employee(1, 1, "Alex Morgan"))

    assert shift.shift_id == 2


def test_assigned_shift_is_used_even_when_inactive(repos, tenant):
    repos.shifts.by_id[2] = replace(repos.shifts.by_id[2], status=RecordStatus.INACTIVE)

    shift = _resolver(repos).resolve_shift(tenant, Employee(2, 1, "Sam Rivera", shift_id=2))

    assert shift.shift_id == 2


def test_no_active_shift_raises(repos, tenant):
    for shift_id, shift in list(repos.shifts.by_id.items()):
        repos.shifts.by_id[shift_id] = replace(shift, status=RecordStatus.INACTIVE)

    with pytest.raises(NoActiveShiftError) as exc:
        _resolver(repos).resolve(tenant, Employee(1, 1, "Alex Morgan"))
    assert "contact HR" in str(exc.value)


def test_no_active_policy_raises(repos, tenant):
    repos.policies.by_id.clear()

    with pytest.raises(NoActivePolicyError):
        _resolver(repos).resolve(tenant, Employee(1, 1, "Alex Morgan"))


def test_policy_resolved_independently_of_shift(repos, tenant):
    repos.policies.save(AttendancePolicy(0, 1, "Relaxed", late_grace_minutes=15))
    employee = Employee(1, 1, "Alex Morgan", shift_id=2, attendance_policy_id=2)

    rules = _resolver(repos).resolve(tenant, employee)

    assert rules.shift.shift_id == 2
    assert rules.policy.policy_name == "Relaxed"


def test_rules_for_record_prefer_stored_ids(repos, tenant):
    record = AttendanceRecord(
        attendance_id=1,
        company_id=1,
        employee_id=1,
        work_date=date(2026, 6, 2),
        clock_in=time(22, 0),
        clock_out=None,
        status=AttendanceStatus.PRESENT,
        shift_id=2,
        attendance_policy_id=1,
    )

    rules = _resolver(repos).rules_for_record(tenant, record, Employee(1, 1, "Alex Morgan"))

    assert rules.shift.shift_name == "Night"

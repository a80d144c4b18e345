from datetime import date, datetime, time

import pytest

from hrm_system.attendance.service import ManualAttendanceInput
from hrm_system.core.enums import AttendanceStatus, RequestStatus
from hrm_system.core.exceptions import (
    EmployeeNotFoundError,
    InsufficientLeaveBalanceError,
    LeaveConflictError,
    NotFoundError,
    ValidationError,
)

NOW = datetime(2026, 5, 20, 10, 0, 0)


def _apply(container, tenant, start=date(2026, 6, 4), end=date(2026, 6, 9), **kwargs):
    values = dict(employee_id=1, leave_type_id=1, start_date=start, end_date=end, reason="Family trip", now=NOW)
    values.update(kwargs)
    return container.leave_service.apply(tenant, **values)


def test_apply_creates_pending_application(container, tenant):
    application = _apply(container, tenant)

    assert application.status == RequestStatus.PENDING
    assert application.reason == "Family trip"
    assert application.created_at == NOW


def test_apply_validates_input(container, tenant):
    with pytest.raises(ValidationError):
        _apply(container, tenant, start=date(2026, 6, 9), end=date(2026, 6, 4))
    with pytest.raises(ValidationError):
        _apply(container, tenant, reason="   ")
    with pytest.raises(NotFoundError):
        _apply(container, tenant, leave_type_id=99)


def test_apply_over_approved_leave_conflicts(container, repos, tenant):
    repos.leaves.put_approved(employee_id=1, leave_type_id=1, start_date=date(2026, 6, 8), end_date=date(2026, 6, 8))

    with pytest.raises(LeaveConflictError):
        _apply(container, tenant)


def test_approve_creates_on_leave_rows_for_working_days(container, repos, tenant):
    # an existing record is left untouched
    container.attendance_service.create_manual(
        tenant,
        ManualAttendanceInput(employee_id=1, work_date=date(2026, 6, 4), clock_in=time(9, 0), clock_out=time(18, 0)),
    )
    application = _apply(container, tenant)

    approved = container.leave_service.approve(tenant, application.leave_id, comments=" ok ")

    assert approved.status == RequestStatus.APPROVED
    assert approved.decided_by == tenant.user_id
    assert approved.manager_comments == "ok"
    rows = repos.attendance.list_for_employee_between(1, 1, date(2026, 6, 4), date(2026, 6, 9))
    # Thu (existing), Fri, Mon, Tue; the weekend gets nothing
    assert [r.work_date.day for r in rows] == [4, 5, 8, 9]
    assert [r.status for r in rows] == [
        AttendanceStatus.PRESENT,
        AttendanceStatus.ON_LEAVE,
        AttendanceStatus.ON_LEAVE,
        AttendanceStatus.ON_LEAVE,
    ]


def test_reject_creates_no_rows(container, repos, tenant):
    application = _apply(container, tenant)

    rejected = container.leave_service.reject(tenant, application.leave_id)

    assert rejected.status == RequestStatus.REJECTED
    assert repos.attendance.by_id == {}


def test_decided_application_cannot_be_decided_again(container, tenant):
    application = _apply(container, tenant)
    container.leave_service.approve(tenant, application.leave_id)

    with pytest.raises(ValidationError):
        container.leave_service.reject(tenant, application.leave_id)


def test_unknown_application(container, tenant):
    with pytest.raises(NotFoundError):
        container.leave_service.approve(tenant, 404)


def test_approve_turns_rollover_absence_into_leave(container, repos, tenant):
    container.attendance_service.mark_absentees(tenant, date(2026, 6, 4))
    application = _apply(container, tenant, end=date(2026, 6, 5), leave_type_id=2)

    container.leave_service.approve(tenant, application.leave_id)

    rows = repos.attendance.list_for_employee_between(1, 1, date(2026, 6, 4), date(2026, 6, 5))
    assert [r.status for r in rows] == [AttendanceStatus.ON_LEAVE, AttendanceStatus.ON_LEAVE]
    assert len(repos.attendance.by_id) == 3  # employee 2 keeps its absence
    view = container.attendance_service.get_today_record(tenant, 1, today=date(2026, 6, 4))
    assert view.leave_type.name == "Unpaid Leave"


def test_approve_rejects_overlap_with_leave_approved_meanwhile(container, repos, tenant):
    first = _apply(container, tenant, end=date(2026, 6, 4))
    second = _apply(container, tenant, end=date(2026, 6, 4), reason="Same day")
    container.leave_service.approve(tenant, first.leave_id)

    with pytest.raises(LeaveConflictError):
        container.leave_service.approve(tenant, second.leave_id)

    assert container.leave_service.get(tenant, second.leave_id).status == RequestStatus.PENDING


def test_set_balance_keeps_used_days(container, tenant):
    service = container.leave_service
    service.set_balance(tenant, employee_id=1, leave_type_id=1, year=2026, allocated_days=10)
    application = _apply(container, tenant, end=date(2026, 6, 5))
    service.approve(tenant, application.leave_id)

    balance = service.set_balance(
        tenant, employee_id=1, leave_type_id=1, year=2026, allocated_days=12, carried_forward=1.5
    )

    assert balance.used_days == 2
    assert balance.remaining_days == 11.5
    assert service.list_balances(tenant, 1, year=2026) == [balance]
    assert service.list_balances(tenant, 1, year=2025) == []


def test_set_balance_validation(container, tenant):
    service = container.leave_service
    with pytest.raises(EmployeeNotFoundError):
        service.set_balance(tenant, employee_id=3, leave_type_id=1, year=2026, allocated_days=10)
    with pytest.raises(NotFoundError):
        service.set_balance(tenant, employee_id=1, leave_type_id=9, year=2026, allocated_days=10)
    with pytest.raises(ValidationError):
        service.set_balance(tenant, employee_id=1, leave_type_id=1, year=2026, allocated_days=-1)


def test_approve_requires_enough_balance(container, repos, tenant):
    application = _apply(container, tenant)  # six calendar days
    container.leave_service.set_balance(tenant, employee_id=1, leave_type_id=1, year=2026, allocated_days=5)

    with pytest.raises(InsufficientLeaveBalanceError):
        container.leave_service.approve(tenant, application.leave_id)

    assert container.leave_service.get(tenant, application.leave_id).status == RequestStatus.PENDING
    assert repos.attendance.by_id == {}


def test_apply_beyond_balance_is_rejected(container, tenant):
    container.leave_service.set_balance(tenant, employee_id=1, leave_type_id=1, year=2026, allocated_days=3)

    with pytest.raises(InsufficientLeaveBalanceError):
        _apply(container, tenant)
    # other leave types are not capped
    assert _apply(container, tenant, leave_type_id=2).status == RequestStatus.PENDING

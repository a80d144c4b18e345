from dataclasses import replace
from datetime import date, time
from decimal import Decimal

import pytest

from hrm_system.attendance.service import ManualAttendanceInput
from hrm_system.core.enums import AttendanceStatus, PayrollFrequency, PayrollRunStatus
from hrm_system.core.exceptions import (
    ConflictError,
    LeaveConflictError,
    NotFoundError,
    PayrollRunStateError,
    ValidationError,
)
from hrm_system.payroll.service import PayrollRunInput

JUNE = PayrollRunInput(
    title="June 2026",
    frequency=PayrollFrequency.MONTHLY,
    period_start=date(2026, 6, 1),
    period_end=date(2026, 6, 30),
    pay_date=date(2026, 7, 1),
)


def test_create_run_starts_as_draft(container, tenant):
    run = container.payroll_service.create_run(tenant, JUNE)

    assert run.status == PayrollRunStatus.DRAFT
    assert run.created_by == tenant.user_id
    assert container.payroll_service.get_run(tenant, run.run_id) == run


@pytest.mark.parametrize(
    "changes",
    [
        {"title": " "},
        {"period_end": date(2026, 6, 1)},
        {"pay_date": date(2026, 6, 29)},
    ],
)
def test_create_run_validation(container, tenant, changes):
    with pytest.raises(ValidationError):
        container.payroll_service.create_run(tenant, replace(JUNE, **changes))


def test_duplicate_period_is_rejected(container, tenant):
    container.payroll_service.create_run(tenant, JUNE)

    with pytest.raises(ConflictError):
        container.payroll_service.create_run(tenant, replace(JUNE, title="June again"))


def test_process_run_snapshots_every_active_employee(container, repos, tenant):
    container.attendance_service.create_manual(
        tenant, ManualAttendanceInput(employee_id=1, work_date=date(2026, 6, 2))
    )
    run = container.payroll_service.create_run(tenant, JUNE)

    completed = container.payroll_service.process_run(tenant, run.run_id)

    assert completed.status == PayrollRunStatus.COMPLETED
    assert completed.employee_count == 2
    entry = container.payroll_service.get_entry(tenant, run.run_id, 1)
    assert entry.summary.absent_days == 1
    assert entry.net_pay == Decimal("2863.64")
    assert completed.total_net_pay == entry.net_pay + Decimal("3600.00")
    # a placeholder salary was created for each employee
    assert len(repos.employee_salaries.by_id) == 2


def test_completed_run_is_frozen(container, tenant):
    service = container.payroll_service
    run = service.create_run(tenant, JUNE)
    service.process_run(tenant, run.run_id)

    with pytest.raises(PayrollRunStateError):
        service.process_run(tenant, run.run_id)
    with pytest.raises(PayrollRunStateError):
        service.update_run(tenant, run.run_id, replace(JUNE, title="Changed"))
    with pytest.raises(PayrollRunStateError):
        service.delete_run(tenant, run.run_id)


def test_entries_are_not_recomputed_after_completion(container, tenant):
    service = container.payroll_service
    run = service.create_run(tenant, JUNE)
    service.process_run(tenant, run.run_id)
    before = service.get_entry(tenant, run.run_id, 1)

    container.employee_salary_service.assign(tenant, 1, basic_salary="9000")

    assert service.get_entry(tenant, run.run_id, 1) == before


def test_failed_processing_rolls_back(container, repos, tenant):
    service = container.payroll_service
    run = service.create_run(tenant, JUNE)
    repos.payroll_entries.fail_on_add = True

    with pytest.raises(RuntimeError):
        service.process_run(tenant, run.run_id)

    assert service.get_run(tenant, run.run_id).status == PayrollRunStatus.DRAFT
    assert service.list_entries(tenant, run.run_id) == []


def test_draft_can_be_updated_and_deleted(container, tenant):
    service = container.payroll_service
    run = service.create_run(tenant, JUNE)

    updated = service.update_run(tenant, run.run_id, replace(JUNE, title="June payroll", notes=" bonus month "))
    assert updated.title == "June payroll"
    assert updated.notes == "bonus month"

    service.delete_run(tenant, run.run_id)
    with pytest.raises(NotFoundError):
        service.get_run(tenant, run.run_id)


def test_missing_entry(container, tenant):
    run = container.payroll_service.create_run(tenant, JUNE)

    with pytest.raises(NotFoundError):
        container.payroll_service.get_entry(tenant, run.run_id, 1)


def _approved_unpaid_leave(container, tenant, day):
    service = container.leave_service
    application = service.apply(
        tenant, employee_id=1, leave_type_id=2, start_date=day, end_date=day, reason="Appointment"
    )
    return service.approve(tenant, application.leave_id)


def test_leave_approved_after_rollover_is_deducted_once(container, repos, tenant):
    container.attendance_service.mark_absentees(tenant, date(2026, 6, 2))
    _approved_unpaid_leave(container, tenant, date(2026, 6, 2))
    assert repos.attendance.get_for_employee_and_date(1, 1, date(2026, 6, 2)).status == AttendanceStatus.ON_LEAVE

    run = container.payroll_service.create_run(tenant, JUNE)
    container.payroll_service.process_run(tenant, run.run_id)

    summary = container.payroll_service.get_entry(tenant, run.run_id, 1).summary
    assert summary.absent_days == 0
    assert summary.unpaid_leave_days == 1
    assert container.payroll_service.get_entry(tenant, run.run_id, 1).net_pay == Decimal("2863.64")


def test_duplicate_pending_leave_cannot_double_the_deduction(container, tenant):
    day = date(2026, 6, 3)
    duplicate = container.leave_service.apply(
        tenant, employee_id=1, leave_type_id=2, start_date=day, end_date=day, reason="Filed twice"
    )
    _approved_unpaid_leave(container, tenant, day)

    with pytest.raises(LeaveConflictError):
        container.leave_service.approve(tenant, duplicate.leave_id)

    run = container.payroll_service.create_run(tenant, JUNE)
    container.payroll_service.process_run(tenant, run.run_id)
    entry = container.payroll_service.get_entry(tenant, run.run_id, 1)
    assert entry.summary.unpaid_leave_days == 1
    assert entry.net_pay == Decimal("2863.64")

from datetime import date, time

import pytest

from hrm_system.core.enums import RecordStatus
from hrm_system.core.exceptions import ConflictError, NotFoundError, ValidationError
from hrm_system.core.tenant import TenantContext
from hrm_system.policies.service import PolicyInput
from hrm_system.shifts.service import ShiftInput


def test_create_shift(container, tenant):
    shift = container.shift_service.create(
        tenant, ShiftInput(shift_name=" Early ", start_time=time(6, 0), end_time=time(14, 0), break_minutes=30)
    )

    assert shift.shift_name == "Early"
    assert shift.working_hours == 7.5
    assert shift.status == RecordStatus.ACTIVE


def test_shift_rename_to_existing_name_conflicts(container, tenant):
    with pytest.raises(ConflictError):
        container.shift_service.update(
            tenant, 2, ShiftInput(shift_name="General", start_time=time(22, 0), end_time=time(6, 0))
        )


def test_shift_is_deactivated_not_deleted(container, repos, tenant):
    toggled = container.shift_service.toggle_status(tenant, 1)

    assert toggled.status == RecordStatus.INACTIVE
    assert repos.shifts.get_by_id(1, 1).status == RecordStatus.INACTIVE


def test_shift_of_other_company_is_not_found(container):
    with pytest.raises(NotFoundError):
        container.shift_service.get(TenantContext(company_id=2, user_id=1), 1)


def test_policy_thresholds_are_validated(container, tenant):
    service = container.policy_service
    with pytest.raises(ValidationError):
        service.create(tenant, PolicyInput("Odd", 5, 0, half_day_threshold_hours=9, overtime_threshold_hours=8))
    with pytest.raises(ValidationError):
        service.create(tenant, PolicyInput("Negative", -1, 0, 4, 8))
    with pytest.raises(ConflictError):
        service.create(tenant, PolicyInput("Standard", 5, 0, 4, 8))


def test_policy_update_and_toggle(container, tenant):
    service = container.policy_service

    updated = service.update(tenant, 1, PolicyInput("Standard", 10, 15, 4.5, 9))
    assert updated.late_grace_minutes == 10
    assert updated.early_departure_grace_minutes == 15

    assert service.toggle_status(tenant, 1).status == RecordStatus.INACTIVE


def test_holiday_range(container, tenant):
    service = container.holiday_service
    service.create(tenant, name="Summer Break", start_date=date(2026, 7, 30), end_date=date(2026, 8, 3))

    assert [h.name for h in service.list_between(tenant, date(2026, 8, 1), date(2026, 8, 31))] == ["Summer Break"]
    with pytest.raises(ValidationError):
        service.create(tenant, name="Backwards", start_date=date(2026, 8, 3), end_date=date(2026, 7, 30))

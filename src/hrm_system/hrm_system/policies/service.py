from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from ..common.validators import require_non_empty, require_non_negative
from ..core.enums import RecordStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.tenant import TenantContext
from .model import AttendancePolicy
from .repository import AttendancePolicyRepository


@dataclass(frozen=True)
class PolicyInput:
    policy_name: str
    late_grace_minutes: int
    early_departure_grace_minutes: int
    half_day_threshold_hours: float
    overtime_threshold_hours: float


class AttendancePolicyService:
    def __init__(self, policies: AttendancePolicyRepository):
        self._policies = policies

    def list(self, tenant: TenantContext) -> Sequence[AttendancePolicy]:
        return self._policies.list_for_company(tenant.company_id)

    def get(self, tenant: TenantContext, policy_id: int) -> AttendancePolicy:
        policy = self._policies.get_by_id(tenant.company_id, int(policy_id))
        if not policy:
            raise NotFoundError("Attendance policy not found")
        return policy

    def _validated(self, tenant: TenantContext, data: PolicyInput, *, exclude_id: int = 0) -> PolicyInput:
        name = require_non_empty(data.policy_name, "Policy name")
        existing = self._policies.get_by_name(tenant.company_id, name)
        if existing and existing.policy_id != exclude_id:
            raise ConflictError("Attendance policy with this name already exists")
        require_non_negative(data.late_grace_minutes, "Late grace minutes")
        require_non_negative(data.early_departure_grace_minutes, "Early departure grace minutes")
        require_non_negative(data.half_day_threshold_hours, "Half-day threshold")
        require_non_negative(data.overtime_threshold_hours, "Overtime threshold")
        if data.half_day_threshold_hours > data.overtime_threshold_hours:
            raise ValidationError("Half-day threshold cannot exceed the overtime threshold")
        return replace(data, policy_name=name)

    def create(self, tenant: TenantContext, data: PolicyInput) -> AttendancePolicy:
        data = self._validated(tenant, data)
        policy = AttendancePolicy(
            policy_id=0,
            company_id=tenant.company_id,
            policy_name=data.policy_name,
            late_grace_minutes=int(data.late_grace_minutes),
            early_departure_grace_minutes=int(data.early_departure_grace_minutes),
            half_day_threshold_hours=float(data.half_day_threshold_hours),
            overtime_threshold_hours=float(data.overtime_threshold_hours),
        )
        return replace(policy, policy_id=self._policies.save(policy))

    def update(self, tenant: TenantContext, policy_id: int, data: PolicyInput) -> AttendancePolicy:
        current = self.get(tenant, policy_id)
        data = self._validated(tenant, data, exclude_id=current.policy_id)
        updated = replace(
            current,
            policy_name=data.policy_name,
            late_grace_minutes=int(data.late_grace_minutes),
            early_departure_grace_minutes=int(data.early_departure_grace_minutes),
            half_day_threshold_hours=float(data.half_day_threshold_hours),
            overtime_threshold_hours=float(data.overtime_threshold_hours),
        )
        self._policies.save(updated)
        return updated

    def toggle_status(self, tenant: TenantContext, policy_id: int) -> AttendancePolicy:
        current = self.get(tenant, policy_id)
        status = RecordStatus.INACTIVE if current.is_active else RecordStatus.ACTIVE
        updated = replace(current, status=status)
        self._policies.save(updated)
        return updated

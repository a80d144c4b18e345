from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import NoActivePolicyError, NoActiveShiftError
from ..core.tenant import TenantContext
from ..employees.model import Employee
from ..policies.model import AttendancePolicy
from ..policies.repository import AttendancePolicyRepository
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from .model import AttendanceRecord


@dataclass(frozen=True)
class ResolvedRules:
    shift: Shift
    policy: AttendancePolicy


class PolicyResolver:
    """Resolve the Shift and AttendancePolicy that govern an employee's day.

    Employee-level assignments win and are loaded regardless of status (they
    may be historical references). Otherwise the company's active default with
    the lowest id is used, so the choice is deterministic when several exist.
    """

    def __init__(self, shifts: ShiftRepository, policies: AttendancePolicyRepository):
        self._shifts = shifts
        self._policies = policies

    def resolve_shift(self, tenant: TenantContext, employee: Employee) -> Shift:
        shift: Optional[Shift] = None
        if employee.shift_id:
            shift = self._shifts.get_by_id(tenant.company_id, employee.shift_id)
        else:
            active = [s for s in self._shifts.list_for_company(tenant.company_id) if s.is_active]
            shift = min(active, key=lambda s: s.shift_id) if active else None
        if not shift:
            raise NoActiveShiftError()
        return shift

    def resolve_policy(self, tenant: TenantContext, employee: Employee) -> AttendancePolicy:
        policy: Optional[AttendancePolicy] = None
        if employee.attendance_policy_id:
            policy = self._policies.get_by_id(tenant.company_id, employee.attendance_policy_id)
        else:
            active = [p for p in self._policies.list_for_company(tenant.company_id) if p.is_active]
            policy = min(active, key=lambda p: p.policy_id) if active else None
        if not policy:
            raise NoActivePolicyError()
        return policy

    def resolve(self, tenant: TenantContext, employee: Employee) -> ResolvedRules:
        return ResolvedRules(
            shift=self.resolve_shift(tenant, employee),
            policy=self.resolve_policy(tenant, employee),
        )

    def rules_for_record(self, tenant: TenantContext, record: AttendanceRecord, employee: Employee) -> ResolvedRules:
        """Rules stored on a record; falls back to resolution if a reference is gone."""
        shift = self._shifts.get_by_id(tenant.company_id, record.shift_id) if record.shift_id else None
        policy = (
            self._policies.get_by_id(tenant.company_id, record.attendance_policy_id)
            if record.attendance_policy_id
            else None
        )
        return ResolvedRules(
            shift=shift or self.resolve_shift(tenant, employee),
            policy=policy or self.resolve_policy(tenant, employee),
        )

from __future__ import annotations

from ..core.enums import AttendanceStatus
from ..core.tenant import TenantContext
from ..leaves.repository import LeaveRepository, LeaveTypeRepository
from .model import AttendanceRecord, AttendanceView


class LeaveOverlay:
    """Attach the approved leave's type to on_leave records, for display only."""

    def __init__(self, leaves: LeaveRepository, leave_types: LeaveTypeRepository):
        self._leaves = leaves
        self._leave_types = leave_types

    def overlay(self, tenant: TenantContext, record: AttendanceRecord) -> AttendanceView:
        if record.status != AttendanceStatus.ON_LEAVE:
            return AttendanceView(record=record, display_status=record.status)

        application = self._leaves.find_approved_covering(tenant.company_id, record.employee_id, record.work_date)
        leave_type = None
        if application:
            leave_type = self._leave_types.get_by_id(tenant.company_id, application.leave_type_id)
        return AttendanceView(record=record, display_status=record.status, leave_type=leave_type)

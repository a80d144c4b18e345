from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, time
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import RequestStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.tenant import TenantContext
from .model import AttendanceRegularization
from .repository import RegularizationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegularizationInput:
    attendance_id: int
    requested_clock_in: Optional[time]
    requested_clock_out: Optional[time]
    reason: str


class RegularizationService:
    def __init__(
        self,
        regularizations: RegularizationRepository,
        attendance_repo: AttendanceRepository,
        attendance: AttendanceService,
    ):
        self._regularizations = regularizations
        self._attendance_repo = attendance_repo
        self._attendance = attendance

    @staticmethod
    def _validate(data: RegularizationInput) -> str:
        if data.requested_clock_in is None and data.requested_clock_out is None:
            raise ValidationError("Please request at least one change")
        return require_non_empty(data.reason, "Reason")

    def get(self, tenant: TenantContext, regularization_id: int) -> AttendanceRegularization:
        g = self._regularizations.get_by_id(tenant.company_id, int(regularization_id))
        if not g:
            raise NotFoundError("Regularization request not found")
        return g

    def _get_pending(self, tenant: TenantContext, regularization_id: int) -> AttendanceRegularization:
        g = self.get(tenant, regularization_id)
        if g.status != RequestStatus.PENDING:
            raise ValidationError("Regularization request has already been processed")
        return g

    def list(
        self,
        tenant: TenantContext,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRegularization]:
        return self._regularizations.list(tenant.company_id, status=status, employee_id=employee_id)

    def create(
        self, tenant: TenantContext, data: RegularizationInput, *, now: datetime | None = None
    ) -> AttendanceRegularization:
        reason = self._validate(data)
        record = self._attendance_repo.get_by_id(tenant.company_id, int(data.attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        if self._regularizations.get_for_attendance(tenant.company_id, record.attendance_id):
            raise ConflictError("Regularization request already exists for this attendance record")

        g = AttendanceRegularization(
            regularization_id=0,
            company_id=tenant.company_id,
            employee_id=record.employee_id,
            attendance_id=record.attendance_id,
            work_date=record.work_date,
            original_clock_in=record.clock_in,
            original_clock_out=record.clock_out,
            requested_clock_in=data.requested_clock_in,
            requested_clock_out=data.requested_clock_out,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=now or now_local(),
        )
        regularization_id = self._regularizations.create(g)
        logger.info("Regularization %s filed for attendance %s", regularization_id, record.attendance_id)
        return replace(g, regularization_id=regularization_id)

    def update(
        self, tenant: TenantContext, regularization_id: int, data: RegularizationInput
    ) -> AttendanceRegularization:
        current = self._get_pending(tenant, regularization_id)
        reason = self._validate(data)
        updated = replace(
            current,
            requested_clock_in=data.requested_clock_in,
            requested_clock_out=data.requested_clock_out,
            reason=reason,
        )
        if not self._regularizations.update_request(updated):
            raise ValidationError("Regularization request has already been processed")
        return updated

    def delete(self, tenant: TenantContext, regularization_id: int) -> None:
        current = self._get_pending(tenant, regularization_id)
        if not self._regularizations.delete(tenant.company_id, current.regularization_id):
            raise ValidationError("Regularization request has already been processed")

    def approve(
        self, tenant: TenantContext, regularization_id: int, *, comments: str = "", now: datetime | None = None
    ) -> AttendanceRegularization:
        g = self._get_pending(tenant, regularization_id)

        self._attendance.apply_times(
            tenant,
            g.attendance_id,
            clock_in=g.requested_clock_in,
            clock_out=g.requested_clock_out,
        )
        decided = self._regularizations.decide(
            tenant.company_id,
            g.regularization_id,
            status=RequestStatus.APPROVED,
            decided_by=tenant.user_id,
            decided_at=now or now_local(),
            manager_comments=(comments or "").strip() or None,
        )
        if not decided:
            raise ValidationError("Approving regularization failed")

        logger.info("Regularization %s approved by user=%s", g.regularization_id, tenant.user_id)
        return self.get(tenant, g.regularization_id)

    def reject(
        self, tenant: TenantContext, regularization_id: int, *, comments: str = "", now: datetime | None = None
    ) -> AttendanceRegularization:
        g = self._get_pending(tenant, regularization_id)
        decided = self._regularizations.decide(
            tenant.company_id,
            g.regularization_id,
            status=RequestStatus.REJECTED,
            decided_by=tenant.user_id,
            decided_at=now or now_local(),
            manager_comments=(comments or "").strip() or None,
        )
        if not decided:
            raise ValidationError("Rejecting regularization failed")
        return self.get(tenant, g.regularization_id)

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.service import AttendanceService
from ..common.datetime_utils import iter_dates, now_local
from ..common.validators import require_date_order, require_non_empty, require_non_negative
from ..core.enums import RequestStatus
from ..core.exceptions import (
    EmployeeNotFoundError,
    InsufficientLeaveBalanceError,
    LeaveConflictError,
    NotFoundError,
    ValidationError,
)
from ..core.tenant import TenantContext
from ..employees.repository import EmployeeRepository
from .model import LeaveApplication, LeaveBalance, LeaveType
from .repository import LeaveBalanceRepository, LeaveRepository, LeaveTypeRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        leave_types: LeaveTypeRepository,
        employees: EmployeeRepository,
        attendance: AttendanceService,
        balances: LeaveBalanceRepository,
    ):
        self._leaves = leaves
        self._leave_types = leave_types
        self._employees = employees
        self._attendance = attendance
        self._balances = balances

    def list_types(self, tenant: TenantContext) -> Sequence[LeaveType]:
        return self._leave_types.list_for_company(tenant.company_id)

    def get(self, tenant: TenantContext, leave_id: int) -> LeaveApplication:
        application = self._leaves.get_by_id(tenant.company_id, int(leave_id))
        if not application:
            raise NotFoundError("Leave application not found")
        return application

    def list(
        self,
        tenant: TenantContext,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveApplication]:
        return self._leaves.list(tenant.company_id, status=status, employee_id=employee_id)

    def apply(
        self,
        tenant: TenantContext,
        *,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        reason: str,
        now: datetime | None = None,
    ) -> LeaveApplication:
        if not self._employees.get_by_id(tenant.company_id, int(employee_id)):
            raise EmployeeNotFoundError("Employee profile not found")
        if not self._leave_types.get_by_id(tenant.company_id, int(leave_type_id)):
            raise NotFoundError("Leave type not found")
        require_date_order(start_date, end_date)
        reason = require_non_empty(reason, "Reason")

        if self._leaves.list_approved_overlapping(tenant.company_id, int(employee_id), start_date, end_date):
            raise LeaveConflictError("Employee already has approved leave in this period")
        self._check_balance(tenant, int(employee_id), int(leave_type_id), start_date, end_date)

        leave_id = self._leaves.create(
            company_id=tenant.company_id,
            employee_id=int(employee_id),
            leave_type_id=int(leave_type_id),
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            created_at=now or now_local(),
        )
        logger.info("Leave %s applied by employee=%s (%s..%s)", leave_id, employee_id, start_date, end_date)
        return self.get(tenant, leave_id)

    def _pending(self, tenant: TenantContext, leave_id: int) -> LeaveApplication:
        application = self.get(tenant, leave_id)
        if application.status != RequestStatus.PENDING:
            raise ValidationError("Leave application has already been decided")
        return application

    def _decide(
        self,
        tenant: TenantContext,
        application: LeaveApplication,
        status: RequestStatus,
        comments: str,
        now: datetime | None,
    ) -> LeaveApplication:
        decided = self._leaves.decide(
            tenant.company_id,
            application.leave_id,
            status=status,
            decided_by=tenant.user_id,
            decided_at=now or now_local(),
            manager_comments=(comments or "").strip() or None,
        )
        if not decided:
            raise ValidationError("Leave application has already been decided")
        return self.get(tenant, application.leave_id)

    def approve(
        self, tenant: TenantContext, leave_id: int, *, comments: str = "", now: datetime | None = None
    ) -> LeaveApplication:
        """Approve a pending application and put its working days on leave.

        Re-checks overlap with leave approved since the application was filed,
        and the balance for the year the leave starts in.
        """
        pending = self._pending(tenant, leave_id)
        if self._leaves.list_approved_overlapping(
            tenant.company_id, pending.employee_id, pending.start_date, pending.end_date
        ):
            raise LeaveConflictError("Employee already has approved leave in this period")
        balance = self._check_balance(
            tenant, pending.employee_id, pending.leave_type_id, pending.start_date, pending.end_date
        )

        application = self._decide(tenant, pending, RequestStatus.APPROVED, comments, now)
        if balance:
            self._balances.add_used(tenant.company_id, balance.balance_id, application.total_days)
        marked = self._attendance.mark_on_leave(
            tenant,
            application.employee_id,
            iter_dates(application.start_date, application.end_date),
        )
        logger.info(
            "Leave %s approved by user=%s; %s days marked on_leave",
            application.leave_id,
            tenant.user_id,
            marked,
        )
        return application

    def reject(
        self, tenant: TenantContext, leave_id: int, *, comments: str = "", now: datetime | None = None
    ) -> LeaveApplication:
        application = self._decide(tenant, self._pending(tenant, leave_id), RequestStatus.REJECTED, comments, now)
        logger.info("Leave %s rejected by user=%s", application.leave_id, tenant.user_id)
        return application

    # ---- balances ----

    def _check_balance(
        self, tenant: TenantContext, employee_id: int, leave_type_id: int, start_date: date, end_date: date
    ) -> Optional[LeaveBalance]:
        """Without a balance row for the year the leave type is not capped."""
        balance = self._balances.get(tenant.company_id, employee_id, leave_type_id, start_date.year)
        required = (end_date - start_date).days + 1
        if balance and balance.remaining_days < required:
            raise InsufficientLeaveBalanceError(
                f"Insufficient leave balance. Available: {balance.remaining_days:g} days, required: {required} days"
            )
        return balance

    def list_balances(
        self, tenant: TenantContext, employee_id: int, *, year: Optional[int] = None
    ) -> Sequence[LeaveBalance]:
        if not self._employees.get_by_id(tenant.company_id, int(employee_id)):
            raise EmployeeNotFoundError("Employee profile not found")
        return self._balances.list_for_employee(tenant.company_id, int(employee_id), year=year)

    def set_balance(
        self,
        tenant: TenantContext,
        *,
        employee_id: int,
        leave_type_id: int,
        year: int,
        allocated_days: float,
        carried_forward: float = 0.0,
        manual_adjustment: float = 0.0,
    ) -> LeaveBalance:
        """Create or re-allocate a yearly balance; used days are never overwritten."""
        if not self._employees.get_by_id(tenant.company_id, int(employee_id)):
            raise EmployeeNotFoundError("Employee profile not found")
        if not self._leave_types.get_by_id(tenant.company_id, int(leave_type_id)):
            raise NotFoundError("Leave type not found")
        require_non_negative(allocated_days, "Allocated days")
        require_non_negative(carried_forward, "Carried forward days")
        if not 1900 <= int(year) <= 9999:
            raise ValidationError("Year is out of range")

        current = self._balances.get(tenant.company_id, int(employee_id), int(leave_type_id), int(year))
        balance = LeaveBalance(
            balance_id=current.balance_id if current else 0,
            company_id=tenant.company_id,
            employee_id=int(employee_id),
            leave_type_id=int(leave_type_id),
            year=int(year),
            allocated_days=float(allocated_days),
            carried_forward=float(carried_forward),
            manual_adjustment=float(manual_adjustment),
            used_days=current.used_days if current else 0.0,
        )
        balance_id = self._balances.save(balance)
        logger.info(
            "Leave balance employee=%s type=%s year=%s set to %.2f by user=%s",
            employee_id,
            leave_type_id,
            year,
            balance.remaining_days,
            tenant.user_id,
        )
        return replace(balance, balance_id=balance_id)

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import time
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_non_negative
from ..core.enums import RecordStatus
from ..core.exceptions import ConflictError, NotFoundError
from ..core.tenant import TenantContext
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftInput:
    shift_name: str
    start_time: time
    end_time: time
    break_minutes: int = 0
    break_start_time: Optional[time] = None
    break_end_time: Optional[time] = None
    is_night_shift: bool = False


class ShiftService:
    """Shifts are referenced by historical records, so they are deactivated, never deleted."""

    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    def list(self, tenant: TenantContext) -> Sequence[Shift]:
        return self._shifts.list_for_company(tenant.company_id)

    def get(self, tenant: TenantContext, shift_id: int) -> Shift:
        shift = self._shifts.get_by_id(tenant.company_id, int(shift_id))
        if not shift:
            raise NotFoundError("Shift not found")
        return shift

    def _check_name(self, tenant: TenantContext, name: str, *, exclude_id: int = 0) -> str:
        name = require_non_empty(name, "Shift name")
        existing = self._shifts.get_by_name(tenant.company_id, name)
        if existing and existing.shift_id != exclude_id:
            raise ConflictError("Shift with this name already exists")
        return name

    def create(self, tenant: TenantContext, data: ShiftInput) -> Shift:
        name = self._check_name(tenant, data.shift_name)
        require_non_negative(data.break_minutes, "Break minutes")
        shift = Shift(
            shift_id=0,
            company_id=tenant.company_id,
            shift_name=name,
            start_time=data.start_time,
            end_time=data.end_time,
            break_minutes=int(data.break_minutes),
            break_start_time=data.break_start_time,
            break_end_time=data.break_end_time,
            is_night_shift=bool(data.is_night_shift),
        )
        shift_id = self._shifts.save(shift)
        logger.info("Shift %s created for company %s", shift_id, tenant.company_id)
        return replace(shift, shift_id=shift_id)

    def update(self, tenant: TenantContext, shift_id: int, data: ShiftInput) -> Shift:
        current = self.get(tenant, shift_id)
        name = self._check_name(tenant, data.shift_name, exclude_id=current.shift_id)
        require_non_negative(data.break_minutes, "Break minutes")
        updated = replace(
            current,
            shift_name=name,
            start_time=data.start_time,
            end_time=data.end_time,
            break_minutes=int(data.break_minutes),
            break_start_time=data.break_start_time,
            break_end_time=data.break_end_time,
            is_night_shift=bool(data.is_night_shift),
        )
        self._shifts.save(updated)
        return updated

    def toggle_status(self, tenant: TenantContext, shift_id: int) -> Shift:
        current = self.get(tenant, shift_id)
        status = RecordStatus.INACTIVE if current.is_active else RecordStatus.ACTIVE
        updated = replace(current, status=status)
        self._shifts.save(updated)
        return updated

from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import (
    DEFAULT_HALF_DAY_THRESHOLD_HOURS,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_OVERTIME_THRESHOLD_HOURS,
)
from ..core.enums import RecordStatus


@dataclass(frozen=True)
class AttendancePolicy:
    """Domain entity: grace periods and hour thresholds used when classifying a day."""

    policy_id: int
    company_id: int
    policy_name: str
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    early_departure_grace_minutes: int = 0
    half_day_threshold_hours: float = DEFAULT_HALF_DAY_THRESHOLD_HOURS
    overtime_threshold_hours: float = DEFAULT_OVERTIME_THRESHOLD_HOURS
    status: RecordStatus = RecordStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE

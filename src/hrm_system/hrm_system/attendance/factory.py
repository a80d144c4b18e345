from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceStatus
from ..policies.model import AttendancePolicy
from .model import AttendanceRecord
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import StatusStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.holiday_strategy import HolidayStrategy
from .strategies.present_strategy import PresentStrategy
from .strategies.retain_strategy import RetainStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the status strategy for a record.

    worked_hours is the base figure after breaks; overtime never feeds into it.
    """

    def for_record(self, record: AttendanceRecord, *, worked_hours: float, policy: AttendancePolicy) -> StatusStrategy:
        if record.is_holiday:
            return HolidayStrategy()
        if record.status == AttendanceStatus.ON_LEAVE:
            return RetainStrategy()
        if record.clock_in is None:
            return AbsentStrategy()
        if record.clock_out is None:
            return PresentStrategy()
        if worked_hours <= 0:
            return AbsentStrategy()
        if worked_hours < policy.half_day_threshold_hours:
            return HalfDayStrategy()
        return PresentStrategy()

from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..model import AttendanceRecord
from .base import StatusDecision, StatusStrategy


class HalfDayStrategy(StatusStrategy):
    def decide(self, record: AttendanceRecord, *, worked_hours: float) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HALF_DAY)

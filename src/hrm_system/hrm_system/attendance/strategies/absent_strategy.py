from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..model import AttendanceRecord
from .base import StatusDecision, StatusStrategy


class AbsentStrategy(StatusStrategy):
    """No clock-in, or a clock-out with no worked time left after breaks."""

    def decide(self, record: AttendanceRecord, *, worked_hours: float) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT)

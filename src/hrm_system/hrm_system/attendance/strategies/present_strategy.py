from __future__ import annotations

from ...core.enums import AttendanceStatus
from ..model import AttendanceRecord
from .base import StatusDecision, StatusStrategy


class PresentStrategy(StatusStrategy):
    """Clocked in, and either still on shift or worked at least the half-day threshold."""

    def decide(self, record: AttendanceRecord, *, worked_hours: float) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

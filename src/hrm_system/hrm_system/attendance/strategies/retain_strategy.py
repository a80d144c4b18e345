from __future__ import annotations

from ..model import AttendanceRecord
from .base import StatusDecision, StatusStrategy


class RetainStrategy(StatusStrategy):
    """Keep a status the classifier does not derive (on_leave)."""

    def decide(self, record: AttendanceRecord, *, worked_hours: float) -> StatusDecision:
        return StatusDecision(status=record.status)

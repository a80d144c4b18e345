from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.enums import RecordStatus


@dataclass(frozen=True)
class Shift:
    """Domain entity: a named work-hours template."""

    shift_id: int
    company_id: int
    shift_name: str
    start_time: time
    end_time: time
    break_minutes: int = 0
    break_start_time: Optional[time] = None
    break_end_time: Optional[time] = None
    is_night_shift: bool = False
    status: RecordStatus = RecordStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == RecordStatus.ACTIVE

    def window_for(self, work_date: date) -> tuple[datetime, datetime]:
        """Start/end of the shift anchored at work_date; ends past midnight roll over."""
        start = datetime.combine(work_date, self.start_time)
        end = datetime.combine(work_date, self.end_time)
        if end <= start:
            end += timedelta(days=1)
        return start, end

    def break_window_for(self, work_date: date) -> Optional[tuple[datetime, datetime]]:
        if not self.break_start_time or not self.break_end_time:
            return None
        start, _ = self.window_for(work_date)
        b_start = datetime.combine(work_date, self.break_start_time)
        if b_start < start:
            b_start += timedelta(days=1)
        b_end = datetime.combine(b_start.date(), self.break_end_time)
        if b_end <= b_start:
            b_end += timedelta(days=1)
        return b_start, b_end

    @property
    def working_hours(self) -> float:
        start, end = self.window_for(date(2000, 1, 1))
        minutes = int((end - start).total_seconds() // 60) - int(self.break_minutes or 0)
        return round(max(minutes, 0) / 60, 2)

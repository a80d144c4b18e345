from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import AttendanceRecord


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class StatusStrategy(ABC):
    """Strategy Pattern: encapsulate how a day's attendance status is decided."""

    @abstractmethod
    def decide(self, record: AttendanceRecord, *, worked_hours: float) -> StatusDecision:
        raise NotImplementedError

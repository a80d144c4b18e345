from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Shift


class ShiftRepository(Protocol):
    def list_for_company(self, company_id: int) -> Sequence[Shift]:
        """All shifts of the company ordered by id (active and inactive)."""

        raise NotImplementedError

    def get_by_id(self, company_id: int, shift_id: int) -> Optional[Shift]:
        raise NotImplementedError

    def get_by_name(self, company_id: int, shift_name: str) -> Optional[Shift]:
        raise NotImplementedError

    def save(self, shift: Shift) -> int:
        """Insert when shift_id == 0, else update. Returns the id."""

        raise NotImplementedError

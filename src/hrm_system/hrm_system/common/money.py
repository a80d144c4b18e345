from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from ..core.constants import MONEY_PLACES

ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """Round half-up to cents. Floats go through str() to avoid binary artefacts."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(Decimal(MONEY_PLACES), rounding=ROUND_HALF_UP)

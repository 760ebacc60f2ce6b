from __future__ import annotations

from decimal import Decimal

from .money import ZERO, multiply

FREE_EXCHANGE_LIMIT = 5
COMMISSION_RATE = Decimal("0.007")


class CommissionPolicy:
    """Commission is free for the first few exchanges of a session, then a flat rate."""

    def __init__(self, *, completed_exchange_count: int = 0) -> None:
        if completed_exchange_count < 0:
            msg = "completed_exchange_count must be >= 0"
            raise ValueError(msg)
        self._completed_exchange_count = completed_exchange_count

    @property
    def completed_exchange_count(self) -> int:
        return self._completed_exchange_count

    def quote(self, amount: Decimal) -> Decimal:
        if self._completed_exchange_count < FREE_EXCHANGE_LIMIT:
            return ZERO
        return multiply(amount, COMMISSION_RATE)

    def record_completed_exchange(self) -> None:
        self._completed_exchange_count += 1


__all__ = ["COMMISSION_RATE", "FREE_EXCHANGE_LIMIT", "CommissionPolicy"]

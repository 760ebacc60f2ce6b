"""Domain model of a single-user currency exchange session.

Money is always a ``Decimal`` with two fraction digits. The ledger and the
session are immutable values; ``ExchangeEngine`` is the only owner that
swaps them for new ones.
"""

__all__ = [
    "commission",
    "exchange",
    "ledger",
    "money",
    "rates",
]

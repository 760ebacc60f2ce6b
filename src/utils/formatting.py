from __future__ import annotations

from decimal import Decimal
from collections.abc import Iterable

from domain.money import to_money


def format_money(value: Decimal) -> str:
    return f"{to_money(value):.2f}"


def render_balances(rows: Iterable[tuple[str, Decimal]]) -> list[str]:
    """Format ledger rows as an aligned two-column table."""
    items = [(currency, format_money(amount)) for currency, amount in rows]
    if not items:
        return ["  (empty)"]

    currency_width = max(len("Currency"), max(len(currency) for currency, _ in items))
    amount_width = max(len("Balance"), max(len(amount) for _, amount in items))

    header = f"{'Currency':<{currency_width}} {'Balance':>{amount_width}}"
    lines = [header, "-" * len(header)]
    for currency, amount in items:
        lines.append(f"{currency:<{currency_width}} {amount:>{amount_width}}")
    return lines


__all__ = ["format_money", "render_balances"]

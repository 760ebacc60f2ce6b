from decimal import Decimal

from utils.formatting import format_money, render_balances


def test_format_money_uses_two_decimals() -> None:
    assert format_money(Decimal("4100")) == "4100.00"
    assert format_money(Decimal("0.125")) == "0.12"


def test_render_balances_aligns_columns() -> None:
    lines = render_balances([("EUR", Decimal("849.3")), ("UAH", Decimal("6150"))])

    assert lines == [
        "Currency Balance",
        "----------------",
        "EUR       849.30",
        "UAH      6150.00",
    ]


def test_render_balances_empty() -> None:
    assert render_balances([]) == ["  (empty)"]

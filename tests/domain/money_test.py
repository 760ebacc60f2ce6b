from decimal import Decimal

import pytest

from domain.money import InvalidAmountError, divide, multiply, parse_money, to_money


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("100", Decimal("100.00")),
        ("0.125", Decimal("0.12")),
        ("0.135", Decimal("0.14")),
        ("2.675", Decimal("2.68")),
        ("-0", Decimal("0.00")),
    ],
)
def test_parse_money_rounds_half_to_even(text: str, expected: Decimal) -> None:
    parsed = parse_money(text)

    assert parsed == expected
    assert parsed.as_tuple().exponent == -2


@pytest.mark.parametrize("text", ["", "abc", "1,5", "NaN", "Infinity", "-1", "1_000", " 12 ", "12\n", "1e1000000000"])
def test_parse_money_rejects_invalid_input(text: str) -> None:
    with pytest.raises(InvalidAmountError) as exc_info:
        parse_money(text)

    assert exc_info.value.text == text


def test_arithmetic_helpers_quantize_result() -> None:
    assert multiply(Decimal("100.00"), Decimal("0.007")) == Decimal("0.70")
    assert multiply(Decimal("0.50"), Decimal("0.01")) == Decimal("0.00")
    assert divide(Decimal("100.00"), Decimal("3")) == Decimal("33.33")
    assert divide(Decimal("0.05"), Decimal("2")) == Decimal("0.02")
    assert to_money(7) == Decimal("7.00")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1e27", Decimal("1000000000000000000000000000.00")),
        ("123456789012345678901234567890.125", Decimal("123456789012345678901234567890.12")),
    ],
)
def test_parse_money_keeps_every_digit_of_large_amounts(text: str, expected: Decimal) -> None:
    parsed = parse_money(text)

    assert parsed == expected
    assert parsed.as_tuple().exponent == -2

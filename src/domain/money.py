from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation, localcontext

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
ONE = Decimal("1.00")


class InvalidAmountError(ValueError):
    def __init__(self, text: str) -> None:
        super().__init__(f"Not a valid amount: {text!r}")
        self.text = text


def to_money(value: Decimal | int | str) -> Decimal:
    """Quantize to two fraction digits, rounding half to even.

    Precision is widened for large amounts so that every integer digit is kept.
    """
    amount = Decimal(value)
    with localcontext() as ctx:
        if amount.is_finite() and amount.adjusted() < ctx.Emax:
            ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(CENT, rounding=ROUND_HALF_EVEN)


def parse_money(text: str) -> Decimal:
    # Decimal() tolerates digit separators and padding, user input must not.
    if "_" in text or text != text.strip():
        raise InvalidAmountError(text)
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise InvalidAmountError(text) from exc
    if not value.is_finite() or value < 0:
        raise InvalidAmountError(text)
    try:
        return to_money(value.copy_abs())
    except ArithmeticError as exc:
        # Exponent beyond what the decimal context can represent.
        raise InvalidAmountError(text) from exc


def multiply(amount: Decimal, factor: Decimal) -> Decimal:
    return to_money(amount * factor)


def divide(amount: Decimal, divisor: Decimal) -> Decimal:
    return to_money(amount / divisor)


__all__ = ["CENT", "ONE", "ZERO", "InvalidAmountError", "divide", "multiply", "parse_money", "to_money"]

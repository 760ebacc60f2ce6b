from __future__ import annotations

from decimal import Decimal
from collections.abc import Iterator, Mapping

from .money import ZERO, to_money


class LedgerError(Exception):
    pass


class InsufficientFundsError(LedgerError):
    def __init__(self, *, currency: str, attempted_amount: Decimal, available_balance: Decimal) -> None:
        self.currency = currency
        self.attempted_amount = attempted_amount
        self.available_balance = available_balance
        message = (
            f"Insufficient balance for currency={currency} "
            f"attempted={attempted_amount} available={available_balance}"
        )
        super().__init__(message)


class Ledger:
    """Per-currency balances of a session.

    Instances are never mutated; ``credit``, ``debit`` and ``apply_exchange``
    return a new ledger. Entries keep insertion order and are always positive:
    a debit that brings a balance to zero removes the currency.
    """

    __slots__ = ("_balances",)

    def __init__(self, balances: Mapping[str, Decimal] | None = None) -> None:
        entries: dict[str, Decimal] = {}
        for currency, amount in (balances or {}).items():
            money = to_money(amount)
            if money <= 0:
                raise LedgerError(f"Balance for {currency} must be > 0, got {money}")
            entries[currency] = money
        self._balances = entries

    def balance(self, currency: str) -> Decimal:
        return self._balances.get(currency, ZERO)

    def credit(self, currency: str, amount: Decimal) -> Ledger:
        if amount <= 0:
            raise LedgerError(f"Credit amount must be > 0, got {amount}")
        updated = dict(self._balances)
        updated[currency] = to_money(self.balance(currency) + amount)
        return Ledger(updated)

    def debit(self, currency: str, amount: Decimal) -> Ledger:
        if amount < 0:
            raise LedgerError(f"Debit amount must be >= 0, got {amount}")
        available = self.balance(currency)
        if amount > available:
            raise InsufficientFundsError(currency=currency, attempted_amount=amount, available_balance=available)
        updated = dict(self._balances)
        remaining = to_money(available - amount)
        if remaining > 0:
            updated[currency] = remaining
        else:
            updated.pop(currency, None)
        return Ledger(updated)

    def apply_exchange(
        self,
        *,
        sell_currency: str,
        sell_amount: Decimal,
        commission: Decimal,
        receive_currency: str,
        receive_amount: Decimal,
    ) -> Ledger:
        """Debit the sold amount plus commission and credit the received amount.

        Both legs are validated before a new ledger is returned, so a failing
        exchange leaves the caller's ledger as it was.
        """
        return self.debit(sell_currency, sell_amount + commission).credit(receive_currency, receive_amount)

    def as_dict(self) -> dict[str, Decimal]:
        return dict(self._balances)

    def items(self) -> list[tuple[str, Decimal]]:
        return list(self._balances.items())

    def __iter__(self) -> Iterator[str]:
        return iter(self._balances)

    def __len__(self) -> int:
        return len(self._balances)

    def __contains__(self, currency: object) -> bool:
        return currency in self._balances

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ledger):
            return NotImplemented
        return list(self._balances.items()) == list(other._balances.items())

    def __hash__(self) -> int:
        return hash(tuple(self._balances.items()))

    def __repr__(self) -> str:
        return f"Ledger({self._balances!r})"


__all__ = ["InsufficientFundsError", "Ledger", "LedgerError"]

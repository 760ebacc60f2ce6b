from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import StrEnum

from .commission import CommissionPolicy
from .ledger import Ledger
from .money import ONE, ZERO, InvalidAmountError, divide, multiply, parse_money
from .rates import CurrencyCode, FetchError, RateSnapshot, RateSource

logger = logging.getLogger(__name__)

SEED_BALANCE = Decimal("1000.00")
DEFAULT_SELL_INPUT = "0.00"
FALLBACK_MESSAGE = "Something went wrong"


class Side(StrEnum):
    SELL = "SELL"
    RECEIVE = "RECEIVE"


class InputError(StrEnum):
    NONE = "NONE"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"


class ExchangeNotAllowedError(Exception):
    def __init__(self, message: str, *, input_error: InputError, is_loading: bool) -> None:
        super().__init__(message)
        self.input_error = input_error
        self.is_loading = is_loading


@dataclass(frozen=True)
class ExchangeSession:
    is_loading: bool = False
    base_currency: str = ""
    sell_currency: str = ""
    receive_currency: str = ""
    sell_currency_balance: Decimal = ZERO
    receive_currency_balance: Decimal = ZERO
    sell_amount: Decimal = ZERO
    receive_amount: Decimal = ZERO
    commission: Decimal = ZERO
    sell_input_text: str = DEFAULT_SELL_INPUT
    input_error: InputError = InputError.NONE
    snapshot: RateSnapshot | None = None
    ledger: Ledger = field(default_factory=Ledger)

    @property
    def currencies(self) -> list[CurrencyCode]:
        return self.snapshot.currencies if self.snapshot is not None else []

    @property
    def can_exchange(self) -> bool:
        return not self.is_loading and self.input_error is InputError.NONE and self.receive_amount > 0


@dataclass(frozen=True)
class UpdateSellCurrency:
    currency: str


@dataclass(frozen=True)
class UpdateReceiveCurrency:
    currency: str


@dataclass(frozen=True)
class UpdateSellAmount:
    text: str


@dataclass(frozen=True)
class PerformExchange:
    pass


ExchangeAction = UpdateSellCurrency | UpdateReceiveCurrency | UpdateSellAmount | PerformExchange


class ExchangeEngine:
    """Owns the exchange session and its ledger.

    ``select_currency`` and ``update_sell_input`` never await, so on a single
    event loop they cannot interleave with anything else. ``commit_exchange``
    and the state update at the end of ``load_rates`` share one lock.
    """

    def __init__(
        self,
        *,
        rate_source: RateSource,
        commission_policy: CommissionPolicy | None = None,
        ledger: Ledger | None = None,
    ) -> None:
        self._rate_source = rate_source
        self._commission_policy = commission_policy or CommissionPolicy()
        self._state = ExchangeSession(ledger=ledger if ledger is not None else Ledger())
        self._lock = asyncio.Lock()
        self._loading_task: asyncio.Task[None] | None = None
        self._seeded = False
        self.messages: asyncio.Queue[str] = asyncio.Queue()

    @property
    def state(self) -> ExchangeSession:
        return self._state

    @property
    def commission_policy(self) -> CommissionPolicy:
        return self._commission_policy

    def start_loading(self) -> asyncio.Task[None]:
        """Schedule ``load_rates`` in the background, cancelling a load still in flight."""
        if self._loading_task is not None and not self._loading_task.done():
            self._loading_task.cancel()
        self._loading_task = asyncio.create_task(self.load_rates())
        return self._loading_task

    async def load_rates(self) -> None:
        self._state = replace(self._state, is_loading=True)
        logger.info("Loading exchange rates")
        try:
            snapshot = await asyncio.to_thread(self._rate_source.fetch_rates)
            async with self._lock:
                self._state = self._apply_snapshot(self._state, snapshot)
        except FetchError as exc:
            logger.warning("Loading exchange rates failed: %s", exc)
            self._notify(str(exc) or FALLBACK_MESSAGE)
            return
        finally:
            # Also reached on cancellation and on unexpected source errors.
            if self._state.is_loading:
                self._state = replace(self._state, is_loading=False)

        logger.info(
            "Loaded %d rates for base %s as of %s",
            len(snapshot.rates),
            snapshot.base,
            snapshot.as_of.isoformat(),
        )

    def select_currency(self, side: Side, currency: str) -> ExchangeSession:
        state = self._state
        opposite = state.receive_currency if side is Side.SELL else state.sell_currency
        # Rates are quoted against the base only, so one side must stay on it.
        if currency != state.base_currency:
            opposite = state.base_currency

        if side is Side.SELL:
            state = replace(state, sell_currency=currency, receive_currency=opposite)
        else:
            state = replace(state, sell_currency=opposite, receive_currency=currency)
        self._state = self._reset_trade(state)
        return self._state

    def update_sell_input(self, text: str) -> ExchangeSession:
        state = self._state
        try:
            sell_amount = parse_money(text)
        except InvalidAmountError:
            self._state = replace(state, sell_input_text=text, input_error=InputError.INVALID_AMOUNT)
            return self._state

        commission = self._commission_policy.quote(sell_amount)
        available = state.ledger.balance(state.sell_currency)
        if available < sell_amount + commission:
            self._state = replace(state, sell_input_text=text, input_error=InputError.INSUFFICIENT_BALANCE)
            return self._state

        self._state = replace(
            state,
            sell_amount=sell_amount,
            receive_amount=self._convert(state, sell_amount),
            commission=commission,
            sell_input_text=text,
            input_error=InputError.NONE,
        )
        return self._state

    async def commit_exchange(self) -> ExchangeSession:
        async with self._lock:
            state = self._state
            if not state.can_exchange:
                raise ExchangeNotAllowedError(
                    self._blocked_reason(state),
                    input_error=state.input_error,
                    is_loading=state.is_loading,
                )

            ledger = state.ledger.apply_exchange(
                sell_currency=state.sell_currency,
                sell_amount=state.sell_amount,
                commission=state.commission,
                receive_currency=state.receive_currency,
                receive_amount=state.receive_amount,
            )
            self._commission_policy.record_completed_exchange()
            self._state = self._reset_trade(replace(state, ledger=ledger))

        logger.info(
            "Exchanged %s %s to %s %s, commission %s",
            state.sell_amount,
            state.sell_currency,
            state.receive_amount,
            state.receive_currency,
            state.commission,
        )
        return self._state

    async def dispatch(self, action: ExchangeAction) -> ExchangeSession:
        if isinstance(action, UpdateSellCurrency):
            return self.select_currency(Side.SELL, action.currency)
        if isinstance(action, UpdateReceiveCurrency):
            return self.select_currency(Side.RECEIVE, action.currency)
        if isinstance(action, UpdateSellAmount):
            return self.update_sell_input(action.text)
        if isinstance(action, PerformExchange):
            return await self.commit_exchange()
        msg = f"Unsupported action: {action!r}"
        raise TypeError(msg)

    def drain_messages(self) -> list[str]:
        drained: list[str] = []
        while not self.messages.empty():
            drained.append(self.messages.get_nowait())
        return drained

    def _notify(self, message: str) -> None:
        self.messages.put_nowait(message)

    def _apply_snapshot(self, state: ExchangeSession, snapshot: RateSnapshot) -> ExchangeSession:
        ledger = state.ledger
        # Seed once per session; a spent base balance stays spent on reload.
        if not self._seeded:
            if snapshot.base not in ledger:
                ledger = ledger.credit(snapshot.base, SEED_BALANCE)
            self._seeded = True

        loaded = replace(
            state,
            is_loading=False,
            base_currency=snapshot.base,
            sell_currency=snapshot.base,
            receive_currency=snapshot.default_receive_currency(),
            snapshot=snapshot,
            ledger=ledger,
        )
        return self._reset_trade(loaded)

    def _convert(self, state: ExchangeSession, sell_amount: Decimal) -> Decimal:
        if state.sell_currency == state.base_currency:
            return multiply(sell_amount, self._rate(state, state.receive_currency))
        return divide(sell_amount, self._rate(state, state.sell_currency))

    @staticmethod
    def _rate(state: ExchangeSession, currency: str) -> Decimal:
        rate = state.snapshot.rate_for(currency) if state.snapshot is not None else None
        if rate is None:
            logger.warning("No rate for %s, falling back to %s", currency, ONE)
            return ONE
        return rate

    @staticmethod
    def _reset_trade(state: ExchangeSession) -> ExchangeSession:
        return replace(
            state,
            sell_currency_balance=state.ledger.balance(state.sell_currency),
            receive_currency_balance=state.ledger.balance(state.receive_currency),
            sell_amount=ZERO,
            receive_amount=ZERO,
            commission=ZERO,
            sell_input_text=DEFAULT_SELL_INPUT,
            input_error=InputError.NONE,
        )

    @staticmethod
    def _blocked_reason(state: ExchangeSession) -> str:
        if state.is_loading:
            return "Exchange rates are still loading"
        if state.input_error is InputError.INVALID_AMOUNT:
            return "Sell amount is not a valid number"
        if state.input_error is InputError.INSUFFICIENT_BALANCE:
            return "Sell balance is too low for this amount"
        return "Nothing to exchange"


__all__ = [
    "DEFAULT_SELL_INPUT",
    "FALLBACK_MESSAGE",
    "SEED_BALANCE",
    "ExchangeAction",
    "ExchangeEngine",
    "ExchangeNotAllowedError",
    "ExchangeSession",
    "InputError",
    "PerformExchange",
    "Side",
    "UpdateReceiveCurrency",
    "UpdateSellAmount",
    "UpdateSellCurrency",
]

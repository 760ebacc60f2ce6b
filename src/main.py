from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Callable, Sequence

from config import config
from domain.exchange import (
    ExchangeEngine,
    ExchangeSession,
    InputError,
    PerformExchange,
    UpdateReceiveCurrency,
    UpdateSellAmount,
    UpdateSellCurrency,
)
from services.rate_sources import build_rate_source
from utils.formatting import format_money, render_balances

INPUT_ERROR_MESSAGES = {
    InputError.INVALID_AMOUNT: "Input a correct value",
    InputError.INSUFFICIENT_BALANCE: "Sell balance can't be less than zero",
}

HELP_LINES = [
    "Commands:",
    "  sell <CODE>      choose the currency to sell",
    "  receive <CODE>   choose the currency to receive",
    "  amount <VALUE>   set the amount to sell",
    "  exchange         perform the exchange",
    "  balances         list all balances",
    "  currencies       list available currencies",
    "  reload           fetch exchange rates again",
    "  quit             exit",
]


class ExchangeConsole:
    def __init__(self, engine: ExchangeEngine) -> None:
        self.engine = engine
        self.running = True

    async def handle(self, line: str) -> list[str]:
        command, _, argument = line.strip().partition(" ")
        command = command.lower()
        argument = argument.strip()

        if not command:
            return []
        if command in ("quit", "exit"):
            self.running = False
            return []
        if command == "help":
            return list(HELP_LINES)
        if command == "balances":
            return self._balances_lines()
        if command == "currencies":
            return [" ".join(self.engine.state.currencies) or "(no rates loaded)"]

        output: list[str] = []
        if command in ("sell", "receive"):
            output.extend(await self._select(command, argument.upper()))
        elif command == "amount":
            await self.engine.dispatch(UpdateSellAmount(argument))
        elif command == "exchange":
            output.extend(await self._exchange())
        elif command == "reload":
            await self.engine.load_rates()
        else:
            return [f"Unknown command '{command}', type 'help' for the list of commands"]

        output.extend(f"! {message}" for message in self.engine.drain_messages())
        output.extend(describe_session(self.engine.state))
        return output

    async def _select(self, command: str, currency: str) -> list[str]:
        known = self.engine.state.currencies
        if not currency or (known and currency not in known):
            return [f"Unknown currency '{currency}'"]
        if command == "sell":
            await self.engine.dispatch(UpdateSellCurrency(currency))
        else:
            await self.engine.dispatch(UpdateReceiveCurrency(currency))
        return []

    async def _exchange(self) -> list[str]:
        before = self.engine.state
        if not before.can_exchange:
            return ["Exchange is not available for the current input"]
        await self.engine.dispatch(PerformExchange())
        message = (
            f"Currency converted: {format_money(before.sell_amount)} {before.sell_currency} "
            f"to {format_money(before.receive_amount)} {before.receive_currency}."
        )
        if before.commission > 0:
            message += f" Commission fee: {format_money(before.commission)} {before.sell_currency}."
        return [message]

    def _balances_lines(self) -> list[str]:
        return ["My balances:", *render_balances(self.engine.state.ledger.items())]


def describe_session(state: ExchangeSession) -> list[str]:
    if state.is_loading:
        return ["Loading exchange rates..."]
    lines = [
        f"Sell    {state.sell_currency:<4} balance {format_money(state.sell_currency_balance):>12}"
        f"   amount {state.sell_input_text}",
        f"Receive {state.receive_currency:<4} balance {format_money(state.receive_currency_balance):>12}"
        f"   amount +{format_money(state.receive_amount)}",
    ]
    if state.commission > 0:
        lines.append(f"Commission fee: {format_money(state.commission)} {state.sell_currency}")
    error_message = INPUT_ERROR_MESSAGES.get(state.input_error)
    if error_message:
        lines.append(f"! {error_message}")
    return lines


async def run_console(engine: ExchangeEngine, *, read_line: Callable[[str], str] = input) -> None:
    console = ExchangeConsole(engine)
    await engine.load_rates()
    for message in engine.drain_messages():
        print(f"! {message}")
    for line in [*describe_session(engine.state), "Type 'help' for the list of commands."]:
        print(line)

    while console.running:
        try:
            command = await asyncio.to_thread(read_line, "> ")
        except EOFError:
            break
        for line in await console.handle(command):
            print(line)


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Exchange currencies at current Paysera rates.")
    parser.add_argument("--offline", action="store_true", help="Use built-in rates instead of the HTTP service")
    parser.add_argument("--log-level", default=config().log_level)
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s %(message)s")
    engine = ExchangeEngine(rate_source=build_rate_source(offline=args.offline))
    asyncio.run(run_console(engine))


if __name__ == "__main__":
    main()

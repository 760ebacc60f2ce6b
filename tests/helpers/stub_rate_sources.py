from __future__ import annotations

import threading

from domain.rates import FetchError, RateSnapshot, RateSource


class FailingRateSource(RateSource):
    def __init__(self, message: str = "Unable to resolve host") -> None:
        self.message = message
        self.calls = 0

    def fetch_rates(self) -> RateSnapshot:
        self.calls += 1
        raise FetchError(self.message)


class BlockingRateSource(RateSource):
    """Blocks ``fetch_rates`` until ``release`` is called."""

    def __init__(self, snapshot: RateSnapshot) -> None:
        self.snapshot = snapshot
        self.started = threading.Event()
        self._released = threading.Event()

    def release(self) -> None:
        self._released.set()

    def fetch_rates(self) -> RateSnapshot:
        self.started.set()
        self._released.wait(timeout=5)
        return self.snapshot


class ScriptedRateSource(RateSource):
    """Returns or raises the given outcomes in order, one per ``fetch_rates`` call."""

    def __init__(self, *outcomes: RateSnapshot | Exception) -> None:
        self.outcomes = list(outcomes)
        self.calls = 0

    def fetch_rates(self) -> RateSnapshot:
        outcome = self.outcomes[self.calls]
        self.calls += 1
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

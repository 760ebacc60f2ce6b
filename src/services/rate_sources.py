from __future__ import annotations

from datetime import date
from decimal import Decimal
from collections.abc import Mapping

from domain.rates import RateSnapshot, RateSource

from .paysera_client import PayseraRatesClient

OFFLINE_BASE = "EUR"
OFFLINE_RATES: dict[str, Decimal] = {
    "BGN": Decimal("1.9558"),
    "GBP": Decimal("0.8589"),
    "JPY": Decimal("162.88"),
    "PLN": Decimal("4.3148"),
    "UAH": Decimal("41.0"),
    "USD": Decimal("1.10"),
}


class StaticRateSource(RateSource):
    """Serves one fixed snapshot; used for offline runs."""

    def __init__(
        self,
        *,
        base: str = OFFLINE_BASE,
        rates: Mapping[str, Decimal] | None = None,
        as_of: date | None = None,
    ) -> None:
        self.snapshot = RateSnapshot(
            base=base,
            as_of=as_of or date.today(),
            rates=dict(rates if rates is not None else OFFLINE_RATES),
        )

    def fetch_rates(self) -> RateSnapshot:
        return self.snapshot


def build_rate_source(*, offline: bool = False) -> RateSource:
    if offline:
        return StaticRateSource()
    return PayseraRatesClient()


__all__ = ["OFFLINE_BASE", "OFFLINE_RATES", "StaticRateSource", "build_rate_source"]

from decimal import Decimal

import pytest
from pydantic import ValidationError

from domain.rates import RateSnapshot
from tests.constants import AS_OF, EUR, SCENARIO_RATES, UAH, USD


def test_codes_are_normalized_and_sorted() -> None:
    snapshot = RateSnapshot(base="eur", as_of=AS_OF, rates={"usd": Decimal("1.10"), "UAH": Decimal("41.0")})

    assert snapshot.base == EUR
    assert snapshot.currencies == [EUR, UAH, USD]
    assert snapshot.default_receive_currency() == UAH


def test_default_receive_currency_skips_base() -> None:
    snapshot = RateSnapshot(base="AED", as_of=AS_OF, rates={"AED": Decimal("1"), "USD": Decimal("0.27")})

    assert snapshot.default_receive_currency() == USD


def test_rate_for_base_and_unknown() -> None:
    snapshot = RateSnapshot(base=EUR, as_of=AS_OF, rates=SCENARIO_RATES)

    assert snapshot.rate_for(EUR) == Decimal("1")
    assert snapshot.rate_for(UAH) == Decimal("41.0")
    assert snapshot.rate_for("XXX") is None


@pytest.mark.parametrize(
    "rates",
    [
        {},
        {USD: Decimal("0")},
        {USD: Decimal("-1.5")},
    ],
)
def test_invalid_rates_are_rejected(rates: dict[str, Decimal]) -> None:
    with pytest.raises(ValidationError):
        RateSnapshot(base=EUR, as_of=AS_OF, rates=rates)


def test_empty_base_is_rejected() -> None:
    with pytest.raises(ValidationError):
        RateSnapshot(base=" ", as_of=AS_OF, rates=SCENARIO_RATES)

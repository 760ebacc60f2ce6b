import pytest

from domain.commission import CommissionPolicy
from domain.exchange import ExchangeEngine
from services.rate_sources import StaticRateSource
from tests.constants import AS_OF, EUR, SCENARIO_RATES


@pytest.fixture(scope="function")
def rate_source() -> StaticRateSource:
    return StaticRateSource(base=EUR, rates=SCENARIO_RATES, as_of=AS_OF)


@pytest.fixture(scope="function")
def commission_policy() -> CommissionPolicy:
    return CommissionPolicy()


@pytest.fixture(scope="function")
def engine(rate_source: StaticRateSource, commission_policy: CommissionPolicy) -> ExchangeEngine:
    return ExchangeEngine(rate_source=rate_source, commission_policy=commission_policy)

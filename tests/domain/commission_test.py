from decimal import Decimal

import pytest

from domain.commission import FREE_EXCHANGE_LIMIT, CommissionPolicy


@pytest.mark.parametrize("completed", range(FREE_EXCHANGE_LIMIT))
def test_first_exchanges_are_free(completed: int) -> None:
    policy = CommissionPolicy(completed_exchange_count=completed)

    assert policy.quote(Decimal("100.00")) == Decimal("0.00")
    assert policy.quote(Decimal("999999.99")) == Decimal("0.00")


def test_commission_charged_after_free_exchanges() -> None:
    policy = CommissionPolicy()
    for _ in range(FREE_EXCHANGE_LIMIT):
        policy.record_completed_exchange()

    assert policy.completed_exchange_count == 5
    assert policy.quote(Decimal("100.00")) == Decimal("0.70")
    assert policy.quote(Decimal("12.50")) == Decimal("0.09")
    # 0.0875 -> 0.09, 0.0245 -> 0.02
    assert policy.quote(Decimal("3.50")) == Decimal("0.02")


def test_quote_has_no_side_effect() -> None:
    policy = CommissionPolicy(completed_exchange_count=7)

    first = policy.quote(Decimal("10.00"))
    second = policy.quote(Decimal("10.00"))

    assert first == second == Decimal("0.07")
    assert policy.completed_exchange_count == 7


def test_negative_count_is_rejected() -> None:
    with pytest.raises(ValueError):
        CommissionPolicy(completed_exchange_count=-1)

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, NewType, Protocol

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

CurrencyCode = NewType("CurrencyCode", str)


class FetchError(RuntimeError):
    """Rates could not be fetched; the message is meant for the user."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class RateSnapshot(BaseModel):
    """Exchange rates quoted against a single base currency.

    Each rate is the number of units of that currency per 1 unit of ``base``.
    """

    model_config = ConfigDict(frozen=True)

    base: CurrencyCode
    as_of: date
    rates: dict[CurrencyCode, Decimal]

    @field_validator("base", mode="before")
    @classmethod
    def _normalize_base(cls, value: str) -> str:
        return str(value).strip().upper()

    @field_validator("rates", mode="before")
    @classmethod
    def _normalize_codes(cls, value: dict[str, object]) -> dict[str, object]:
        if not isinstance(value, dict):
            return value
        return {str(code).strip().upper(): rate for code, rate in value.items()}

    @model_validator(mode="after")
    def _validate_fields(self) -> RateSnapshot:
        if not self.base:
            raise ValueError("base must be non-empty")
        if not self.rates:
            raise ValueError("rates must contain at least one entry")
        for code, rate in self.rates.items():
            if not code:
                raise ValueError("currency codes must be non-empty")
            if not rate.is_finite() or rate <= 0:
                raise ValueError(f"rate for {code} must be > 0")
        return self

    @property
    def currencies(self) -> list[CurrencyCode]:
        return sorted({self.base, *self.rates})

    def default_receive_currency(self) -> CurrencyCode:
        candidates = sorted(code for code in self.rates if code != self.base)
        # Only the base itself is quoted; nothing else to receive.
        return candidates[0] if candidates else self.base

    def rate_for(self, currency: str) -> Decimal | None:
        if currency == self.base and currency not in self.rates:
            return Decimal("1")
        return self.rates.get(CurrencyCode(currency))


class RateSource(Protocol):
    """Fetches the current rate snapshot, raising FetchError on failure."""

    def fetch_rates(self) -> RateSnapshot: ...


__all__ = ["CurrencyCode", "FetchError", "RateSnapshot", "RateSource"]

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

import requests
from pydantic import ValidationError
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from config import config
from domain.rates import FetchError, RateSnapshot

RATES_PATH = "/tasks/api/currency-exchange-rates"


class PayseraRatesClient:
    """Client for the Paysera currency exchange rates endpoint."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
        retry_attempts: int | None = None,
        retry_backoff_seconds: float | None = None,
    ) -> None:
        settings = config()
        self.base_url = (base_url or settings.paysera_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._session = session or requests.Session()

        retries = Retry(
            total=retry_attempts if retry_attempts is not None else settings.http_retry_attempts,
            backoff_factor=(
                retry_backoff_seconds if retry_backoff_seconds is not None else settings.http_retry_backoff_seconds
            ),
            status_forcelist=[429, 502, 503, 504],
            allowed_methods=frozenset({"GET"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def fetch_rates(self) -> RateSnapshot:
        payload = self._request("GET", RATES_PATH)

        base_currency = payload.get("base")
        date_raw = payload.get("date")
        rates_raw = payload.get("rates")
        if base_currency is None or date_raw is None or not isinstance(rates_raw, dict):
            raise FetchError("Exchange rates payload missing required fields", payload=payload)

        try:
            as_of = date.fromisoformat(str(date_raw))
        except ValueError as exc:
            raise FetchError(f"Exchange rates payload has invalid date {date_raw!r}", payload=payload) from exc

        try:
            return RateSnapshot(
                base=base_currency,
                as_of=as_of,
                rates={code: self._to_decimal(rate) for code, rate in rates_raw.items()},
            )
        except ValidationError as exc:
            raise FetchError("Exchange rates payload is invalid", payload=payload) from exc

    def _request(self, method: str, path: str) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(method, url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            message, payload = self._extract_error(resp)
            raise FetchError(message, status_code=status_code, payload=payload) from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise FetchError("Exchange rates request failed", status_code=status_code) from exc

        try:
            payload_raw = response.json(parse_float=Decimal)
        except ValueError as exc:
            raise FetchError("Exchange rates service returned invalid JSON", payload=response.text) from exc

        if not isinstance(payload_raw, dict):
            raise FetchError("Exchange rates service returned unexpected payload type", payload=payload_raw)

        return payload_raw

    @staticmethod
    def _to_decimal(value: Any) -> Decimal:
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value))
        except ArithmeticError as exc:
            raise FetchError(f"Exchange rate {value!r} is not a number") from exc

    @staticmethod
    def _extract_error(response: Response | None) -> tuple[str, Any | None]:
        message = "Exchange rates request failed"
        payload: Any | None = None
        if response is None:
            return message, payload

        try:
            payload = response.json()
            if isinstance(payload, dict):
                message = payload.get("error_description") or payload.get("message") or message
        except ValueError:
            payload = response.text
        return f"{message} (HTTP {response.status_code})", payload


__all__ = ["RATES_PATH", "PayseraRatesClient"]

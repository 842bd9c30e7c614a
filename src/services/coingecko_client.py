from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from config import config
from domain.pricing import PriceProviderError

logger = logging.getLogger(__name__)

# API docs: https://docs.coingecko.com/reference/introduction


class CoinGeckoAPIError(PriceProviderError):
    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class CoinGeckoClient:
    """Client for the two public CoinGecko endpoints the converter needs."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
        retry_attempts: int | None = None,
        retry_backoff_seconds: float | None = None,
        api_key: str | None = None,
    ) -> None:
        settings = config()
        self.base_url = (base_url or settings.coingecko_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self.api_key = api_key if api_key is not None else settings.coingecko_api_key
        self._session = session or requests.Session()

        status_retries = retry_attempts if retry_attempts is not None else settings.retry_attempts
        # Only 429 responses are retried; timeouts and connection errors fail on the first attempt.
        retry = Retry(
            total=status_retries,
            connect=0,
            read=0,
            other=0,
            status=status_retries,
            backoff_factor=retry_backoff_seconds if retry_backoff_seconds is not None else settings.retry_backoff_seconds,
            status_forcelist={429},
            allowed_methods={"GET"},
            raise_on_status=False,
            respect_retry_after_header=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def list_assets(self) -> list[dict[str, Any]]:
        payload = self._request("GET", "/coins/list")
        if not isinstance(payload, list):
            raise CoinGeckoAPIError("CoinGecko coins list is not a list", payload=payload)
        return [entry for entry in payload if isinstance(entry, dict)]

    def simple_price(self, ids: Iterable[str], vs_currencies: Iterable[str]) -> dict[str, dict[str, Decimal]]:
        id_list = [asset_id.lower() for asset_id in ids if asset_id]
        code_list = [code.lower() for code in vs_currencies if code]
        if not id_list:
            raise ValueError("ids must contain at least one asset id")
        if not code_list:
            raise ValueError("vs_currencies must contain at least one currency code")

        params = {"ids": ",".join(id_list), "vs_currencies": ",".join(code_list)}
        payload = self._request("GET", "/simple/price", params=params)
        if not isinstance(payload, dict):
            raise CoinGeckoAPIError("CoinGecko simple price payload is not an object", payload=payload)

        prices: dict[str, dict[str, Decimal]] = {}
        for asset_id, quotes in payload.items():
            if not isinstance(quotes, dict):
                logger.debug("Skipping malformed CoinGecko quote entry for %s: %r", asset_id, quotes)
                continue
            parsed: dict[str, Decimal] = {}
            for code, raw_rate in quotes.items():
                rate = self._to_decimal(raw_rate)
                if rate is not None:
                    parsed[str(code).lower()] = rate
            prices[str(asset_id)] = parsed
        return prices

    def _request(self, method: str, path: str, *, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        headers = {"accept": "application/json"}
        if self.api_key:
            headers["x-cg-demo-api-key"] = self.api_key
        try:
            response = self._session.request(method, url, params=params, timeout=self.timeout, headers=headers)
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            message, payload_err = self._extract_error(resp)
            raise CoinGeckoAPIError(message, status_code=status_code, payload=payload_err) from exc
        except requests.Timeout as exc:
            raise CoinGeckoAPIError(f"CoinGecko API request timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise CoinGeckoAPIError("CoinGecko API request failed", status_code=status_code) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise CoinGeckoAPIError("CoinGecko API returned invalid JSON", payload=response.text) from exc

    @staticmethod
    def _to_decimal(value: Any) -> Decimal | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            rate = Decimal(str(value))
        except InvalidOperation:
            return None
        return rate if rate.is_finite() else None

    @staticmethod
    def _extract_error(response: Response | None) -> tuple[str, Any | None]:
        message = "CoinGecko API request failed"
        payload: Any | None = None
        if response is None:
            return message, payload

        try:
            payload = response.json()
            if isinstance(payload, dict):
                status = payload.get("status")
                if isinstance(status, dict) and status.get("error_message"):
                    message = status["error_message"]
                elif payload.get("error"):
                    message = str(payload["error"])
        except ValueError:
            payload = response.text
        return message, payload


__all__ = ["CoinGeckoAPIError", "CoinGeckoClient"]

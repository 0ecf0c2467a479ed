"""
Exchange Rate Providers

DESIGN DECISION: Fetching live rates is the only network call in the
system, and it must never fail a request. Providers therefore report
failure by returning None rather than raising; the currency engine
falls back to cached, then default rates.

Transport errors and server errors are retried a bounded number of
times with exponential backoff before giving up.
"""

import math
from abc import ABC, abstractmethod
from typing import Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.audit import get_logger
from finance_tracker.config import get_settings


class RateProviderInterface(ABC):
    """Source of USD-based exchange rates."""

    @abstractmethod
    async def fetch_rates(self) -> Optional[dict[str, float]]:
        """
        Fetch the latest rates as {currency code: units per USD}.

        Returns None on any network or parse failure.
        """
        pass


class RateFetchError(Exception):
    """A single fetch attempt failed in a way worth retrying."""
    pass


class StaticRateProvider(RateProviderInterface):
    """Returns a fixed table, or None to simulate an outage."""

    def __init__(self, rates: Optional[dict[str, float]] = None):
        self._rates = dict(rates) if rates is not None else None
        self.calls = 0

    async def fetch_rates(self) -> Optional[dict[str, float]]:
        self.calls += 1
        return dict(self._rates) if self._rates is not None else None


class ExchangeRateApiProvider(RateProviderInterface):
    """
    Rates from an exchangerate-api style endpoint.

    Expects a JSON body with a `rates` object mapping currency codes to
    numbers.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings().rates
        self._api_url = api_url or settings.api_url
        self._timeout = timeout_seconds or settings.timeout_seconds
        self._retry_attempts = retry_attempts or settings.retry_attempts
        self._transport = transport
        self._logger = get_logger(__name__)

    async def fetch_rates(self) -> Optional[dict[str, float]]:
        fetch = retry(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(RateFetchError),
            reraise=True,
        )(self._fetch_once)

        try:
            return await fetch()
        except RateFetchError as e:
            self._logger.warning("exchange_rate_fetch_failed", url=self._api_url, error=str(e))
            return None
        except ValueError as e:
            self._logger.warning("exchange_rate_response_invalid", url=self._api_url, error=str(e))
            return None

    async def _fetch_once(self) -> dict[str, float]:
        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(self._api_url)
            except httpx.HTTPError as e:
                raise RateFetchError(f"Request failed: {e}") from e

        if response.status_code >= 500:
            raise RateFetchError(f"Server error {response.status_code}")
        if response.status_code != 200:
            # Client errors will not improve on retry
            raise ValueError(f"Unexpected status {response.status_code}")

        return self._parse_rates(response.json())

    @staticmethod
    def _parse_rates(payload) -> dict[str, float]:
        """Validate the response body and extract the rate table."""
        if not isinstance(payload, dict) or not isinstance(payload.get("rates"), dict):
            raise ValueError("Response has no 'rates' object")

        rates = {}
        for code, value in payload["rates"].items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Rate for {code} is not a number")
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"Rate for {code} must be a positive finite number")
            rates[str(code).upper()] = float(value)

        if not rates:
            raise ValueError("Response contains no rates")
        return rates

"""Exchange rate provider package."""

from finance_tracker.services.rates.provider import (
    ExchangeRateApiProvider,
    RateFetchError,
    RateProviderInterface,
    StaticRateProvider,
)

__all__ = [
    "ExchangeRateApiProvider",
    "RateFetchError",
    "RateProviderInterface",
    "StaticRateProvider",
]

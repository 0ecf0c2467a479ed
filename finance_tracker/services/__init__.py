"""Services package."""

from finance_tracker.services.rates import (
    ExchangeRateApiProvider,
    RateFetchError,
    RateProviderInterface,
    StaticRateProvider,
)
from finance_tracker.services.storage import (
    FinanceStorageInterface,
    InMemoryStorage,
    JsonFileStorage,
    StorageError,
    StorageWriteError,
)

__all__ = [
    # Rate providers
    "ExchangeRateApiProvider",
    "RateFetchError",
    "RateProviderInterface",
    "StaticRateProvider",
    # Storage services
    "FinanceStorageInterface",
    "InMemoryStorage",
    "JsonFileStorage",
    "StorageError",
    "StorageWriteError",
]

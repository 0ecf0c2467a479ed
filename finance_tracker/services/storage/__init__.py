"""
Storage Services Package

Provides the abstract storage contract, the JSON file and in-memory
implementations, and the pure read helpers over the finance document.
"""

from finance_tracker.services.storage.interface import (
    FinanceStorageInterface,
    StorageError,
    StorageWriteError,
)
from finance_tracker.services.storage.json_file import JsonFileStorage
from finance_tracker.services.storage.memory import InMemoryStorage
from finance_tracker.services.storage.helpers import (
    calculate_balance,
    calculate_spending_by_category,
    find_by_id,
    get_current_month_transactions,
    get_transactions_by_category,
)

__all__ = [
    # Interface
    "FinanceStorageInterface",
    # Exceptions
    "StorageError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
    # Helpers
    "calculate_balance",
    "calculate_spending_by_category",
    "find_by_id",
    "get_current_month_transactions",
    "get_transactions_by_category",
]

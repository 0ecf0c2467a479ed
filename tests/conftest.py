"""
Shared fixtures for Finance Tracker tests.

All date-dependent behaviour is pinned to TODAY, a Saturday in
mid-June, so month boundaries and weekday/weekend splits are
predictable.
"""

from datetime import date, datetime, timezone

import pytest

from finance_tracker.models.finance import (
    FinanceDocument,
    SavingsGoal,
    Transaction,
    TransactionType,
    create_empty_document,
)
from finance_tracker.orchestrator import FinanceTracker
from finance_tracker.services.rates import StaticRateProvider
from finance_tracker.services.storage import InMemoryStorage


TODAY = date(2024, 6, 15)
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_transaction():
    """Factory for transactions dated TODAY unless told otherwise."""

    def _make(
        amount: float,
        type: TransactionType = TransactionType.EXPENSE,
        category: str = "Food & Dining",
        on: date = TODAY,
        **fields,
    ) -> Transaction:
        return Transaction(
            amount=amount,
            type=type,
            category=category,
            date=on,
            description=fields.pop("description", f"{category} entry"),
            **fields,
        )

    return _make


@pytest.fixture
def document() -> FinanceDocument:
    return create_empty_document()


@pytest.fixture
def make_document():
    """Factory for a document holding the given transactions."""

    def _make(*transactions: Transaction, **fields) -> FinanceDocument:
        doc = create_empty_document()
        doc.transactions.extend(transactions)
        for name, value in fields.items():
            setattr(doc, name, value)
        return doc

    return _make


@pytest.fixture
def make_goal():
    def _make(
        name: str = "Emergency fund",
        target_amount: float = 1200.0,
        deadline: date = None,
        created_at: datetime = NOW,
    ) -> SavingsGoal:
        return SavingsGoal(
            name=name,
            target_amount=target_amount,
            deadline=deadline,
            created_at=created_at,
        )

    return _make


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def rate_provider() -> StaticRateProvider:
    """A provider that is always down."""
    return StaticRateProvider(None)


@pytest.fixture
def tracker(storage, rate_provider) -> FinanceTracker:
    return FinanceTracker(storage=storage, rate_provider=rate_provider)

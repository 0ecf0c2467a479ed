"""
Derived Read Helpers

Pure functions over the finance document: no I/O, no mutation.
"""

from datetime import date
from typing import Iterable, Optional

from finance_tracker.models.finance import (
    FinanceDocument,
    Transaction,
    TransactionType,
)


def get_current_month_transactions(
    document: FinanceDocument,
    today: Optional[date] = None,
) -> list[Transaction]:
    """Transactions dated in today's calendar month, in ledger order."""
    today = today or date.today()
    return [
        t for t in document.transactions
        if t.date.year == today.year and t.date.month == today.month
    ]


def get_transactions_by_category(
    transactions: Iterable[Transaction],
    category: str,
) -> list[Transaction]:
    """Case-insensitive exact category match."""
    wanted = category.lower()
    return [t for t in transactions if t.category.lower() == wanted]


def calculate_balance(document: FinanceDocument) -> float:
    """Income minus expenses over the whole ledger."""
    return sum(t.signed_amount for t in document.transactions)


def calculate_spending_by_category(
    transactions: Iterable[Transaction],
) -> dict[str, float]:
    """Expense totals keyed by category, in first-seen order."""
    spending: dict[str, float] = {}
    for t in transactions:
        if t.type == TransactionType.EXPENSE:
            spending[t.category] = spending.get(t.category, 0) + t.amount
    return spending


def find_by_id(items: Iterable, item_id: str) -> Optional[int]:
    """Index of the entity with `item_id`, or None."""
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    return None

"""
Transaction Ledger

Creating, recording, deleting and querying transactions.

All mutations are pure: they take a document, return a new one and an
OperationResult. The input document is never touched.
"""

from datetime import date
from typing import Optional

from finance_tracker.analytics.categorizer import suggest_category
from finance_tracker.analytics.insights import check_budget_alerts
from finance_tracker.models.finance import (
    FinanceDocument,
    Transaction,
    TransactionType,
)
from finance_tracker.models.results import TransactionResult
from finance_tracker.services.storage.helpers import (
    find_by_id,
    get_current_month_transactions,
)


RECENT_TRANSACTION_COUNT = 5


def create_transaction(
    amount: float,
    type: TransactionType,
    description: str = "",
    category: Optional[str] = None,
    transaction_date: Optional[date] = None,
    tags: Optional[list[str]] = None,
    currency: Optional[str] = None,
    today: Optional[date] = None,
) -> Transaction:
    """
    Build a transaction from user input.

    The amount is stored as its absolute value. Without a category the
    description is run through the classifier; without a date, today
    is used.
    """
    return Transaction(
        date=transaction_date or today or date.today(),
        amount=abs(amount),
        category=category or suggest_category(description),
        description=description,
        type=type,
        tags=tags,
        currency=currency,
    )


def register_category(document: FinanceDocument, category: str) -> None:
    """Add `category` to the known list if it is not there yet. Mutates in place."""
    if category not in document.categories:
        document.categories.append(category)


def add_transaction(
    document: FinanceDocument,
    transaction: Transaction,
    today: Optional[date] = None,
) -> tuple[FinanceDocument, TransactionResult]:
    """
    Append a transaction to the ledger.

    The result carries the budget alert for the transaction's category
    when the new spend pushes it past a threshold this month.
    """
    updated = document.model_copy(deep=True)
    updated.transactions.append(transaction)
    register_category(updated, transaction.category)

    wanted = transaction.category.lower()
    alert = next(
        (
            a for a in check_budget_alerts(updated, today)
            if a.category is not None and a.category.lower() == wanted
        ),
        None,
    )

    return updated, TransactionResult.ok(transaction=transaction, alert=alert)


def delete_transaction(
    document: FinanceDocument,
    transaction_id: str,
) -> tuple[FinanceDocument, TransactionResult]:
    index = find_by_id(document.transactions, transaction_id)
    if index is None:
        return document, TransactionResult.not_found("Transaction not found")

    updated = document.model_copy(deep=True)
    deleted = updated.transactions.pop(index)
    return updated, TransactionResult.ok(transaction=deleted)


def match_transactions(
    document: FinanceDocument,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category: Optional[str] = None,
    type: Optional[TransactionType] = None,
) -> list[Transaction]:
    """
    Transactions matching every given filter, in ledger order.

    Date bounds are inclusive; the category match ignores case.
    """
    transactions = list(document.transactions)

    if start_date:
        transactions = [t for t in transactions if t.date >= start_date]
    if end_date:
        transactions = [t for t in transactions if t.date <= end_date]
    if category:
        wanted = category.lower()
        transactions = [t for t in transactions if t.category.lower() == wanted]
    if type:
        transactions = [t for t in transactions if t.type == type]

    return transactions


def filter_transactions(
    document: FinanceDocument,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category: Optional[str] = None,
    type: Optional[TransactionType] = None,
) -> list[Transaction]:
    """Like `match_transactions`, newest first."""
    transactions = match_transactions(document, start_date, end_date, category, type)
    transactions.sort(key=lambda t: t.date, reverse=True)
    return transactions


def get_recent_transactions(
    document: FinanceDocument,
    limit: int = RECENT_TRANSACTION_COUNT,
    today: Optional[date] = None,
) -> list[Transaction]:
    """The last `limit` current-month transactions recorded, newest entry first."""
    monthly = get_current_month_transactions(document, today)
    if limit <= 0:
        return []
    return list(reversed(monthly[-limit:]))


def get_categories(document: FinanceDocument) -> list[str]:
    return list(document.categories)

"""Transaction and budget mutations."""

from finance_tracker.ledger.budgets import delete_budget, set_budget
from finance_tracker.ledger.transactions import (
    add_transaction,
    create_transaction,
    delete_transaction,
    filter_transactions,
    get_categories,
    get_recent_transactions,
    match_transactions,
    register_category,
)

__all__ = [
    "add_transaction",
    "create_transaction",
    "delete_budget",
    "delete_transaction",
    "filter_transactions",
    "get_categories",
    "get_recent_transactions",
    "match_transactions",
    "register_category",
    "set_budget",
]

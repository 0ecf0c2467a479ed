"""Recurring transaction engine."""

from finance_tracker.recurring.engine import (
    RECURRING_SUFFIX,
    add_recurring,
    calculate_next_due_date,
    create_recurring_transaction,
    delete_recurring_transaction,
    get_upcoming_recurring,
    process_recurring_transactions,
    toggle_recurring_transaction,
)

__all__ = [
    "RECURRING_SUFFIX",
    "add_recurring",
    "calculate_next_due_date",
    "create_recurring_transaction",
    "delete_recurring_transaction",
    "get_upcoming_recurring",
    "process_recurring_transactions",
    "toggle_recurring_transaction",
]

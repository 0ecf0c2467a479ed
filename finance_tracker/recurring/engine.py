"""
Recurring Transaction Engine

Schedules that materialize concrete transactions.

DESIGN DECISION: There is no background scheduler. Nothing is
materialized until a caller runs `process_recurring_transactions`.
A schedule left alone for a while is caught up in a single pass: every
missed occurrence becomes its own transaction, dated on the day it was
due.

Monthly and yearly steps use calendar arithmetic (relativedelta).
When the day does not exist in the next month it is clamped to the
month's last day, and later steps continue from the clamped day:
Jan 31 -> Feb 29 -> Mar 29.
"""

from datetime import date, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta

from finance_tracker.ledger.transactions import register_category
from finance_tracker.models.finance import (
    DESCRIPTION_MAX_LENGTH,
    FinanceDocument,
    Frequency,
    RecurringTransaction,
    Transaction,
    TransactionType,
)
from finance_tracker.models.results import (
    RecurringProcessingResult,
    RecurringResult,
    UpcomingRecurring,
)
from finance_tracker.services.storage.helpers import find_by_id


RECURRING_SUFFIX = " (recurring)"

_STEPS = {
    Frequency.DAILY: timedelta(days=1),
    Frequency.WEEKLY: timedelta(days=7),
    Frequency.MONTHLY: relativedelta(months=1),
    Frequency.YEARLY: relativedelta(years=1),
}


def create_recurring_transaction(
    amount: float,
    type: TransactionType,
    category: str,
    description: str,
    frequency: Frequency,
    start_date: Optional[date] = None,
    currency: Optional[str] = None,
    today: Optional[date] = None,
) -> RecurringTransaction:
    """New active schedule whose first occurrence is its start date."""
    start = start_date or today or date.today()
    return RecurringTransaction(
        amount=abs(amount),
        type=type,
        category=category,
        description=description,
        frequency=frequency,
        start_date=start,
        next_due=start,
        active=True,
        currency=currency,
    )


def add_recurring(
    document: FinanceDocument,
    recurring: RecurringTransaction,
) -> tuple[FinanceDocument, RecurringResult]:
    updated = document.model_copy(deep=True)
    updated.recurring_transactions.append(recurring)
    return updated, RecurringResult.ok(recurring=recurring)


def calculate_next_due_date(current: date, frequency: Frequency) -> date:
    return current + _STEPS[Frequency(frequency)]


def _materialized_description(description: str) -> str:
    """
    The schedule description with RECURRING_SUFFIX appended.

    Long descriptions are cut so the result still fits a transaction.
    """
    room = DESCRIPTION_MAX_LENGTH - len(RECURRING_SUFFIX)
    return f"{description[:room]}{RECURRING_SUFFIX}"


def process_recurring_transactions(
    document: FinanceDocument,
    today: Optional[date] = None,
) -> tuple[FinanceDocument, RecurringProcessingResult]:
    """
    Materialize every due occurrence of every active schedule.

    An occurrence is due when its date is on or before today. When
    nothing is due the input document itself is returned, so callers
    can skip persisting.
    """
    today = today or date.today()

    if not any(r.active and r.next_due <= today for r in document.recurring_transactions):
        return document, RecurringProcessingResult()

    updated = document.model_copy(deep=True)
    created: list[Transaction] = []

    for recurring in updated.recurring_transactions:
        if not recurring.active:
            continue

        while recurring.next_due <= today:
            transaction = Transaction(
                date=recurring.next_due,
                amount=recurring.amount,
                category=recurring.category,
                description=_materialized_description(recurring.description),
                type=recurring.type,
                recurring=True,
                recurring_frequency=recurring.frequency,
                currency=recurring.currency,
            )
            updated.transactions.append(transaction)
            register_category(updated, recurring.category)
            created.append(transaction)

            recurring.last_processed = recurring.next_due
            recurring.next_due = calculate_next_due_date(recurring.next_due, recurring.frequency)

    return updated, RecurringProcessingResult(processed=len(created), transactions=created)


def toggle_recurring_transaction(
    document: FinanceDocument,
    recurring_id: str,
    active: bool,
) -> tuple[FinanceDocument, RecurringResult]:
    """Pause or resume a schedule. A paused schedule keeps its next_due."""
    index = find_by_id(document.recurring_transactions, recurring_id)
    if index is None:
        return document, RecurringResult.not_found("Recurring transaction not found")

    updated = document.model_copy(deep=True)
    recurring = updated.recurring_transactions[index]
    recurring.active = active
    return updated, RecurringResult.ok(recurring=recurring)


def delete_recurring_transaction(
    document: FinanceDocument,
    recurring_id: str,
) -> tuple[FinanceDocument, RecurringResult]:
    index = find_by_id(document.recurring_transactions, recurring_id)
    if index is None:
        return document, RecurringResult.not_found("Recurring transaction not found")

    updated = document.model_copy(deep=True)
    deleted = updated.recurring_transactions.pop(index)
    return updated, RecurringResult.ok(recurring=deleted)


def get_upcoming_recurring(
    document: FinanceDocument,
    horizon_days: int = 30,
    today: Optional[date] = None,
) -> list[UpcomingRecurring]:
    """
    Active schedules due within `horizon_days`, soonest first.

    Overdue schedules that have not been processed yet are included
    with a negative `days_until_due`.
    """
    today = today or date.today()
    horizon = today + timedelta(days=horizon_days)

    upcoming = [
        UpcomingRecurring(
            recurring=recurring,
            due_date=recurring.next_due,
            days_until_due=(recurring.next_due - today).days,
        )
        for recurring in document.recurring_transactions
        if recurring.active and recurring.next_due <= horizon
    ]
    upcoming.sort(key=lambda u: u.days_until_due)
    return upcoming

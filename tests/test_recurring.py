"""
Tests for the recurring transaction engine.
"""

from datetime import date

import pytest

from finance_tracker.models.finance import Frequency, TransactionType
from finance_tracker.models.results import FailureKind
from finance_tracker.recurring import (
    add_recurring,
    calculate_next_due_date,
    create_recurring_transaction,
    delete_recurring_transaction,
    get_upcoming_recurring,
    process_recurring_transactions,
    toggle_recurring_transaction,
)


@pytest.fixture
def rent():
    return create_recurring_transaction(
        amount=-1500,
        type=TransactionType.EXPENSE,
        category="Bills & Utilities",
        description="Rent",
        frequency=Frequency.MONTHLY,
        start_date=date(2024, 3, 20),
        currency="usd",
    )


class TestCreation:
    """Tests for creating schedules."""

    def test_defaults(self, rent):
        assert rent.amount == 1500
        assert rent.next_due == rent.start_date == date(2024, 3, 20)
        assert rent.active is True
        assert rent.last_processed is None
        assert rent.currency == "USD"

    def test_start_defaults_to_today(self, today):
        recurring = create_recurring_transaction(
            10, TransactionType.EXPENSE, "Subscriptions", "Music", Frequency.MONTHLY, today=today
        )
        assert recurring.start_date == today
        assert recurring.next_due == today

    def test_add_is_pure(self, document, rent):
        updated, result = add_recurring(document, rent)
        assert result.success
        assert [r.id for r in updated.recurring_transactions] == [rent.id]
        assert document.recurring_transactions == []


class TestNextDueDate:
    """Tests for calendar-aware schedule steps."""

    @pytest.mark.parametrize("frequency, expected", [
        (Frequency.DAILY, date(2024, 3, 1)),
        (Frequency.WEEKLY, date(2024, 3, 7)),
        (Frequency.MONTHLY, date(2024, 3, 29)),
        (Frequency.YEARLY, date(2025, 2, 28)),
    ])
    def test_steps_from_leap_day(self, frequency, expected):
        assert calculate_next_due_date(date(2024, 2, 29), frequency) == expected

    def test_month_end_is_clamped(self):
        assert calculate_next_due_date(date(2024, 1, 31), Frequency.MONTHLY) == date(2024, 2, 29)

    def test_accepts_plain_strings(self):
        assert calculate_next_due_date(date(2024, 12, 31), "daily") == date(2025, 1, 1)


class TestProcessing:
    """Tests for materializing due occurrences."""

    def test_monthly_catch_up(self, document, rent, today):
        """Test that three missed months become three transactions."""
        doc, _ = add_recurring(document, rent)

        updated, result = process_recurring_transactions(doc, today)

        assert result.processed == 3
        assert [t.date for t in result.transactions] == [
            date(2024, 3, 20), date(2024, 4, 20), date(2024, 5, 20),
        ]
        schedule = updated.recurring_transactions[0]
        assert schedule.next_due == date(2024, 6, 20)
        assert schedule.next_due > today
        assert schedule.last_processed == date(2024, 5, 20)
        assert len(updated.transactions) == 3

    def test_materialized_transaction_fields(self, document, rent, today):
        doc, _ = add_recurring(document, rent)
        _, result = process_recurring_transactions(doc, today)

        txn = result.transactions[0]
        assert txn.description == "Rent (recurring)"
        assert txn.amount == 1500
        assert txn.type == TransactionType.EXPENSE
        assert txn.category == "Bills & Utilities"
        assert txn.currency == "USD"
        assert txn.recurring is True
        assert txn.recurring_frequency == Frequency.MONTHLY

    def test_long_description_still_fits(self, document, today):
        """Test a description at the length limit still materializes."""
        recurring = create_recurring_transaction(
            5, TransactionType.EXPENSE, "Other", "d" * 495, Frequency.DAILY, start_date=today
        )
        doc, _ = add_recurring(document, recurring)

        updated, result = process_recurring_transactions(doc, today)

        description = result.transactions[0].description
        assert result.processed == 1
        assert len(description) == 500
        assert description == "d" * 488 + " (recurring)"
        assert updated.recurring_transactions[0].description == "d" * 495

    def test_empty_description_keeps_suffix_verbatim(self, document, today):
        recurring = create_recurring_transaction(
            5, TransactionType.EXPENSE, "Other", "", Frequency.DAILY, start_date=today
        )
        doc, _ = add_recurring(document, recurring)

        _, result = process_recurring_transactions(doc, today)

        assert result.transactions[0].description == " (recurring)"

    def test_due_today_is_processed(self, document, today):
        daily = create_recurring_transaction(
            5, TransactionType.EXPENSE, "Food & Dining", "Coffee", Frequency.DAILY, start_date=today
        )
        doc, _ = add_recurring(document, daily)

        _, result = process_recurring_transactions(doc, today)

        assert result.processed == 1

    def test_second_pass_is_noop(self, document, rent, today):
        """Test that processing twice on the same day creates nothing new."""
        doc, _ = add_recurring(document, rent)
        once, _ = process_recurring_transactions(doc, today)

        twice, result = process_recurring_transactions(once, today)

        assert result.processed == 0
        assert twice is once

    def test_paused_schedule_is_skipped(self, document, rent, today):
        doc, _ = add_recurring(document, rent)
        doc, _ = toggle_recurring_transaction(doc, rent.id, active=False)

        updated, result = process_recurring_transactions(doc, today)

        assert result.processed == 0
        assert updated.recurring_transactions[0].next_due == date(2024, 3, 20)

    def test_registers_new_category(self, document, today):
        recurring = create_recurring_transaction(
            9.99, TransactionType.EXPENSE, "Streaming", "Video", Frequency.MONTHLY, start_date=today
        )
        doc, _ = add_recurring(document, recurring)

        updated, _ = process_recurring_transactions(doc, today)

        assert "Streaming" in updated.categories
        assert "Streaming" not in document.categories


class TestManagement:
    """Tests for toggling, deleting and listing schedules."""

    def test_toggle(self, document, rent):
        doc, _ = add_recurring(document, rent)
        updated, result = toggle_recurring_transaction(doc, rent.id, active=False)
        assert result.success
        assert result.recurring.active is False
        assert doc.recurring_transactions[0].active is True

    def test_toggle_unknown(self, document):
        updated, result = toggle_recurring_transaction(document, "missing", active=True)
        assert result.failure == FailureKind.NOT_FOUND
        assert updated is document

    def test_delete(self, document, rent):
        doc, _ = add_recurring(document, rent)
        updated, result = delete_recurring_transaction(doc, rent.id)
        assert result.recurring.id == rent.id
        assert updated.recurring_transactions == []

    def test_delete_unknown(self, document):
        _, result = delete_recurring_transaction(document, "missing")
        assert result.failure == FailureKind.NOT_FOUND

    def test_upcoming(self, document, today):
        soon = create_recurring_transaction(
            1, TransactionType.EXPENSE, "Other", "Soon", Frequency.MONTHLY, start_date=date(2024, 6, 20)
        )
        overdue = create_recurring_transaction(
            1, TransactionType.EXPENSE, "Other", "Overdue", Frequency.MONTHLY, start_date=date(2024, 6, 13)
        )
        far = create_recurring_transaction(
            1, TransactionType.EXPENSE, "Other", "Far", Frequency.MONTHLY, start_date=date(2024, 8, 1)
        )
        paused = create_recurring_transaction(
            1, TransactionType.EXPENSE, "Other", "Paused", Frequency.MONTHLY, start_date=today
        )
        paused.active = False
        doc = document
        for recurring in (soon, overdue, far, paused):
            doc, _ = add_recurring(doc, recurring)

        upcoming = get_upcoming_recurring(doc, horizon_days=30, today=today)

        assert [u.recurring.description for u in upcoming] == ["Overdue", "Soon"]
        assert [u.days_until_due for u in upcoming] == [-2, 5]
        assert upcoming[1].due_date == date(2024, 6, 20)

"""
Tests for the category classifier and the budget & analytics engine.

TODAY is Saturday 2024-06-15; June 10-14 are weekdays, June 8-9 and
15-16 are weekend days.
"""

from datetime import date

import pytest

from finance_tracker.analytics import (
    analyze_spending,
    analyze_weekday_vs_weekend,
    check_budget_alerts,
    generate_insights,
    get_budget_statuses,
    suggest_category,
)
from finance_tracker.models.finance import Budget, TransactionType
from finance_tracker.models.results import InsightType


WEDNESDAY = date(2024, 6, 12)
SATURDAY = date(2024, 6, 15)


class TestCategorizer:
    """Tests for keyword-based category suggestions."""

    def test_coffee_is_food(self):
        assert suggest_category("Starbucks coffee run") == "Food & Dining"

    def test_priority_order(self):
        """Test that earlier categories win over later ones."""
        # "uber eats" is Food & Dining even though "uber" is Transportation
        assert suggest_category("Uber Eats order") == "Food & Dining"
        # "target" is Groceries, listed before Shopping's "store"
        assert suggest_category("Target store") == "Groceries"

    def test_case_insensitive(self):
        assert suggest_category("NETFLIX") == "Entertainment"

    def test_substring_match(self):
        assert suggest_category("Monthly salary deposit") == "Subscriptions"

    def test_fallback(self):
        assert suggest_category("xyzzy") == "Other"
        assert suggest_category("") == "Other"

    def test_deterministic(self):
        text = "Lyft to the airport"
        assert {suggest_category(text) for _ in range(5)} == {"Transportation"}


class TestSpendingAnalysis:
    """Tests for current-month spending analysis."""

    def test_totals(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(3000, type=TransactionType.INCOME, category="Income"),
            make_transaction(200, category="Groceries"),
            make_transaction(50, category="Food & Dining"),
            make_transaction(999, category="Travel", on=date(2024, 5, 30)),
        )
        analysis = analyze_spending(doc, today)

        assert analysis.total_income == 3000
        assert analysis.total_expenses == 250
        assert analysis.net_savings == 2750
        assert analysis.by_category == {"Groceries": 200, "Food & Dining": 50}

    def test_top_categories_ties_keep_insertion_order(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(100, category="C"),
            make_transaction(300, category="A"),
            make_transaction(300, category="B"),
        )
        top = analyze_spending(doc, today).top_categories
        assert [c.category for c in top] == ["A", "B", "C"]

    def test_top_categories_limited_to_five(self, make_document, make_transaction, today):
        doc = make_document(*[make_transaction(10 + i, category=f"Cat {i}") for i in range(7)])
        top = analyze_spending(doc, today).top_categories
        assert len(top) == 5
        assert top[0].category == "Cat 6"

    def test_empty_month(self, document, today):
        analysis = analyze_spending(document, today)
        assert analysis.total_expenses == 0
        assert analysis.top_categories == []


class TestBudgetAlerts:
    """Tests for budget threshold evaluation."""

    def test_over_limit(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(510, category="Shopping"),
            budgets=[Budget(category="Shopping", limit=500, alert_threshold=80)],
        )
        alerts = check_budget_alerts(doc, today)

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.type == InsightType.WARNING
        assert alert.amounts == [510, 500]
        assert alert.amount == 10
        assert "EXCEEDED" in alert.message
        assert "{0}" in alert.message and "{1}" in alert.message

    def test_at_threshold(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(400, category="Shopping"),
            budgets=[Budget(category="Shopping", limit=500, alert_threshold=80)],
        )
        alert = check_budget_alerts(doc, today)[0]

        assert alert.amount == 100
        assert "80%" in alert.message
        assert "EXCEEDED" not in alert.message

    def test_below_threshold_is_silent(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(399, category="Shopping"),
            budgets=[Budget(category="Shopping", limit=500)],
        )
        assert check_budget_alerts(doc, today) == []

    def test_multiple_budgets_alert_independently(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(600, category="Shopping"),
            make_transaction(90, category="Travel"),
            make_transaction(10, category="Education"),
            budgets=[
                Budget(category="Shopping", limit=500),
                Budget(category="Travel", limit=100, alert_threshold=50),
                Budget(category="Education", limit=100),
            ],
        )
        assert [a.category for a in check_budget_alerts(doc, today)] == ["Shopping", "Travel"]

    def test_income_and_other_months_do_not_count(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(900, category="Shopping", type=TransactionType.INCOME),
            make_transaction(900, category="Shopping", on=date(2024, 5, 1)),
            budgets=[Budget(category="Shopping", limit=500)],
        )
        assert check_budget_alerts(doc, today) == []

    def test_budget_statuses(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(125, category="shopping"),
            budgets=[Budget(category="Shopping", limit=500)],
        )
        status = get_budget_statuses(doc, today)[0]
        assert status.spent == 125
        assert status.remaining == 375
        assert status.percent_used == 25


class TestWeekdayWeekend:
    """Tests for the weekday/weekend split."""

    def test_per_transaction_averages(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(10, on=WEDNESDAY),
            make_transaction(30, on=WEDNESDAY),
            make_transaction(40, on=SATURDAY),
        )
        split = analyze_weekday_vs_weekend(doc, today)

        assert split.weekday_avg == 20
        assert split.weekend_avg == 40
        assert split.higher == "weekend"
        assert split.difference == pytest.approx(50)

    def test_empty_month_has_no_difference(self, document, today):
        split = analyze_weekday_vs_weekend(document, today)
        assert split.difference == 0
        assert split.higher == "weekday"


class TestInsights:
    """Tests for insight generation and ordering."""

    def test_order(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(1000, type=TransactionType.INCOME, category="Income", on=WEDNESDAY),
            make_transaction(600, category="Shopping", on=WEDNESDAY),
            make_transaction(600, category="Travel", on=SATURDAY),
            budgets=[Budget(category="Shopping", limit=500)],
        )
        insights = generate_insights(doc, today)

        # alert, deficit, biggest category; equal averages give no tip
        assert [i.type for i in insights] == [InsightType.WARNING, InsightType.WARNING, InsightType.INFO]
        assert insights[0].category == "Shopping"
        assert "Deficit" in insights[1].message
        assert insights[1].amounts == [200]
        assert insights[2].category == "Shopping"
        assert "50% of spending" in insights[2].message

    def test_low_savings_rate_tip(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(1000, type=TransactionType.INCOME, category="Income", on=WEDNESDAY),
            make_transaction(950, category="Shopping", on=WEDNESDAY),
        )
        first = generate_insights(doc, today)[0]
        assert first.type == InsightType.TIP
        assert "5.0%" in first.message

    def test_middle_savings_band_is_silent(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(1000, type=TransactionType.INCOME, category="Income", on=WEDNESDAY),
            make_transaction(425, category="Shopping", on=WEDNESDAY),
            make_transaction(425, category="Shopping", on=SATURDAY),
        )
        insights = generate_insights(doc, today)
        assert [i.type for i in insights] == [InsightType.INFO]
        assert "biggest" in insights[0].message

    def test_healthy_savings_celebrated(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(1000, type=TransactionType.INCOME, category="Income", on=WEDNESDAY),
            make_transaction(100, category="Shopping", on=WEDNESDAY),
        )
        first = generate_insights(doc, today)[0]
        assert first.type == InsightType.INFO
        assert "90.0%" in first.message

    def test_weekend_tip(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(10, on=WEDNESDAY),
            make_transaction(100, on=SATURDAY),
        )
        insights = generate_insights(doc, today)
        assert insights[-1].type == InsightType.TIP
        assert "weekends" in insights[-1].message

    def test_empty_document(self, document, today):
        assert generate_insights(document, today) == []

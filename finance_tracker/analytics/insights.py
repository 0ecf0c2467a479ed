"""
Budget & Analytics Engine

Current-month spending analysis, budget threshold evaluation and
insight generation.

DESIGN DECISION: Insights carry a message template and the raw numbers
separately. Money placeholders ({0}, {1}, ...) are filled in by the
presentation layer in the user's display currency; this module never
formats an amount as money.
"""

from datetime import date
from typing import Optional

from finance_tracker.models.finance import FinanceDocument, TransactionType
from finance_tracker.models.results import (
    BudgetStatus,
    CategoryAmount,
    Insight,
    InsightType,
    SpendingAnalysis,
    WeekdayWeekendSplit,
)
from finance_tracker.services.storage.helpers import (
    calculate_spending_by_category,
    get_current_month_transactions,
    get_transactions_by_category,
)


TOP_CATEGORY_COUNT = 5

# Savings rate bands, in percent of income
SAVINGS_RATE_LOW = 10
SAVINGS_RATE_HEALTHY = 20

# Weekday/weekend gap, in percent, above which a tip is emitted
WEEKDAY_WEEKEND_GAP = 20

# date.weekday(): Saturday=5, Sunday=6
WEEKEND_DAYS = {5, 6}


def analyze_spending(
    document: FinanceDocument,
    today: Optional[date] = None,
) -> SpendingAnalysis:
    """
    Totals and category breakdown for the current month.

    Top categories are ranked by amount, descending; ties keep the
    order in which categories first appear in the ledger.
    """
    monthly = get_current_month_transactions(document, today)

    total_income = sum(t.amount for t in monthly if t.type == TransactionType.INCOME)
    total_expenses = sum(t.amount for t in monthly if t.type == TransactionType.EXPENSE)
    by_category = calculate_spending_by_category(monthly)

    # sorted() is stable, so equal amounts keep insertion order
    ranked = sorted(by_category.items(), key=lambda item: item[1], reverse=True)
    top_categories = [
        CategoryAmount(category=category, amount=amount)
        for category, amount in ranked[:TOP_CATEGORY_COUNT]
    ]

    return SpendingAnalysis(
        total_income=total_income,
        total_expenses=total_expenses,
        net_savings=total_income - total_expenses,
        by_category=by_category,
        top_categories=top_categories,
    )


def _current_month_spent(document: FinanceDocument, category: str, today: Optional[date]) -> float:
    monthly = get_current_month_transactions(document, today)
    return sum(
        t.amount
        for t in get_transactions_by_category(monthly, category)
        if t.type == TransactionType.EXPENSE
    )


def get_budget_statuses(
    document: FinanceDocument,
    today: Optional[date] = None,
) -> list[BudgetStatus]:
    """Every budget with its spend, remaining and percent used this month."""
    statuses = []
    for budget in document.budgets:
        spent = _current_month_spent(document, budget.category, today)
        statuses.append(BudgetStatus(
            category=budget.category,
            limit=budget.limit,
            alert_threshold=budget.alert_threshold,
            spent=spent,
            remaining=budget.limit - spent,
            percent_used=spent / budget.limit * 100,
        ))
    return statuses


def check_budget_alerts(
    document: FinanceDocument,
    today: Optional[date] = None,
) -> list[Insight]:
    """
    One warning per budget at or over its threshold.

    Over the limit: `amount` is the overage. Between the threshold and
    the limit: `amount` is what is left.
    """
    insights = []

    for status in get_budget_statuses(document, today):
        if status.percent_used >= 100:
            insights.append(Insight(
                type=InsightType.WARNING,
                message=(
                    f"🚨 Budget EXCEEDED for {status.category}! "
                    "Spent {0} of {1} limit."
                ),
                category=status.category,
                amount=status.spent - status.limit,
                amounts=[status.spent, status.limit],
            ))
        elif status.percent_used >= status.alert_threshold:
            insights.append(Insight(
                type=InsightType.WARNING,
                message=(
                    f"⚠️ {status.category} budget at {status.percent_used:.0f}% "
                    "({0} of {1})"
                ),
                category=status.category,
                amount=status.limit - status.spent,
                amounts=[status.spent, status.limit],
            ))

    return insights


def analyze_weekday_vs_weekend(
    document: FinanceDocument,
    today: Optional[date] = None,
) -> WeekdayWeekendSplit:
    """
    Average expense per transaction on weekdays versus weekends.

    The difference is relative to the larger average, with a floor of 1
    so an empty month does not divide by zero.
    """
    expenses = [
        t for t in get_current_month_transactions(document, today)
        if t.type == TransactionType.EXPENSE
    ]

    weekend = [t.amount for t in expenses if t.date.weekday() in WEEKEND_DAYS]
    weekday = [t.amount for t in expenses if t.date.weekday() not in WEEKEND_DAYS]

    weekday_avg = sum(weekday) / len(weekday) if weekday else 0.0
    weekend_avg = sum(weekend) / len(weekend) if weekend else 0.0

    higher = "weekend" if weekend_avg > weekday_avg else "weekday"
    difference = abs(weekend_avg - weekday_avg) / max(weekday_avg, weekend_avg, 1) * 100

    return WeekdayWeekendSplit(
        weekday_avg=weekday_avg,
        weekend_avg=weekend_avg,
        difference=difference,
        higher=higher,
    )


def generate_insights(
    document: FinanceDocument,
    today: Optional[date] = None,
) -> list[Insight]:
    """
    All insights, always in this order:
    budget alerts, savings rate, biggest category, weekday/weekend tip.
    """
    analysis = analyze_spending(document, today)
    insights = check_budget_alerts(document, today)

    # Savings rate; the 10-20% band is deliberately silent
    if analysis.total_income > 0:
        savings_rate = analysis.net_savings / analysis.total_income * 100

        if savings_rate < 0:
            insights.append(Insight(
                type=InsightType.WARNING,
                message="📉 You're spending more than you earn this month. Deficit: {0}",
                amounts=[abs(analysis.net_savings)],
            ))
        elif savings_rate < SAVINGS_RATE_LOW:
            insights.append(Insight(
                type=InsightType.TIP,
                message=(
                    f"💡 Your savings rate is {savings_rate:.1f}%. "
                    f"Aim for at least {SAVINGS_RATE_HEALTHY}% for financial health."
                ),
            ))
        elif savings_rate >= SAVINGS_RATE_HEALTHY:
            insights.append(Insight(
                type=InsightType.INFO,
                message=f"🎉 Great job! You're saving {savings_rate:.1f}% of your income.",
            ))

    if analysis.top_categories:
        top = analysis.top_categories[0]
        share = top.amount / analysis.total_expenses * 100 if analysis.total_expenses > 0 else 0
        insights.append(Insight(
            type=InsightType.INFO,
            message=(
                f"📊 Your biggest expense category is {top.category} at {{0}} "
                f"({share:.0f}% of spending)"
            ),
            category=top.category,
            amounts=[top.amount],
        ))

    split = analyze_weekday_vs_weekend(document, today)
    if split.difference > WEEKDAY_WEEKEND_GAP:
        insights.append(Insight(
            type=InsightType.TIP,
            message=(
                f"🗓️ You spend {split.difference:.0f}% more on {split.higher}s. "
                "Consider balancing your spending."
            ),
        ))

    return insights

"""Category classifier and the budget & analytics engine."""

from finance_tracker.analytics.categorizer import (
    CATEGORY_KEYWORDS,
    FALLBACK_CATEGORY,
    suggest_category,
)
from finance_tracker.analytics.insights import (
    analyze_spending,
    analyze_weekday_vs_weekend,
    check_budget_alerts,
    generate_insights,
    get_budget_statuses,
)

__all__ = [
    "CATEGORY_KEYWORDS",
    "FALLBACK_CATEGORY",
    "analyze_spending",
    "analyze_weekday_vs_weekend",
    "check_budget_alerts",
    "generate_insights",
    "get_budget_statuses",
    "suggest_category",
]

"""
Budget Limits

Budgets are keyed by category, compared case-insensitively. Setting a
budget for an existing category replaces it.
"""

from typing import Optional

from finance_tracker.models.finance import DEFAULT_ALERT_THRESHOLD, Budget, FinanceDocument
from finance_tracker.models.results import BudgetResult


def _find_budget(document: FinanceDocument, category: str) -> Optional[int]:
    wanted = category.lower()
    for index, budget in enumerate(document.budgets):
        if budget.category.lower() == wanted:
            return index
    return None


def set_budget(
    document: FinanceDocument,
    category: str,
    limit: float,
    alert_threshold: float = DEFAULT_ALERT_THRESHOLD,
) -> tuple[FinanceDocument, BudgetResult]:
    budget = Budget(category=category, limit=limit, alert_threshold=alert_threshold)

    updated = document.model_copy(deep=True)
    index = _find_budget(updated, category)
    if index is None:
        updated.budgets.append(budget)
    else:
        updated.budgets[index] = budget

    return updated, BudgetResult.ok(budget=budget)


def delete_budget(
    document: FinanceDocument,
    category: str,
) -> tuple[FinanceDocument, BudgetResult]:
    index = _find_budget(document, category)
    if index is None:
        return document, BudgetResult.not_found("Budget not found")

    updated = document.model_copy(deep=True)
    deleted = updated.budgets.pop(index)
    return updated, BudgetResult.ok(budget=deleted)

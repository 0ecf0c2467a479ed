"""
Savings Goal Engine

Goals, their contribution ledgers, and progress projections.

CRITICAL: A goal's `current_amount` is always the sum of its
contribution ledger. Contributions append a positive entry, withdrawals
a negative one, and `current_amount` is recomputed from the ledger
after every change.

Every change is applied to a copy with assignment validation on. When
a value is rejected the copy is dropped and the input document comes
back with a validation failure, so nothing unloadable is ever saved.

Projection:
- months remaining  = calendar-month difference to the deadline, at least 1
- months since start = calendar-month difference from creation, at least 1
- average per month  = current amount / months since start
- projected date     = today + ceil(remaining / average) months
Month differences only look at year and month, so a deadline 15 days
away and one 6 weeks away can both count as one month.
"""

import math
from datetime import date, datetime
from typing import Any, Optional

from dateutil.relativedelta import relativedelta
from pydantic import ValidationError

from finance_tracker.models.finance import (
    FinanceDocument,
    GoalContribution,
    SavingsGoal,
)
from finance_tracker.models.results import GoalProgress, GoalResult, GoalsSummary
from finance_tracker.services.storage.helpers import find_by_id


WITHDRAWAL_NOTE = "Withdrawal"


def _month_difference(later: date, earlier: date) -> int:
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def create_goal(
    name: str,
    target_amount: float,
    deadline: Optional[date] = None,
    currency: str = "USD",
    now: Optional[datetime] = None,
) -> SavingsGoal:
    """New goal with nothing saved yet."""
    goal = SavingsGoal(
        name=name,
        target_amount=target_amount,
        current_amount=0.0,
        deadline=deadline,
        currency=currency,
        contributions=[],
    )
    if now is not None:
        goal.created_at = now
    return goal


def add_goal(
    document: FinanceDocument,
    goal: SavingsGoal,
) -> tuple[FinanceDocument, GoalResult]:
    updated = document.model_copy(deep=True)
    updated.savings_goals.append(goal)
    return updated, GoalResult.ok(goal=goal)


def add_contribution(
    document: FinanceDocument,
    goal_id: str,
    amount: float,
    note: Optional[str] = None,
    today: Optional[date] = None,
) -> tuple[FinanceDocument, GoalResult]:
    index = find_by_id(document.savings_goals, goal_id)
    if index is None:
        return document, GoalResult.not_found("Goal not found")
    if amount <= 0:
        return document, GoalResult.invalid("Contribution amount must be positive")

    updated = document.model_copy(deep=True)
    goal = updated.savings_goals[index]
    try:
        goal.contributions.append(GoalContribution(
            amount=amount,
            date=today or date.today(),
            note=note,
        ))
        goal.current_amount = goal.ledger_total
    except ValidationError as e:
        return document, GoalResult.from_validation_error(e)

    return updated, GoalResult.ok(goal=goal)


def withdraw_from_goal(
    document: FinanceDocument,
    goal_id: str,
    amount: float,
    note: Optional[str] = None,
    today: Optional[date] = None,
) -> tuple[FinanceDocument, GoalResult]:
    """
    Take money out of a goal.

    Fails without touching the goal when the amount is not positive or
    exceeds what has been saved.
    """
    index = find_by_id(document.savings_goals, goal_id)
    if index is None:
        return document, GoalResult.not_found("Goal not found")
    if amount <= 0:
        return document, GoalResult.invalid("Withdrawal amount must be positive")
    if amount > document.savings_goals[index].current_amount:
        return document, GoalResult.invalid("Insufficient funds in goal")

    updated = document.model_copy(deep=True)
    goal = updated.savings_goals[index]
    try:
        goal.contributions.append(GoalContribution(
            amount=-amount,
            date=today or date.today(),
            note=note or WITHDRAWAL_NOTE,
        ))
        goal.current_amount = goal.ledger_total
    except ValidationError as e:
        return document, GoalResult.from_validation_error(e)

    return updated, GoalResult.ok(goal=goal)


def update_goal(
    document: FinanceDocument,
    goal_id: str,
    name: Optional[str] = None,
    target_amount: Optional[float] = None,
    deadline: Optional[date] = None,
) -> tuple[FinanceDocument, GoalResult]:
    """Change a goal's name, target or deadline. Omitted fields stay as they are."""
    index = find_by_id(document.savings_goals, goal_id)
    if index is None:
        return document, GoalResult.not_found("Goal not found")
    if target_amount is not None and target_amount <= 0:
        return document, GoalResult.invalid("Target amount must be positive")
    if name is not None and not name.strip():
        return document, GoalResult.invalid("Goal name cannot be empty")

    updated = document.model_copy(deep=True)
    goal = updated.savings_goals[index]
    try:
        if name is not None:
            goal.name = name
        if target_amount is not None:
            goal.target_amount = target_amount
        if deadline is not None:
            goal.deadline = deadline
    except ValidationError as e:
        return document, GoalResult.from_validation_error(e)

    return updated, GoalResult.ok(goal=goal)


def delete_goal(
    document: FinanceDocument,
    goal_id: str,
) -> tuple[FinanceDocument, GoalResult]:
    index = find_by_id(document.savings_goals, goal_id)
    if index is None:
        return document, GoalResult.not_found("Goal not found")

    updated = document.model_copy(deep=True)
    deleted = updated.savings_goals.pop(index)
    return updated, GoalResult.ok(goal=deleted)


def goal_progress(goal: SavingsGoal, today: Optional[date] = None) -> GoalProgress:
    today = today or date.today()

    percent_complete = goal.current_amount / goal.target_amount * 100
    remaining = goal.target_amount - goal.current_amount

    on_track = True
    projected_completion = None
    monthly_needed = None

    if goal.deadline:
        months_remaining = max(_month_difference(goal.deadline, today), 1)
        monthly_needed = remaining / months_remaining

        months_since_created = max(_month_difference(today, goal.created_at.date()), 1)
        avg_monthly_contribution = goal.current_amount / months_since_created

        if avg_monthly_contribution > 0:
            months_to_complete = math.ceil(remaining / avg_monthly_contribution)
            projected_completion = today + relativedelta(months=months_to_complete)
            on_track = projected_completion <= goal.deadline
        else:
            on_track = False

    return GoalProgress(
        goal=goal,
        percent_complete=percent_complete,
        remaining=remaining,
        on_track=on_track,
        projected_completion=projected_completion,
        monthly_needed=monthly_needed,
    )


def get_goals_with_progress(
    document: FinanceDocument,
    today: Optional[date] = None,
) -> list[GoalProgress]:
    return [goal_progress(goal, today) for goal in document.savings_goals]


def get_goals_summary(document: FinanceDocument) -> GoalsSummary:
    goals = document.savings_goals

    total_target = sum(g.target_amount for g in goals)
    total_saved = sum(g.current_amount for g in goals)

    return GoalsSummary(
        total_goals=len(goals),
        total_target_amount=total_target,
        total_saved=total_saved,
        overall_progress=total_saved / total_target * 100 if total_target > 0 else 0.0,
        completed_goals=sum(1 for g in goals if g.current_amount >= g.target_amount),
    )


def describe_changes(
    name: Optional[str] = None,
    target_amount: Optional[float] = None,
    deadline: Optional[date] = None,
) -> dict[str, Any]:
    """The fields an update actually sets, for audit details."""
    changes: dict[str, Any] = {}
    if name is not None:
        changes["name"] = name
    if target_amount is not None:
        changes["target_amount"] = target_amount
    if deadline is not None:
        changes["deadline"] = deadline.isoformat()
    return changes

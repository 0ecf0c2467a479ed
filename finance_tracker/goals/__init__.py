"""Savings goal engine."""

from finance_tracker.goals.engine import (
    WITHDRAWAL_NOTE,
    add_contribution,
    add_goal,
    create_goal,
    delete_goal,
    describe_changes,
    get_goals_summary,
    get_goals_with_progress,
    goal_progress,
    update_goal,
    withdraw_from_goal,
)

__all__ = [
    "WITHDRAWAL_NOTE",
    "add_contribution",
    "add_goal",
    "create_goal",
    "delete_goal",
    "describe_changes",
    "get_goals_summary",
    "get_goals_with_progress",
    "goal_progress",
    "update_goal",
    "withdraw_from_goal",
]

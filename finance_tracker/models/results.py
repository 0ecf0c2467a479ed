"""
Derived and Result Models

Everything the engines compute but never persist: spending analysis,
insights, budget status, goal progress, conversions, and the explicit
success/failure results of mutations.

DESIGN DECISION: Expected domain failures (unknown id, withdrawal over
balance, unsupported currency) are returned as OperationResult values.
Only storage I/O failures are raised.
"""

import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import Field, ValidationError

from finance_tracker.models.finance import (
    Budget,
    FinanceModel,
    RecurringTransaction,
    SavingsGoal,
    Transaction,
    TransactionType,
)


# =============================================================================
# OPERATION RESULTS
# =============================================================================

class FailureKind(str, Enum):
    """Why an expected domain operation did not happen."""
    NOT_FOUND = "not_found"
    VALIDATION_FAILURE = "validation_failure"


class OperationResult(FinanceModel):
    """
    Outcome of a mutation.

    A failed result always comes with the input document unchanged.
    """

    success: bool
    failure: Optional[FailureKind] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, **payload):
        return cls(success=True, **payload)

    @classmethod
    def not_found(cls, message: str):
        return cls(
            success=False,
            failure=FailureKind.NOT_FOUND,
            error_message=message,
        )

    @classmethod
    def invalid(cls, message: str):
        return cls(
            success=False,
            failure=FailureKind.VALIDATION_FAILURE,
            error_message=message,
        )

    @classmethod
    def from_validation_error(cls, error: ValidationError):
        """A validation failure naming the first offending field."""
        first = error.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first['msg']}" if location else first["msg"]
        return cls.invalid(message)


class GoalResult(OperationResult):
    goal: Optional[SavingsGoal] = None


class RecurringResult(OperationResult):
    recurring: Optional[RecurringTransaction] = None


class BudgetResult(OperationResult):
    budget: Optional[Budget] = None


class TransactionResult(OperationResult):
    transaction: Optional[Transaction] = None
    # Budget alert for the transaction's category, if one fired
    alert: Optional["Insight"] = None


class RecurringProcessingResult(FinanceModel):
    """Transactions materialized by one recurring pass."""

    processed: int = Field(default=0, ge=0)
    transactions: list[Transaction] = Field(default_factory=list)


# =============================================================================
# ANALYTICS
# =============================================================================

class InsightType(str, Enum):
    WARNING = "warning"
    INFO = "info"
    TIP = "tip"


class Insight(FinanceModel):
    """
    A generated observation about spending.

    `message` may hold positional placeholders ({0}, {1}, ...) that are
    filled from `amounts` by the presentation layer, in whatever
    currency it displays. The engine never formats money itself.
    """

    type: InsightType
    message: str
    category: Optional[str] = None
    amount: Optional[float] = None
    amounts: list[float] = Field(default_factory=list)


class CategoryAmount(FinanceModel):
    category: str
    amount: float


class SpendingAnalysis(FinanceModel):
    """Current-month totals and the expense breakdown by category."""

    total_income: float = 0.0
    total_expenses: float = 0.0
    net_savings: float = 0.0
    by_category: dict[str, float] = Field(default_factory=dict)
    top_categories: list[CategoryAmount] = Field(default_factory=list)


class WeekdayWeekendSplit(FinanceModel):
    weekday_avg: float
    weekend_avg: float
    difference: float
    higher: str


class BudgetStatus(FinanceModel):
    """A budget with its derived current-month numbers."""

    category: str
    limit: float
    alert_threshold: float
    spent: float
    remaining: float
    percent_used: float


# =============================================================================
# RECURRING & GOALS
# =============================================================================

class UpcomingRecurring(FinanceModel):
    recurring: RecurringTransaction
    due_date: dt.date
    days_until_due: int


class GoalProgress(FinanceModel):
    """
    A goal with its projection.

    `percent_complete` is not clamped; a goal past its target reads
    above 100.
    """

    goal: SavingsGoal
    percent_complete: float
    remaining: float
    on_track: bool
    projected_completion: Optional[dt.date] = None
    monthly_needed: Optional[float] = None


class GoalsSummary(FinanceModel):
    total_goals: int = 0
    total_target_amount: float = 0.0
    total_saved: float = 0.0
    overall_progress: float = 0.0
    completed_goals: int = 0


# =============================================================================
# CURRENCY
# =============================================================================

class ConversionResult(FinanceModel):
    converted_amount: float
    rate: float


class CurrencyInfo(FinanceModel):
    code: str
    name: str
    symbol: str


class CurrencyBreakdown(FinanceModel):
    original: float
    converted: float


class BalanceInCurrency(FinanceModel):
    """Balance summed per source currency, each converted separately."""

    balance: float
    currency: str
    breakdown: dict[str, CurrencyBreakdown] = Field(default_factory=dict)


class ConvertedTransaction(FinanceModel):
    id: str
    date: dt.date
    original_amount: float
    original_currency: str
    converted_amount: float
    target_currency: str
    category: str
    description: str
    type: TransactionType


class TransactionsInCurrency(FinanceModel):
    transactions: list[ConvertedTransaction] = Field(default_factory=list)
    total_income: float = 0.0
    total_expenses: float = 0.0


# =============================================================================
# DASHBOARD
# =============================================================================

class Dashboard(FinanceModel):
    """Everything the landing page shows, computed from one load."""

    balance: float
    monthly_income: float
    monthly_expenses: float
    savings: float
    top_categories: list[CategoryAmount]
    spending_by_category: dict[str, float]
    insights: list[Insight]
    budgets: list[BudgetStatus]
    goals: list[GoalProgress]
    upcoming_recurring: list[UpcomingRecurring]
    recent_transactions: list[Transaction]


TransactionResult.model_rebuild()

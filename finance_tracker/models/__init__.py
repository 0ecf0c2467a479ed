"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
The persisted document, the derived read models and the audit events
all live here.
"""

from finance_tracker.models.finance import (
    DEFAULT_ALERT_THRESHOLD,
    DEFAULT_CATEGORIES,
    DEFAULT_EXCHANGE_RATES,
    SUPPORTED_CURRENCIES,
    Account,
    AccountType,
    Budget,
    ExchangeRateCache,
    FinanceDocument,
    Frequency,
    GoalContribution,
    RecurringTransaction,
    SavingsGoal,
    Transaction,
    TransactionType,
    create_empty_document,
    new_id,
    utcnow,
)
from finance_tracker.models.results import (
    BalanceInCurrency,
    BudgetResult,
    BudgetStatus,
    CategoryAmount,
    ConversionResult,
    ConvertedTransaction,
    CurrencyBreakdown,
    CurrencyInfo,
    Dashboard,
    FailureKind,
    GoalProgress,
    GoalResult,
    GoalsSummary,
    Insight,
    InsightType,
    OperationResult,
    RecurringProcessingResult,
    RecurringResult,
    SpendingAnalysis,
    TransactionResult,
    TransactionsInCurrency,
    UpcomingRecurring,
    WeekdayWeekendSplit,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Document models
    "DEFAULT_ALERT_THRESHOLD",
    "DEFAULT_CATEGORIES",
    "DEFAULT_EXCHANGE_RATES",
    "SUPPORTED_CURRENCIES",
    "Account",
    "AccountType",
    "Budget",
    "ExchangeRateCache",
    "FinanceDocument",
    "Frequency",
    "GoalContribution",
    "RecurringTransaction",
    "SavingsGoal",
    "Transaction",
    "TransactionType",
    "create_empty_document",
    "new_id",
    "utcnow",
    # Derived / result models
    "BalanceInCurrency",
    "BudgetResult",
    "BudgetStatus",
    "CategoryAmount",
    "ConversionResult",
    "ConvertedTransaction",
    "CurrencyBreakdown",
    "CurrencyInfo",
    "Dashboard",
    "FailureKind",
    "GoalProgress",
    "GoalResult",
    "GoalsSummary",
    "Insight",
    "InsightType",
    "OperationResult",
    "RecurringProcessingResult",
    "RecurringResult",
    "SpendingAnalysis",
    "TransactionResult",
    "TransactionsInCurrency",
    "UpcomingRecurring",
    "WeekdayWeekendSplit",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

"""
Core Data Models for Finance Tracker

These models define the single FinanceDocument and everything it owns.
They are designed to:
1. Validate user input at creation time
2. Serialize to the camelCase JSON document the clients already read
3. Never store derived numbers (budget spend, goal progress)

DESIGN DECISION: Amounts are plain floats rounded for display only.
This is a personal tracker, not a ledger; two-decimal float precision
is the documented contract.
"""

import datetime as dt
from enum import Enum
from typing import Annotated, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# CONSTANTS
# =============================================================================

SUPPORTED_CURRENCIES = (
    "USD", "EUR", "GBP", "JPY", "CAD", "AUD",
    "CHF", "CNY", "INR", "MXN", "BRL", "KRW",
)

# USD-pivoted fallback table, used when no live or cached rates exist
DEFAULT_EXCHANGE_RATES: dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 149.50,
    "CAD": 1.36,
    "AUD": 1.53,
    "CHF": 0.88,
    "CNY": 7.24,
    "INR": 83.12,
    "MXN": 17.15,
    "BRL": 4.97,
    "KRW": 1320.50,
}

DEFAULT_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Healthcare",
    "Education",
    "Travel",
    "Groceries",
    "Subscriptions",
    "Income",
    "Investments",
    "Gifts",
    "Personal Care",
    "Home",
    "Other",
]

DEFAULT_ALERT_THRESHOLD = 80.0

DESCRIPTION_MAX_LENGTH = 500


def new_id() -> str:
    """Generate a new entity identifier."""
    return str(uuid4())


def utcnow() -> dt.datetime:
    """Timezone-aware current time in UTC."""
    return dt.datetime.now(dt.timezone.utc)


def normalize_currency_code(value: Optional[str]) -> Optional[str]:
    """Upper-case a currency code. Unsupported codes are kept as-is."""
    if value is None:
        return None
    value = value.strip().upper()
    return value or None


def ensure_utc(value: Optional[dt.datetime]) -> Optional[dt.datetime]:
    """Treat naive timestamps from older documents as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction. Amounts are always stored unsigned."""
    INCOME = "income"
    EXPENSE = "expense"


class Frequency(str, Enum):
    """Schedule unit for recurring transactions."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT = "credit"
    CASH = "cash"
    INVESTMENT = "investment"


# =============================================================================
# BASE MODEL
# =============================================================================

class FinanceModel(BaseModel):
    """
    Base for every persisted model.

    Python attributes are snake_case; the stored document and the
    JSON handed to clients use camelCase aliases.

    CRITICAL: Assignments are validated like construction, and
    infinities / NaN are rejected. Whatever an engine writes into the
    document must load back, otherwise the next load treats the file
    as corrupt.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        allow_inf_nan=False,
    )


# =============================================================================
# LEDGER MODELS
# =============================================================================

class Transaction(FinanceModel):
    """
    A single income or expense entry.

    Created by the user or materialized by the recurring engine.
    Never edited after creation, only deleted.
    """

    id: str = Field(
        default_factory=new_id,
        description="Unique transaction ID"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    amount: float = Field(
        ...,
        ge=0,
        description="Unsigned magnitude; direction comes from `type`"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    # Kept verbatim: materialized entries end in " (recurring)" even when
    # the schedule has no description
    description: Annotated[str, StringConstraints(strip_whitespace=False)] = Field(
        default="",
        max_length=DESCRIPTION_MAX_LENGTH,
    )
    type: TransactionType
    tags: Optional[list[str]] = None
    currency: Optional[str] = Field(
        default=None,
        description="Currency code; the document default applies when absent"
    )
    recurring: Optional[bool] = Field(
        default=None,
        description="Set when materialized from a recurring schedule"
    )
    recurring_frequency: Optional[Frequency] = None

    @field_validator('currency')
    @classmethod
    def normalize_currency(cls, v: Optional[str]) -> Optional[str]:
        return normalize_currency_code(v)

    @property
    def signed_amount(self) -> float:
        """Amount with income positive and expenses negative."""
        return self.amount if self.type == TransactionType.INCOME else -self.amount


class Budget(FinanceModel):
    """
    Monthly spending limit for one category.

    DESIGN DECISION: spent / remaining / percent used are NOT stored.
    They are derived from the current month's transactions at read
    time so they can never go stale.
    """

    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    limit: float = Field(
        ...,
        gt=0,
        description="Monthly limit"
    )
    alert_threshold: float = Field(
        default=DEFAULT_ALERT_THRESHOLD,
        ge=0,
        le=100,
        description="Percentage of the limit (0-100) at which an alert is raised"
    )


class Account(FinanceModel):
    """A money container. Only the seeded main account is used today."""

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType = AccountType.CHECKING
    balance: float = 0.0
    currency: str = "USD"


# =============================================================================
# RECURRING & GOALS
# =============================================================================

class RecurringTransaction(FinanceModel):
    """
    A schedule that materializes transactions.

    `next_due` is the only scheduling cursor: it always points at the
    next occurrence that has not been materialized yet.
    """

    id: str = Field(default_factory=new_id)
    amount: float = Field(
        ...,
        ge=0,
        description="Stored as an absolute magnitude"
    )
    type: TransactionType
    category: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    frequency: Frequency
    start_date: dt.date
    next_due: dt.date
    last_processed: Optional[dt.date] = None
    active: bool = Field(
        default=True,
        description="Paused schedules are skipped but keep their cursor"
    )
    currency: Optional[str] = None

    @field_validator('currency')
    @classmethod
    def normalize_currency(cls, v: Optional[str]) -> Optional[str]:
        return normalize_currency_code(v)


class GoalContribution(FinanceModel):
    """One ledger entry of a savings goal. Negative amounts are withdrawals."""

    id: str = Field(default_factory=new_id)
    amount: float
    date: dt.date
    note: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)


class SavingsGoal(FinanceModel):
    """
    A savings target with its own contribution ledger.

    CRITICAL: `current_amount` must always equal the sum of the
    contribution amounts. Only the goal engine mutates either.
    """

    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1, max_length=200)
    target_amount: float = Field(..., gt=0)
    current_amount: float = 0.0
    deadline: Optional[dt.date] = None
    created_at: dt.datetime = Field(default_factory=utcnow)
    currency: str = "USD"
    contributions: list[GoalContribution] = Field(default_factory=list)

    @field_validator('created_at')
    @classmethod
    def created_at_utc(cls, v: dt.datetime) -> dt.datetime:
        return ensure_utc(v)

    @property
    def ledger_total(self) -> float:
        """Sum of the contribution ledger, in ledger order."""
        return sum(c.amount for c in self.contributions)


# =============================================================================
# ROOT DOCUMENT
# =============================================================================

class ExchangeRateCache(FinanceModel):
    """USD-based rates as last fetched from the rate provider."""

    rates: dict[str, float]
    last_updated: Optional[dt.datetime] = None
    base: Optional[str] = None

    @field_validator('last_updated')
    @classmethod
    def last_updated_utc(cls, v: Optional[dt.datetime]) -> Optional[dt.datetime]:
        return ensure_utc(v)


class FinanceDocument(FinanceModel):
    """
    The whole persisted state of one deployment.

    There is exactly one of these; it is loaded, handed to the engines,
    and saved back in full.
    """

    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    accounts: list[Account] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    recurring_transactions: list[RecurringTransaction] = Field(default_factory=list)
    savings_goals: list[SavingsGoal] = Field(default_factory=list)
    default_currency: str = "USD"
    exchange_rates: Optional[ExchangeRateCache] = None
    last_updated: dt.datetime = Field(default_factory=utcnow)

    @field_validator('default_currency')
    @classmethod
    def normalize_default_currency(cls, v: str) -> str:
        return normalize_currency_code(v) or "USD"

    @field_validator('last_updated')
    @classmethod
    def last_updated_utc(cls, v: dt.datetime) -> dt.datetime:
        return ensure_utc(v)

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize with camelCase keys, as stored on disk."""
        return self.model_dump_json(by_alias=True, indent=indent)


def create_empty_document() -> FinanceDocument:
    """Fresh document with the seeded main account and default categories."""
    return FinanceDocument(
        accounts=[
            Account(
                id="default",
                name="Main Account",
                type=AccountType.CHECKING,
                balance=0.0,
                currency="USD",
            )
        ],
        categories=list(DEFAULT_CATEGORIES),
        default_currency="USD",
    )

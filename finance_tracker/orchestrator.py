"""
Main Orchestrator for Finance Tracker

This module ties together all the components and defines the
load -> compute -> save cycle every adapter (HTTP API, assistant tools,
CLI) goes through.

DESIGN DECISION: The orchestrator enforces the boundaries:
- The engines never do I/O; only this class loads and saves
- One load per call, one save per successful mutation
- A failed operation or a no-op recurring pass is never persisted
- Every mutation and every rejection is audited

There is no locking. Two trackers sharing one storage race, and the
last full save wins.
"""

from datetime import date, datetime
from typing import Callable, Optional

from pydantic import ValidationError

from finance_tracker.analytics import (
    analyze_spending,
    check_budget_alerts,
    generate_insights,
    get_budget_statuses,
    suggest_category,
)
from finance_tracker.audit import AuditLogger, get_logger
from finance_tracker.config import get_settings
from finance_tracker.currency import (
    convert_currency,
    format_insight,
    get_balance_in_currency,
    get_exchange_rates,
    get_rates_if_stale,
    get_supported_currencies,
    get_transactions_in_currency,
    set_default_currency,
)
from finance_tracker.export import (
    export_category_breakdown_csv,
    export_monthly_summary_csv,
    export_tax_summary_csv,
    export_transactions_csv,
)
from finance_tracker.goals import (
    add_contribution,
    add_goal,
    create_goal,
    delete_goal,
    describe_changes,
    get_goals_summary,
    get_goals_with_progress,
    update_goal,
    withdraw_from_goal,
)
from finance_tracker.ledger import (
    add_transaction,
    create_transaction,
    delete_budget,
    delete_transaction,
    filter_transactions,
    get_recent_transactions,
    set_budget,
)
from finance_tracker.models.audit import AuditEvent, AuditEventBuilder
from finance_tracker.models.finance import (
    DEFAULT_ALERT_THRESHOLD,
    FinanceDocument,
    Frequency,
    RecurringTransaction,
    Transaction,
    TransactionType,
)
from finance_tracker.models.results import (
    BalanceInCurrency,
    BudgetResult,
    BudgetStatus,
    ConversionResult,
    CurrencyInfo,
    Dashboard,
    GoalProgress,
    GoalResult,
    GoalsSummary,
    Insight,
    OperationResult,
    RecurringProcessingResult,
    RecurringResult,
    SpendingAnalysis,
    TransactionResult,
    TransactionsInCurrency,
    UpcomingRecurring,
)
from finance_tracker.recurring import (
    add_recurring,
    create_recurring_transaction,
    delete_recurring_transaction,
    get_upcoming_recurring,
    process_recurring_transactions,
    toggle_recurring_transaction,
)
from finance_tracker.services.rates import ExchangeRateApiProvider, RateProviderInterface
from finance_tracker.services.storage import (
    FinanceStorageInterface,
    JsonFileStorage,
    calculate_balance,
)


DASHBOARD_GOAL_COUNT = 3
DASHBOARD_UPCOMING_COUNT = 5


class FinanceTracker:
    """
    Facade over the finance document.

    Owns the storage, the rate provider and the audit logger. Every
    public method is one full request: it loads the document, runs one
    engine operation and, if that operation changed something, saves.

    Storage write failures (StorageError) propagate to the caller.
    Everything else comes back as a result value.
    """

    def __init__(
        self,
        storage: Optional[FinanceStorageInterface] = None,
        rate_provider: Optional[RateProviderInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._audit_logger = audit_logger or AuditLogger()
        self._storage = storage or JsonFileStorage(audit_logger=self._audit_logger)
        self._rate_provider = rate_provider or ExchangeRateApiProvider()
        self._settings = get_settings().app
        self._logger = get_logger(__name__)

    # =========================================================================
    # PLUMBING
    # =========================================================================

    def load(self) -> FinanceDocument:
        return self._storage.load()

    def _commit(
        self,
        operation: str,
        document: FinanceDocument,
        result: OperationResult,
        event: Optional[Callable[[], AuditEvent]] = None,
        entity_id: Optional[str] = None,
    ):
        """Persist and audit a successful result; audit a failed one."""
        if not result.success:
            self._audit_logger.log_rejected(
                operation=operation,
                failure=result.failure.value,
                error_message=result.error_message,
                entity_id=entity_id,
            )
            return result

        self._storage.save(document)
        if event is not None:
            self._audit_logger.log(event())
        return result

    def _reject_invalid(self, operation: str, result_type, error: ValidationError):
        result = result_type.from_validation_error(error)
        self._audit_logger.log_rejected(
            operation=operation,
            failure=result.failure.value,
            error_message=result.error_message,
        )
        return result

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def add_transaction(
        self,
        amount: float,
        type: TransactionType,
        description: str = "",
        category: Optional[str] = None,
        transaction_date: Optional[date] = None,
        tags: Optional[list[str]] = None,
        currency: Optional[str] = None,
        today: Optional[date] = None,
    ) -> TransactionResult:
        """
        Record a transaction.

        The result carries the budget alert for the transaction's
        category, if the new spend triggered one.
        """
        try:
            transaction = create_transaction(
                amount=amount,
                type=type,
                description=description,
                category=category,
                transaction_date=transaction_date,
                tags=tags,
                currency=currency,
                today=today,
            )
        except ValidationError as e:
            return self._reject_invalid("add_transaction", TransactionResult, e)

        document, result = add_transaction(self.load(), transaction, today=today)
        return self._commit(
            "add_transaction",
            document,
            result,
            lambda: AuditEventBuilder.transaction_added(
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=transaction.amount,
                category=transaction.category,
            ),
        )

    def delete_transaction(self, transaction_id: str) -> TransactionResult:
        document, result = delete_transaction(self.load(), transaction_id)
        return self._commit(
            "delete_transaction",
            document,
            result,
            lambda: AuditEventBuilder.transaction_deleted(transaction_id),
            entity_id=transaction_id,
        )

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
        type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        return filter_transactions(self.load(), start_date, end_date, category, type)

    def recent_transactions(self, limit: int = 5, today: Optional[date] = None) -> list[Transaction]:
        return get_recent_transactions(self.load(), limit=limit, today=today)

    def categories(self) -> list[str]:
        return list(self.load().categories)

    def suggest_category(self, description: str) -> str:
        return suggest_category(description)

    # =========================================================================
    # BUDGETS & ANALYTICS
    # =========================================================================

    def set_budget(
        self,
        category: str,
        limit: float,
        alert_threshold: float = DEFAULT_ALERT_THRESHOLD,
    ) -> BudgetResult:
        try:
            document, result = set_budget(self.load(), category, limit, alert_threshold)
        except ValidationError as e:
            return self._reject_invalid("set_budget", BudgetResult, e)

        return self._commit(
            "set_budget",
            document,
            result,
            lambda: AuditEventBuilder.budget_set(
                category=result.budget.category,
                limit=result.budget.limit,
                alert_threshold=result.budget.alert_threshold,
            ),
        )

    def delete_budget(self, category: str) -> BudgetResult:
        document, result = delete_budget(self.load(), category)
        return self._commit(
            "delete_budget",
            document,
            result,
            lambda: AuditEventBuilder.budget_deleted(category),
            entity_id=category,
        )

    def budget_statuses(self, today: Optional[date] = None) -> list[BudgetStatus]:
        return get_budget_statuses(self.load(), today)

    def budget_alerts(self, today: Optional[date] = None) -> list[Insight]:
        return check_budget_alerts(self.load(), today)

    def spending_analysis(self, today: Optional[date] = None) -> SpendingAnalysis:
        return analyze_spending(self.load(), today)

    def insights(self, today: Optional[date] = None) -> list[Insight]:
        return generate_insights(self.load(), today)

    def formatted_insights(self, today: Optional[date] = None) -> list[str]:
        """Insight messages with amounts shown in the default currency."""
        document = self.load()
        rates = get_exchange_rates(document)
        return [
            format_insight(insight, currency=document.default_currency, rates=rates)
            for insight in generate_insights(document, today)
        ]

    # =========================================================================
    # RECURRING
    # =========================================================================

    def add_recurring(
        self,
        amount: float,
        type: TransactionType,
        category: str,
        description: str,
        frequency: Frequency,
        start_date: Optional[date] = None,
        currency: Optional[str] = None,
        today: Optional[date] = None,
    ) -> RecurringResult:
        try:
            recurring = create_recurring_transaction(
                amount=amount,
                type=type,
                category=category,
                description=description,
                frequency=frequency,
                start_date=start_date,
                currency=currency,
                today=today,
            )
        except ValidationError as e:
            return self._reject_invalid("add_recurring", RecurringResult, e)

        document, result = add_recurring(self.load(), recurring)
        return self._commit(
            "add_recurring",
            document,
            result,
            lambda: AuditEventBuilder.recurring_created(
                recurring_id=recurring.id,
                frequency=recurring.frequency.value,
                next_due=recurring.next_due.isoformat(),
            ),
        )

    def process_recurring(self, today: Optional[date] = None) -> RecurringProcessingResult:
        """Materialize everything due. Saves only when something was created."""
        document, result = process_recurring_transactions(self.load(), today)

        if result.processed:
            self._storage.save(document)
            self._audit_logger.log(AuditEventBuilder.recurring_processed(
                processed=result.processed,
                transaction_ids=[t.id for t in result.transactions],
            ))
        else:
            self._logger.debug("recurring_nothing_due")
        return result

    def toggle_recurring(self, recurring_id: str, active: bool) -> RecurringResult:
        document, result = toggle_recurring_transaction(self.load(), recurring_id, active)
        return self._commit(
            "toggle_recurring",
            document,
            result,
            lambda: AuditEventBuilder.recurring_toggled(recurring_id, active),
            entity_id=recurring_id,
        )

    def delete_recurring(self, recurring_id: str) -> RecurringResult:
        document, result = delete_recurring_transaction(self.load(), recurring_id)
        return self._commit(
            "delete_recurring",
            document,
            result,
            lambda: AuditEventBuilder.recurring_deleted(recurring_id),
            entity_id=recurring_id,
        )

    def recurring_transactions(self) -> list[RecurringTransaction]:
        return list(self.load().recurring_transactions)

    def upcoming_recurring(
        self,
        horizon_days: Optional[int] = None,
        today: Optional[date] = None,
    ) -> list[UpcomingRecurring]:
        if horizon_days is None:
            horizon_days = self._settings.upcoming_horizon_days
        return get_upcoming_recurring(self.load(), horizon_days=horizon_days, today=today)

    # =========================================================================
    # GOALS
    # =========================================================================

    def add_goal(
        self,
        name: str,
        target_amount: float,
        deadline: Optional[date] = None,
        currency: str = "USD",
        now: Optional[datetime] = None,
    ) -> GoalResult:
        try:
            goal = create_goal(name, target_amount, deadline=deadline, currency=currency, now=now)
        except ValidationError as e:
            return self._reject_invalid("add_goal", GoalResult, e)

        document, result = add_goal(self.load(), goal)
        return self._commit(
            "add_goal",
            document,
            result,
            lambda: AuditEventBuilder.goal_created(goal.id, goal.name, goal.target_amount),
        )

    def contribute(
        self,
        goal_id: str,
        amount: float,
        note: Optional[str] = None,
        today: Optional[date] = None,
    ) -> GoalResult:
        document, result = add_contribution(self.load(), goal_id, amount, note=note, today=today)
        return self._commit(
            "add_contribution",
            document,
            result,
            lambda: AuditEventBuilder.goal_contribution(goal_id, amount, result.goal.current_amount),
            entity_id=goal_id,
        )

    def withdraw(
        self,
        goal_id: str,
        amount: float,
        note: Optional[str] = None,
        today: Optional[date] = None,
    ) -> GoalResult:
        document, result = withdraw_from_goal(self.load(), goal_id, amount, note=note, today=today)
        return self._commit(
            "withdraw_from_goal",
            document,
            result,
            lambda: AuditEventBuilder.goal_withdrawal(goal_id, amount, result.goal.current_amount),
            entity_id=goal_id,
        )

    def update_goal(
        self,
        goal_id: str,
        name: Optional[str] = None,
        target_amount: Optional[float] = None,
        deadline: Optional[date] = None,
    ) -> GoalResult:
        document, result = update_goal(
            self.load(), goal_id, name=name, target_amount=target_amount, deadline=deadline
        )
        return self._commit(
            "update_goal",
            document,
            result,
            lambda: AuditEventBuilder.goal_updated(
                goal_id, describe_changes(name, target_amount, deadline)
            ),
            entity_id=goal_id,
        )

    def delete_goal(self, goal_id: str) -> GoalResult:
        document, result = delete_goal(self.load(), goal_id)
        return self._commit(
            "delete_goal",
            document,
            result,
            lambda: AuditEventBuilder.goal_deleted(goal_id),
            entity_id=goal_id,
        )

    def goals_with_progress(self, today: Optional[date] = None) -> list[GoalProgress]:
        return get_goals_with_progress(self.load(), today)

    def goals_summary(self) -> GoalsSummary:
        return get_goals_summary(self.load())

    # =========================================================================
    # CURRENCY
    # =========================================================================

    async def refresh_exchange_rates(self, now: Optional[datetime] = None) -> dict[str, float]:
        """
        Usable rates, fetching new ones when the cache is stale.

        Never fails because of the rate provider. The document is saved
        only when a fetch succeeded.
        """
        document = self.load()
        updated, rates = await get_rates_if_stale(
            document,
            self._rate_provider,
            now=now,
            audit_logger=self._audit_logger,
        )
        if updated is not document:
            self._storage.save(updated)
        return rates

    def exchange_rates(self) -> dict[str, float]:
        return get_exchange_rates(self.load())

    def convert(self, amount: float, from_currency: str, to_currency: str) -> ConversionResult:
        """Convert with the cached rates, or the defaults when there are none."""
        return convert_currency(amount, from_currency, to_currency, get_exchange_rates(self.load()))

    def set_default_currency(self, currency: str) -> OperationResult:
        document, result = set_default_currency(self.load(), currency)
        return self._commit(
            "set_default_currency",
            document,
            result,
            lambda: AuditEventBuilder.default_currency_changed(document.default_currency),
        )

    def balance_in_currency(self, currency: Optional[str] = None) -> BalanceInCurrency:
        document = self.load()
        return get_balance_in_currency(document, currency or document.default_currency)

    def transactions_in_currency(self, currency: str) -> TransactionsInCurrency:
        return get_transactions_in_currency(self.load(), currency)

    def supported_currencies(self) -> list[CurrencyInfo]:
        return get_supported_currencies()

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[str] = None,
        type: Optional[TransactionType] = None,
    ) -> str:
        return export_transactions_csv(self.load(), start_date, end_date, category, type)

    def export_monthly_summary(self, year: Optional[int] = None, today: Optional[date] = None) -> str:
        return export_monthly_summary_csv(self.load(), year, today=today)

    def export_category_breakdown(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> str:
        return export_category_breakdown_csv(self.load(), start_date, end_date)

    def export_tax_summary(self, year: int) -> str:
        return export_tax_summary_csv(self.load(), year)

    # =========================================================================
    # DASHBOARD
    # =========================================================================

    def dashboard(self, today: Optional[date] = None) -> Dashboard:
        """Everything the landing page shows, computed from a single load."""
        today = today or date.today()
        document = self.load()
        analysis = analyze_spending(document, today)

        upcoming = get_upcoming_recurring(
            document,
            horizon_days=self._settings.dashboard_upcoming_days,
            today=today,
        )

        return Dashboard(
            balance=calculate_balance(document),
            monthly_income=analysis.total_income,
            monthly_expenses=analysis.total_expenses,
            savings=analysis.net_savings,
            top_categories=analysis.top_categories,
            spending_by_category=analysis.by_category,
            insights=generate_insights(document, today),
            budgets=get_budget_statuses(document, today),
            goals=get_goals_with_progress(document, today)[:DASHBOARD_GOAL_COUNT],
            upcoming_recurring=upcoming[:DASHBOARD_UPCOMING_COUNT],
            recent_transactions=get_recent_transactions(document, today=today),
        )

"""
Audit Models for Finance Tracker

Every mutation of the finance document is described by an AuditEvent.
This provides:
1. Traceability of what changed and when
2. Debugging information when numbers look wrong
3. A single place that decides log severity

DESIGN DECISION: Events are written to the structured log only. The
finance document stays the single source of truth; nothing here is
persisted alongside it.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"
    BUDGET_SET = "budget_set"
    BUDGET_DELETED = "budget_deleted"

    # Recurring
    RECURRING_CREATED = "recurring_created"
    RECURRING_TOGGLED = "recurring_toggled"
    RECURRING_DELETED = "recurring_deleted"
    RECURRING_PROCESSED = "recurring_processed"

    # Goals
    GOAL_CREATED = "goal_created"
    GOAL_UPDATED = "goal_updated"
    GOAL_DELETED = "goal_deleted"
    GOAL_CONTRIBUTION = "goal_contribution"
    GOAL_WITHDRAWAL = "goal_withdrawal"

    # Currency
    DEFAULT_CURRENCY_CHANGED = "default_currency_changed"
    RATES_REFRESHED = "rates_refreshed"
    RATES_FALLBACK = "rates_fallback"

    # Failures
    OPERATION_REJECTED = "operation_rejected"
    STORAGE_RECOVERED = "storage_recovered"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant change to the finance document creates one.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'goal', 'recurring')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(txn_id, "expense", 12.5, "Groceries")
        event = AuditEventBuilder.goal_contribution(goal_id, 100.0, 600.0)
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: float,
        category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Added {transaction_type} of {amount:.2f} in {category}",
            details={
                "type": transaction_type,
                "amount": amount,
                "category": category,
            },
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
        )

    @staticmethod
    def budget_set(category: str, limit: float, alert_threshold: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            entity_type="budget",
            entity_id=category,
            description=f"Budget for {category} set to {limit:.2f}",
            details={
                "limit": limit,
                "alert_threshold": alert_threshold,
            },
        )

    @staticmethod
    def budget_deleted(category: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_DELETED,
            entity_type="budget",
            entity_id=category,
            description=f"Budget for {category} deleted",
        )

    @staticmethod
    def recurring_created(recurring_id: str, frequency: str, next_due: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECURRING_CREATED,
            entity_type="recurring",
            entity_id=recurring_id,
            description=f"Recurring transaction created ({frequency})",
            details={
                "frequency": frequency,
                "next_due": next_due,
            },
        )

    @staticmethod
    def recurring_toggled(recurring_id: str, active: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECURRING_TOGGLED,
            entity_type="recurring",
            entity_id=recurring_id,
            description="Recurring transaction resumed" if active else "Recurring transaction paused",
            details={"active": active},
        )

    @staticmethod
    def recurring_deleted(recurring_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECURRING_DELETED,
            entity_type="recurring",
            entity_id=recurring_id,
            description="Recurring transaction deleted",
        )

    @staticmethod
    def recurring_processed(processed: int, transaction_ids: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECURRING_PROCESSED,
            entity_type="recurring",
            description=f"Materialized {processed} recurring transaction(s)",
            details={
                "processed": processed,
                "transaction_ids": transaction_ids,
            },
        )

    @staticmethod
    def goal_created(goal_id: str, name: str, target_amount: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_CREATED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Savings goal created: {name}",
            details={"target_amount": target_amount},
        )

    @staticmethod
    def goal_updated(goal_id: str, changes: dict[str, Any]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_UPDATED,
            entity_type="goal",
            entity_id=goal_id,
            description="Savings goal updated",
            details=changes,
        )

    @staticmethod
    def goal_deleted(goal_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_DELETED,
            entity_type="goal",
            entity_id=goal_id,
            description="Savings goal deleted",
        )

    @staticmethod
    def goal_contribution(goal_id: str, amount: float, current_amount: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_CONTRIBUTION,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Contributed {amount:.2f} to goal",
            details={
                "amount": amount,
                "current_amount": current_amount,
            },
        )

    @staticmethod
    def goal_withdrawal(goal_id: str, amount: float, current_amount: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_WITHDRAWAL,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Withdrew {amount:.2f} from goal",
            details={
                "amount": amount,
                "current_amount": current_amount,
            },
        )

    @staticmethod
    def default_currency_changed(currency: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEFAULT_CURRENCY_CHANGED,
            description=f"Default currency set to {currency}",
            details={"currency": currency},
        )

    @staticmethod
    def rates_refreshed(currency_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RATES_REFRESHED,
            description=f"Exchange rates refreshed ({currency_count} currencies)",
            details={"currency_count": currency_count},
        )

    @staticmethod
    def rates_fallback(source: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RATES_FALLBACK,
            severity=AuditSeverity.WARNING,
            description=f"Using {source} exchange rates",
            details={"source": source},
        )

    @staticmethod
    def operation_rejected(
        operation: str,
        failure: str,
        error_message: Optional[str],
        entity_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_id=entity_id,
            description=f"{operation} rejected: {failure}",
            details={"operation": operation, "failure": failure},
            error_message=error_message,
        )

    @staticmethod
    def storage_recovered(path: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_RECOVERED,
            severity=AuditSeverity.WARNING,
            description="Unreadable finance document replaced with an empty one",
            details={"path": path},
            error_message=error_message,
        )

    @staticmethod
    def external_service_error(service: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
        )

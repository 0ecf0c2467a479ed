"""
Audit Logger

DESIGN DECISION: Every mutation of the finance document is logged.
This provides:
1. Traceability of changes to a single, fully-rewritten document
2. Debugging capability for derived numbers
3. Visibility into silent recoveries (corrupt storage, rate fallbacks)

The audit logger:
- Never raises; a logging failure must not fail the operation
- Picks the log level from the event severity
"""

import logging
from typing import Optional

import structlog

from finance_tracker.config import get_settings
from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO") -> None:
    """Configure stdlib logging and structlog for JSON output."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(get_settings().app.log_level)


def get_logger(name: Optional[str] = None):
    """Structured logger bound to a module name."""
    return structlog.get_logger(name)


class AuditLogger:
    """
    Central audit logging service.

    Writes AuditEvents to the structured log at a level matching
    their severity.
    """

    def __init__(self, logger=None):
        self._logger = logger or get_logger("finance_tracker.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            logging.getLogger(__name__).error("audit logging failed: %s", e)
            return False

        return True

    def log_rejected(
        self,
        operation: str,
        failure: str,
        error_message: Optional[str],
        entity_id: Optional[str] = None,
    ) -> None:
        """Log an operation that returned a failure result."""
        self.log(AuditEventBuilder.operation_rejected(
            operation=operation,
            failure=failure,
            error_message=error_message,
            entity_id=entity_id,
        ))

    def log_external_service_error(self, service: str, error_message: str) -> None:
        self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
        ))

"""
Audit Logger

DESIGN DECISION: Every state mutation in the system is logged.
This provides:
1. Traceability of every number shown to the user
2. Debugging capability when stored state had to be repaired
3. A visible record of days lost to multi-day gaps

The audit logger:
- Is synchronous, like every other operation in the tracker
- Gracefully handles failures (doesn't break the tracker if logging fails)
- Supports correlation IDs to trace the events of one activation
"""

import logging
from datetime import date
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from daily_spend.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from daily_spend.services.storage.interface import AuditStorageInterface


# Configure structlog for local logging
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


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    level_name = level.upper()
    logging.basicConfig(format="%(message)s", level=level_name)
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(level_name)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("daily_spend.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_state_loaded(
        self,
        last_opened: date,
        expense_count: int,
        history_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful state load."""
        self.log(AuditEventBuilder.state_loaded(
            last_opened=last_opened,
            expense_count=expense_count,
            history_count=history_count,
            correlation_id=correlation_id,
        ))

    def log_state_recovered(
        self,
        problems: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log that stored state needed repairs."""
        self.log(AuditEventBuilder.state_recovered(
            problems=problems,
            correlation_id=correlation_id,
        ))

    def log_day_rolled_over(
        self,
        previous: date,
        current: date,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.day_rolled_over(
            previous=previous,
            current=current,
            correlation_id=correlation_id,
        ))

    def log_day_archived(
        self,
        day: date,
        spent: float,
        budget: float,
        status: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.day_archived(
            day=day,
            spent=spent,
            budget=budget,
            status=status,
            correlation_id=correlation_id,
        ))

    def log_days_skipped(
        self,
        previous: date,
        current: date,
        skipped: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log unopened days that left no history record."""
        self.log(AuditEventBuilder.days_skipped(
            previous=previous,
            current=current,
            skipped=skipped,
            correlation_id=correlation_id,
        ))

    def log_history_trimmed(
        self,
        dropped_day: date,
        limit: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.history_trimmed(
            dropped_day=dropped_day,
            limit=limit,
            correlation_id=correlation_id,
        ))

    def log_expense_added(
        self,
        expense_id: str,
        amount: float,
        note: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_added(
            expense_id=expense_id,
            amount=amount,
            note=note,
            correlation_id=correlation_id,
        ))

    def log_expense_rejected(
        self,
        raw_amount: Any,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.expense_rejected(
            raw_amount=raw_amount,
            message=message,
            correlation_id=correlation_id,
        ))

    def log_budget_changed(
        self,
        old_budget: float,
        new_budget: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.budget_changed(
            old_budget=old_budget,
            new_budget=new_budget,
            correlation_id=correlation_id,
        ))

    def log_budget_rejected(
        self,
        raw_value: Any,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.budget_rejected(
            raw_value=raw_value,
            message=message,
            correlation_id=correlation_id,
        ))

    def log_ledger_reset(
        self,
        expenses_cleared: int,
        history_cleared: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.ledger_reset(
            expenses_cleared=expenses_cleared,
            history_cleared=history_cleared,
            correlation_id=correlation_id,
        ))

    def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a storage backend failure."""
        self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    The tracker creates one per activation and passes it through
    every operation until the next activation.
    """
    return uuid4()

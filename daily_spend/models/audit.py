"""
Audit Models for Daily Spend

Every state mutation, rejection and recovery is logged for audit purposes.
This provides:
1. Traceability of how today's numbers came to be
2. Debugging information when stored state had to be healed
3. A record of days lost to multi-day gaps

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of an activation and every user operation has its own type.
    """
    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_RECOVERED = "state_recovered"
    STORAGE_ERROR = "storage_error"

    # Day boundary
    DAY_ROLLED_OVER = "day_rolled_over"
    DAY_ARCHIVED = "day_archived"
    DAYS_SKIPPED = "days_skipped"
    HISTORY_TRIMMED = "history_trimmed"

    # User operations
    EXPENSE_ADDED = "expense_added"
    EXPENSE_REJECTED = "expense_rejected"
    BUDGET_CHANGED = "budget_changed"
    BUDGET_REJECTED = "budget_rejected"
    LEDGER_RESET = "ledger_reset"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'history', 'state')"
    )
    entity_id: Optional[str] = None

    # Correlation - all events of one activation share an id
    correlation_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

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
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, amount, note)
        event = AuditEventBuilder.day_archived(day, spent, budget, status)
    """

    @staticmethod
    def state_loaded(
        last_opened: date,
        expense_count: int,
        history_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type="state",
            correlation_id=correlation_id,
            description=f"State loaded (last opened {last_opened.isoformat()})",
            details={
                "last_opened_date": last_opened.isoformat(),
                "expense_count": expense_count,
                "history_count": history_count,
            },
        )

    @staticmethod
    def state_recovered(
        problems: list[str],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_RECOVERED,
            severity=AuditSeverity.WARNING,
            entity_type="state",
            correlation_id=correlation_id,
            description=f"Stored state was repaired ({len(problems)} problems)",
            details={"problems": problems},
        )

    @staticmethod
    def day_rolled_over(
        previous: date,
        current: date,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DAY_ROLLED_OVER,
            entity_type="state",
            correlation_id=correlation_id,
            description=f"New day: {previous.isoformat()} -> {current.isoformat()}",
            details={
                "previous_date": previous.isoformat(),
                "current_date": current.isoformat(),
            },
        )

    @staticmethod
    def day_archived(
        day: date,
        spent: float,
        budget: float,
        status: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DAY_ARCHIVED,
            entity_type="history",
            entity_id=day.isoformat(),
            correlation_id=correlation_id,
            description=f"Archived {day.isoformat()}: spent {spent:.2f} of {budget:.2f} ({status})",
            details={
                "spent": spent,
                "budget": budget,
                "status": status,
            },
        )

    @staticmethod
    def days_skipped(
        previous: date,
        current: date,
        skipped: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DAYS_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="history",
            correlation_id=correlation_id,
            description=f"{skipped} unopened day(s) between {previous.isoformat()} and {current.isoformat()} were not archived",
            details={
                "previous_date": previous.isoformat(),
                "current_date": current.isoformat(),
                "skipped_days": skipped,
            },
        )

    @staticmethod
    def history_trimmed(
        dropped_day: date,
        limit: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HISTORY_TRIMMED,
            severity=AuditSeverity.DEBUG,
            entity_type="history",
            entity_id=dropped_day.isoformat(),
            correlation_id=correlation_id,
            description=f"History limit {limit} reached, dropped {dropped_day.isoformat()}",
            details={"limit": limit},
        )

    @staticmethod
    def expense_added(
        expense_id: str,
        amount: float,
        note: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense added: {note[:80]} - {amount:.2f}",
            details={
                "amount": amount,
                "note": note,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_rejected(
        raw_amount: Any,
        message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            correlation_id=correlation_id,
            description="Expense rejected: invalid amount",
            details={"amount": repr(raw_amount)},
            error_message=message,
            is_user_action=True,
        )

    @staticmethod
    def budget_changed(
        old_budget: float,
        new_budget: float,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_CHANGED,
            entity_type="state",
            correlation_id=correlation_id,
            description=f"Budget changed: {old_budget:.2f} -> {new_budget:.2f}",
            details={
                "old_budget": old_budget,
                "new_budget": new_budget,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_rejected(
        raw_value: Any,
        message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="state",
            correlation_id=correlation_id,
            description="Budget change rejected: invalid value",
            details={"value": repr(raw_value)},
            error_message=message,
            is_user_action=True,
        )

    @staticmethod
    def ledger_reset(
        expenses_cleared: int,
        history_cleared: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_RESET,
            severity=AuditSeverity.WARNING,
            entity_type="state",
            correlation_id=correlation_id,
            description="All expenses and history cleared",
            details={
                "expenses_cleared": expenses_cleared,
                "history_cleared": history_cleared,
            },
            is_user_action=True,
        )

    @staticmethod
    def storage_error(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="state",
            correlation_id=correlation_id,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )

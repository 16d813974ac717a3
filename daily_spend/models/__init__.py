"""
Data Models Package

This package contains all Pydantic models used in the Daily Spend system.
All data flowing through the system must conform to these schemas.
"""

from daily_spend.models.ledger import (
    DEFAULT_NOTE,
    MAX_AMOUNT,
    MAX_DAILY_TOTAL,
    BudgetTier,
    DayStatus,
    Expense,
    HistoryEntry,
    HistoryView,
    OperationResult,
    RejectionReason,
    RolloverOutcome,
    TodayMetrics,
    TodayView,
    TrackerState,
    parse_calendar_date,
)
from daily_spend.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DEFAULT_NOTE",
    "MAX_AMOUNT",
    "MAX_DAILY_TOTAL",
    "BudgetTier",
    "DayStatus",
    "Expense",
    "HistoryEntry",
    "HistoryView",
    "OperationResult",
    "RejectionReason",
    "RolloverOutcome",
    "TodayMetrics",
    "TodayView",
    "TrackerState",
    "parse_calendar_date",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

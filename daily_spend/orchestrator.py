"""
Main Orchestrator for Daily Spend

This module ties together all the components and defines the operations
offered to the presentation layer:
1. Activation (load → rollover)
2. Add expense / change budget / reset everything
3. Today view and history view

DESIGN DECISION: The tracker owns exactly one TrackerState value and passes
it explicitly to every component. There is no global state and no locking;
each operation runs to completion before the next one starts.

Rejected input never raises - operations return an OperationResult.
Storage failures are audited and re-raised.
"""

from datetime import datetime
from typing import Any, Callable, Optional
from uuid import UUID

from daily_spend.audit import AuditLogger, configure_logging, create_correlation_id
from daily_spend.config import StorageSettings, TrackerSettings, get_settings
from daily_spend.ledger import DayRolloverEngine, ExpenseLedger
from daily_spend.metrics import MetricsCalculator
from daily_spend.models.ledger import (
    HistoryView,
    OperationResult,
    RolloverOutcome,
    TodayView,
    TrackerState,
)
from daily_spend.services.storage import (
    AuditStorageInterface,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    LedgerStore,
    MemoryKeyValueStore,
    StorageError,
)
from daily_spend.validation import AmountValidator


class DailySpendTracker:
    """
    Orchestrates one user's daily budget.

    Flow:
    1. activate() → load stored state, repair it if needed
    2. rollover → archive the previous day if the date changed
    3. operations → mutate and persist the owned state
    4. views → derive numbers from the state that was just saved

    Any operation called before activate() activates first.
    """

    def __init__(
        self,
        store: LedgerStore,
        ledger: Optional[ExpenseLedger] = None,
        rollover_engine: Optional[DayRolloverEngine] = None,
        metrics: Optional[MetricsCalculator] = None,
        validator: Optional[AmountValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        history_limit: int = 60,
        history_view_limit: int = 7,
        now: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._validator = validator or AmountValidator()
        self._audit_logger = audit_logger
        self._now = now
        self._ledger = ledger or ExpenseLedger(
            store,
            validator=self._validator,
            audit_logger=audit_logger,
            now=now,
        )
        self._rollover = rollover_engine or DayRolloverEngine(
            store,
            history_limit=history_limit,
            audit_logger=audit_logger,
        )
        self._metrics = metrics or MetricsCalculator()
        self._history_view_limit = history_view_limit

        self._state: Optional[TrackerState] = None
        self._correlation_id: Optional[UUID] = None

    @property
    def state(self) -> TrackerState:
        """A copy of the current state; mutating it has no effect."""
        return self._require_state().model_copy(deep=True)

    @property
    def correlation_id(self) -> Optional[UUID]:
        """Id shared by all audit events since the last activation."""
        return self._correlation_id

    def activate(self) -> RolloverOutcome:
        """
        Load the stored state and run the day-boundary check.

        Call once whenever the app is opened or brought to the foreground.
        """
        self._correlation_id = create_correlation_id()

        state, problems = self._guarded("load", self._store.load_with_report)
        if self._audit_logger:
            if problems:
                self._audit_logger.log_state_recovered(
                    problems=problems,
                    correlation_id=self._correlation_id,
                )
            self._audit_logger.log_state_loaded(
                last_opened=state.last_opened_date,
                expense_count=len(state.expenses),
                history_count=len(state.history),
                correlation_id=self._correlation_id,
            )

        outcome = self._guarded(
            "rollover",
            lambda: self._rollover.rollover(state, self._now().date(), self._correlation_id),
        )
        self._state = state
        return outcome

    def add_expense(self, amount: Any, note: Optional[str] = None) -> OperationResult:
        """Record an expense for today. Invalid amounts are rejected."""
        state = self._require_state()
        return self._guarded(
            "add_expense",
            lambda: self._ledger.add(state, amount, note, correlation_id=self._correlation_id),
        )

    def set_budget(self, value: Any) -> OperationResult:
        """Replace the daily budget. NaN, infinities and values <= 0 are rejected."""
        state = self._require_state()
        budget, rejection = self._validator.check_budget(value)
        if rejection is not None:
            if self._audit_logger:
                self._audit_logger.log_budget_rejected(
                    raw_value=value,
                    message=rejection.message,
                    correlation_id=self._correlation_id,
                )
            return rejection

        old_budget = state.budget
        state.budget = budget

        def persist() -> None:
            try:
                self._store.save(state)
            except Exception:
                state.budget = old_budget
                raise

        self._guarded("set_budget", persist)

        if self._audit_logger:
            self._audit_logger.log_budget_changed(
                old_budget=old_budget,
                new_budget=budget,
                correlation_id=self._correlation_id,
            )
        return OperationResult.ok(message="Budget updated")

    def reset_all(self) -> OperationResult:
        """Clear all expenses and history. Safe to call repeatedly."""
        state = self._require_state()
        return self._guarded(
            "reset_all",
            lambda: self._ledger.reset(state, correlation_id=self._correlation_id),
        )

    def get_today_view(self) -> TodayView:
        """Spent, remaining, progress and tier for today, plus today's expenses."""
        state = self._require_state()
        today_expenses = self._ledger.query_today(state, self._now().date())
        metrics = self._metrics.compute(today_expenses, state.budget)
        return TodayView(
            spent=metrics.spent,
            remaining=metrics.remaining,
            progress_pct=metrics.progress_pct,
            tier=metrics.tier,
            today_expenses=today_expenses,
        )

    def get_history_view(self, limit: Optional[int] = None) -> HistoryView:
        """Archived days: the last `limit` for a chart and all of them for a list."""
        state = self._require_state()
        if limit is None:
            limit = self._history_view_limit
        return self._metrics.history_summary(state.history, limit=limit)

    def _require_state(self) -> TrackerState:
        if self._state is None:
            self.activate()
        return self._state

    def _guarded(self, operation: str, action: Callable[[], Any]) -> Any:
        """Run a persisting action, auditing storage failures before re-raising."""
        try:
            return action()
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_storage_error(
                    operation=operation,
                    error_message=str(e),
                    correlation_id=self._correlation_id,
                )
            raise


def create_tracker(
    tracker_settings: Optional[TrackerSettings] = None,
    storage_settings: Optional[StorageSettings] = None,
    kv_store: Optional[KeyValueStoreInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
    now: Callable[[], datetime] = datetime.now,
) -> DailySpendTracker:
    """
    Factory function to create a fully wired tracker.

    Args:
        tracker_settings: Budget/history rules (defaults from environment)
        storage_settings: Backend selection (defaults from environment)
        kv_store: Use this key-value store instead of the configured backend
        audit_storage: Optional persistent sink for audit events
        now: Clock, injectable for tests

    Returns:
        A DailySpendTracker that has not been activated yet
    """
    settings = get_settings()
    tracker_settings = tracker_settings or settings.tracker
    storage_settings = storage_settings or settings.storage
    configure_logging(settings.app.log_level)

    if kv_store is None:
        if storage_settings.backend == "memory":
            kv_store = MemoryKeyValueStore()
        else:
            kv_store = JsonFileKeyValueStore(storage_settings.data_dir)

    store = LedgerStore(
        kv_store,
        key=storage_settings.state_key,
        default_budget=tracker_settings.default_budget,
        history_limit=tracker_settings.history_limit,
        today=lambda: now().date(),
    )
    audit_logger = AuditLogger(audit_storage)
    validator = AmountValidator()

    ledger = ExpenseLedger(
        store,
        validator=validator,
        audit_logger=audit_logger,
        default_note=tracker_settings.default_note,
        timestamp_format=tracker_settings.timestamp_format,
        now=now,
    )

    return DailySpendTracker(
        store,
        ledger=ledger,
        validator=validator,
        audit_logger=audit_logger,
        history_limit=tracker_settings.history_limit,
        history_view_limit=tracker_settings.history_view_limit,
        now=now,
    )

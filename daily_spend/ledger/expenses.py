"""
Expense Ledger

Owns every mutation of the expense list: adding an expense and the full
reset. Reads are plain filters over the state.

Ordering: new expenses are inserted at the front, so the list is always
most-recent-first and insertion order alone defines recency.

Each mutation is persisted before it returns. If the write fails, the
in-memory state is put back exactly as it was and the error propagates.
"""

import math
from datetime import date, datetime
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

from daily_spend.audit import AuditLogger
from daily_spend.models.ledger import (
    DEFAULT_NOTE,
    Expense,
    OperationResult,
    TrackerState,
)
from daily_spend.services.storage import LedgerStore
from daily_spend.validation import AmountValidator


class ExpenseLedger:
    """Adds, queries and clears expense records."""

    def __init__(
        self,
        store: LedgerStore,
        validator: Optional[AmountValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        default_note: str = DEFAULT_NOTE,
        timestamp_format: str = "%H:%M",
        now: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._validator = validator or AmountValidator()
        self._audit_logger = audit_logger
        self._default_note = default_note
        self._timestamp_format = timestamp_format
        self._now = now

    def add(
        self,
        state: TrackerState,
        amount: Any,
        note: Optional[str] = None,
        on_date: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> OperationResult:
        """
        Record a new expense at the front of the ledger.

        Args:
            state: The tracker state to mutate
            amount: Raw amount; must be a positive finite number
            note: Free text; blank means the default note
            on_date: Day the expense belongs to (defaults to today)

        Returns:
            OperationResult - rejected with INVALID_AMOUNT leaves state untouched
        """
        now = self._now()
        day = on_date or now.date()
        day_total = math.fsum(e.amount for e in state.expenses if e.date == day)

        value, rejection = self._validator.check_amount(amount, day_total)
        if rejection is not None:
            if self._audit_logger:
                self._audit_logger.log_expense_rejected(
                    raw_amount=amount,
                    message=rejection.message,
                    correlation_id=correlation_id,
                )
            return rejection

        expense = Expense(
            id=self._new_id(state),
            amount=value,
            note=self._resolve_note(note),
            date=day,
            timestamp=now.strftime(self._timestamp_format),
        )

        state.expenses.insert(0, expense)
        try:
            self._store.save(state)
        except Exception:
            state.expenses.pop(0)
            raise

        if self._audit_logger:
            self._audit_logger.log_expense_added(
                expense_id=expense.id,
                amount=expense.amount,
                note=expense.note,
                correlation_id=correlation_id,
            )

        return OperationResult.ok(message="Expense added", expense=expense)

    def query_today(self, state: TrackerState, current_date: date) -> list[Expense]:
        """Expenses dated `current_date`, most recent first."""
        return [expense for expense in state.expenses if expense.date == current_date]

    def reset(
        self,
        state: TrackerState,
        correlation_id: Optional[UUID] = None,
    ) -> OperationResult:
        """
        Clear all expenses and history. Budget and last-opened date are kept.

        Idempotent: resetting an already empty ledger writes nothing.
        """
        if not state.expenses and not state.history:
            return OperationResult.ok(message="Nothing to reset")

        old_expenses, old_history = state.expenses, state.history
        state.expenses = []
        state.history = []
        try:
            self._store.save(state)
        except Exception:
            state.expenses = old_expenses
            state.history = old_history
            raise

        if self._audit_logger:
            self._audit_logger.log_ledger_reset(
                expenses_cleared=len(old_expenses),
                history_cleared=len(old_history),
                correlation_id=correlation_id,
            )

        return OperationResult.ok(message="All data cleared")

    def _resolve_note(self, note: Optional[str]) -> str:
        text = str(note).strip() if note is not None else ""
        return text or self._default_note

    @staticmethod
    def _new_id(state: TrackerState) -> str:
        taken = {expense.id for expense in state.expenses}
        expense_id = uuid4().hex
        while expense_id in taken:
            expense_id = uuid4().hex
        return expense_id

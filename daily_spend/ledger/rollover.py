"""
Day Rollover Engine

Runs once per activation. When the calendar day has changed since the last
activation, the previous day is closed out into the history log.

Rules:
1. Only the day recorded in `last_opened_date` is archived. Days in between
   that were never opened leave no record (reported as `skipped_days`).
2. A day with no recorded expenses produces no history entry.
3. History keeps at most `history_limit` entries; the oldest is dropped.
4. Any change of date rolls over, including a clock that moved backwards.
"""

import math
from datetime import date
from typing import Optional
from uuid import UUID

from daily_spend.audit import AuditLogger
from daily_spend.models.ledger import (
    MAX_DAILY_TOTAL,
    HistoryEntry,
    RolloverOutcome,
    TrackerState,
)
from daily_spend.services.storage import LedgerStore


class DayRolloverEngine:
    """Detects a day change and archives the previous day."""

    def __init__(
        self,
        store: LedgerStore,
        history_limit: int = 60,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._history_limit = history_limit
        self._audit_logger = audit_logger

    @property
    def history_limit(self) -> int:
        return self._history_limit

    def rollover(
        self,
        state: TrackerState,
        current_date: date,
        correlation_id: Optional[UUID] = None,
    ) -> RolloverOutcome:
        """
        Close out the previous day if the date changed.

        Args:
            state: The tracker state to mutate
            current_date: Today's calendar date

        Returns:
            RolloverOutcome describing what was archived or dropped
        """
        previous = state.last_opened_date
        if previous == current_date:
            return RolloverOutcome(
                rolled_over=False,
                previous_date=previous,
                current_date=current_date,
            )

        past_expenses = [e for e in state.expenses if e.date == previous]
        # Rounding can land a hair above the cap the ledger already enforces
        total_spent = min(math.fsum(e.amount for e in past_expenses), MAX_DAILY_TOTAL)

        old_history = list(state.history)
        archived = None
        dropped = None
        if past_expenses or total_spent > 0:
            archived = HistoryEntry.close_day(previous, total_spent, state.budget)
            state.history.append(archived)
            if len(state.history) > self._history_limit:
                dropped = state.history.pop(0)

        state.last_opened_date = current_date
        try:
            self._store.save(state)
        except Exception:
            state.history = old_history
            state.last_opened_date = previous
            raise

        skipped = max(0, (current_date - previous).days - 1)
        outcome = RolloverOutcome(
            rolled_over=True,
            previous_date=previous,
            current_date=current_date,
            archived=archived,
            dropped=dropped,
            skipped_days=skipped,
        )
        self._audit(outcome, correlation_id)
        return outcome

    def _audit(self, outcome: RolloverOutcome, correlation_id: Optional[UUID]) -> None:
        if not self._audit_logger:
            return

        self._audit_logger.log_day_rolled_over(
            previous=outcome.previous_date,
            current=outcome.current_date,
            correlation_id=correlation_id,
        )
        if outcome.archived:
            self._audit_logger.log_day_archived(
                day=outcome.archived.date,
                spent=outcome.archived.spent,
                budget=outcome.archived.budget,
                status=outcome.archived.status.value,
                correlation_id=correlation_id,
            )
        if outcome.dropped:
            self._audit_logger.log_history_trimmed(
                dropped_day=outcome.dropped.date,
                limit=self._history_limit,
                correlation_id=correlation_id,
            )
        if outcome.skipped_days:
            self._audit_logger.log_days_skipped(
                previous=outcome.previous_date,
                current=outcome.current_date,
                skipped=outcome.skipped_days,
                correlation_id=correlation_id,
            )

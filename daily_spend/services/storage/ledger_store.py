"""
Ledger Store

Loads and saves the whole TrackerState as a single JSON blob under one key
of a KeyValueStoreInterface.

DESIGN DECISION: Loading never fails because of bad data.
A missing blob yields the default state. A malformed blob is repaired
field by field: whatever is still valid is kept, everything else falls back
to its default, and each repair is reported so it can be audited.

Backend failures (the store itself cannot be read or written) are NOT bad
data and propagate as StorageError.
"""

import json
from datetime import date
from typing import Annotated, Any, Callable, Optional

from pydantic import Field, TypeAdapter, ValidationError

from daily_spend.models.ledger import (
    MAX_AMOUNT,
    MAX_DAILY_TOTAL,
    Expense,
    HistoryEntry,
    TrackerState,
    parse_calendar_date,
)
from daily_spend.services.storage.interface import KeyValueStoreInterface


_BUDGET = TypeAdapter(Annotated[float, Field(gt=0, le=MAX_AMOUNT, allow_inf_nan=False)])
_DATE = TypeAdapter(date)

# Key written by the original browser client before lastOpenedDate existed
_LEGACY_DATE_KEY = "lastOpened"


class LedgerStore:
    """
    Persistence contract for the tracker state.

    Once `save` returns, the stored blob is canonical; callers should derive
    their views from the state they just saved.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        key: str = "dailySpendState",
        default_budget: float = 100.0,
        history_limit: int = 60,
        today: Callable[[], date] = date.today,
    ):
        self._store = store
        self._key = key
        self._default_budget = default_budget
        self._history_limit = history_limit
        self._today = today

    @property
    def key(self) -> str:
        return self._key

    def default_state(self) -> TrackerState:
        return TrackerState(
            budget=self._default_budget,
            last_opened_date=self._today(),
        )

    def load(self) -> TrackerState:
        """Return the stored state, or the default one if absent or malformed."""
        state, _ = self.load_with_report()
        return state

    def load_with_report(self) -> tuple[TrackerState, list[str]]:
        """
        Load the state and describe every repair that was needed.

        Returns:
            (state, problems) - problems is empty for a clean load
        """
        blob = self._store.get(self._key)
        if blob is None:
            return self.default_state(), []

        try:
            raw = json.loads(blob)
        except json.JSONDecodeError as e:
            return self.default_state(), [f"state blob is not valid JSON: {e.msg}"]

        if not isinstance(raw, dict):
            return self.default_state(), [
                f"state blob must be an object, got {type(raw).__name__}"
            ]

        return self._heal(raw)

    def save(self, state: TrackerState) -> None:
        """Persist the full state in one write."""
        blob = json.dumps(state.to_blob(), ensure_ascii=False)
        self._store.set(self._key, blob)

    def clear(self) -> bool:
        """Remove the stored blob entirely."""
        return self._store.delete(self._key)

    def _heal(self, raw: dict[str, Any]) -> tuple[TrackerState, list[str]]:
        problems: list[str] = []

        budget = self._default_budget
        if raw.get("budget") is not None:
            try:
                budget = _BUDGET.validate_python(raw["budget"])
            except ValidationError:
                problems.append(f"invalid budget {raw['budget']!r} replaced by {self._default_budget}")

        expenses = self._heal_expenses(raw.get("expenses"), problems)
        history = self._heal_history(raw.get("history"), problems)

        last_opened = self._today()
        raw_date = raw.get("lastOpenedDate", raw.get(_LEGACY_DATE_KEY))
        if raw_date is not None:
            try:
                last_opened = _DATE.validate_python(parse_calendar_date(raw_date))
            except ValidationError:
                problems.append(f"invalid lastOpenedDate {raw_date!r} replaced by today")

        state = TrackerState(
            budget=budget,
            expenses=expenses,
            history=history,
            last_opened_date=last_opened,
        )
        return state, problems

    def _heal_expenses(self, raw: Any, problems: list[str]) -> list[Expense]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            problems.append("expenses is not a list; cleared")
            return []

        expenses: list[Expense] = []
        seen: set[str] = set()
        day_totals: dict[date, float] = {}
        for index, item in enumerate(raw):
            try:
                expense = Expense.model_validate(item)
            except ValidationError:
                problems.append(f"dropped malformed expense at position {index}")
                continue
            if expense.id in seen:
                problems.append(f"dropped duplicate expense id {expense.id}")
                continue
            day_total = day_totals.get(expense.date, 0.0) + expense.amount
            if day_total > MAX_DAILY_TOTAL:
                problems.append(
                    f"dropped expense {expense.id}: total for {expense.date.isoformat()} would exceed {MAX_DAILY_TOTAL:.0f}"
                )
                continue
            day_totals[expense.date] = day_total
            seen.add(expense.id)
            expenses.append(expense)
        return expenses

    def _heal_history(self, raw: Any, problems: list[str]) -> list[HistoryEntry]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            problems.append("history is not a list; cleared")
            return []

        history: list[HistoryEntry] = []
        for index, item in enumerate(raw):
            try:
                history.append(HistoryEntry.model_validate(item))
            except ValidationError:
                problems.append(f"dropped malformed history entry at position {index}")

        overflow = len(history) - self._history_limit
        if overflow > 0:
            problems.append(f"history trimmed to the newest {self._history_limit} entries")
            history = history[overflow:]
        return history

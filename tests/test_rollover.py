"""Tests for the day rollover engine."""

import json
from datetime import date, timedelta

import pytest

from daily_spend.ledger import DayRolloverEngine
from daily_spend.models.audit import AuditEventType
from daily_spend.models.ledger import (
    MAX_AMOUNT,
    MAX_DAILY_TOTAL,
    DayStatus,
    Expense,
    HistoryEntry,
    TrackerState,
)
from daily_spend.services.storage import StorageError


D1 = date(2026, 10, 16)
D2 = date(2026, 10, 17)


@pytest.fixture
def engine(store, audit_logger):
    return DayRolloverEngine(store, audit_logger=audit_logger)


def state_with(*amounts, day=D1, budget=100.0):
    return TrackerState(
        budget=budget,
        expenses=[Expense(amount=amount, date=day) for amount in amounts],
        last_opened_date=D1,
    )


class TestRollover:

    def test_same_day_is_noop(self, engine, kv):
        state = state_with(30)
        outcome = engine.rollover(state, D1)
        assert outcome.rolled_over is False
        assert state.history == []
        assert kv.write_count == 0

    def test_archives_previous_day(self, engine, kv):
        state = state_with(30, 45.5, budget=100)
        outcome = engine.rollover(state, D2)

        assert outcome.rolled_over is True
        assert len(state.history) == 1
        entry = state.history[0]
        assert entry.date == D1
        assert entry.spent == 75.5
        assert entry.budget == 100
        assert entry.result == 24.5
        assert entry.status == DayStatus.SAVED
        assert outcome.archived == entry
        assert state.last_opened_date == D2
        blob = json.loads(kv.get("dailySpendState"))
        assert blob["lastOpenedDate"] == "2026-10-17"
        assert blob["history"][0]["status"] == "saved"

    def test_overspent_day_is_deficit(self, engine):
        state = state_with(80, 50, budget=100)
        engine.rollover(state, D2)
        entry = state.history[0]
        assert entry.result == -30
        assert entry.status == DayStatus.DEFICIT

    def test_budget_at_archive_time_is_recorded(self, engine):
        state = state_with(10, budget=25)
        engine.rollover(state, D2)
        assert state.history[0].budget == 25

    def test_only_previous_day_counted(self, engine):
        state = state_with(30)
        state.expenses.insert(0, Expense(amount=99, date=D2))
        engine.rollover(state, D2)
        assert state.history[0].spent == 30

    def test_expenses_stay_in_ledger(self, engine):
        state = state_with(30, 20)
        engine.rollover(state, D2)
        assert len(state.expenses) == 2

    def test_zero_activity_creates_no_entry(self, engine, kv):
        state = state_with()
        outcome = engine.rollover(state, D2)
        assert outcome.rolled_over is True
        assert outcome.archived is None
        assert state.history == []
        assert state.last_opened_date == D2
        assert kv.write_count == 1

    def test_history_capped_at_sixty(self, engine):
        state = state_with(10)
        start = D1 - timedelta(days=60)
        state.history = [
            HistoryEntry.close_day(start + timedelta(days=i), 5, 100) for i in range(60)
        ]
        oldest = state.history[0]

        outcome = engine.rollover(state, D2)

        assert len(state.history) == 60
        assert outcome.dropped == oldest
        assert state.history[0].date == start + timedelta(days=1)
        assert state.history[-1].date == D1

    def test_custom_history_limit(self, store):
        engine = DayRolloverEngine(store, history_limit=2)
        state = state_with(10)
        state.history = [
            HistoryEntry.close_day(date(2026, 10, 1), 5, 100),
            HistoryEntry.close_day(date(2026, 10, 2), 5, 100),
        ]
        engine.rollover(state, D2)
        assert [e.date for e in state.history] == [date(2026, 10, 2), D1]

    def test_multi_day_gap_archives_only_last_opened_day(self, engine, audit_storage):
        state = state_with(40)
        later = D1 + timedelta(days=5)

        outcome = engine.rollover(state, later)

        assert len(state.history) == 1
        assert state.history[0].date == D1
        assert outcome.skipped_days == 4
        types = [e.event_type for e in audit_storage.get_recent_events()]
        assert AuditEventType.DAYS_SKIPPED in types

    def test_consecutive_day_skips_nothing(self, engine):
        outcome = engine.rollover(state_with(1), D2)
        assert outcome.skipped_days == 0

    def test_clock_moving_backwards_still_rolls_over(self, engine):
        state = state_with(15)
        earlier = D1 - timedelta(days=1)
        outcome = engine.rollover(state, earlier)
        assert outcome.rolled_over is True
        assert outcome.skipped_days == 0
        assert state.last_opened_date == earlier
        assert state.history[0].date == D1

    def test_second_rollover_same_day_adds_nothing(self, engine):
        state = state_with(15)
        engine.rollover(state, D2)
        engine.rollover(state, D2)
        assert len(state.history) == 1

    def test_full_day_at_total_cap_archives(self, engine):
        count = int(MAX_DAILY_TOTAL // MAX_AMOUNT)
        state = state_with(*([MAX_AMOUNT] * count), budget=MAX_AMOUNT)

        outcome = engine.rollover(state, D2)

        assert outcome.archived.spent == MAX_DAILY_TOTAL
        assert outcome.archived.status == DayStatus.DEFICIT
        assert state.last_opened_date == D2

    def test_overflowing_day_cannot_be_built(self):
        with pytest.raises(ValueError):
            Expense(amount=1e308, date=D1)

    def test_archive_is_audited(self, engine, audit_storage):
        engine.rollover(state_with(15), D2)
        types = [e.event_type for e in audit_storage.get_recent_events()]
        assert AuditEventType.DAY_ROLLED_OVER in types
        assert AuditEventType.DAY_ARCHIVED in types

    def test_failed_write_restores_state(self, engine, kv):
        state = state_with(15)
        kv.fail_writes = True
        with pytest.raises(StorageError):
            engine.rollover(state, D2)
        assert state.history == []
        assert state.last_opened_date == D1

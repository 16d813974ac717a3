"""Tests for the metrics calculator."""

from datetime import date, timedelta

import pytest

from daily_spend.metrics import MetricsCalculator, classify_tier
from daily_spend.models.ledger import BudgetTier, Expense, HistoryEntry


DAY = date(2026, 10, 17)


def expenses(*amounts):
    return [Expense(amount=amount, date=DAY) for amount in amounts]


class TestCompute:

    def setup_method(self):
        self.calculator = MetricsCalculator()

    def test_overspent_is_critical_and_clamped(self):
        """budget=100, expenses [40, 70] -> spent 110, remaining -10, progress 0."""
        metrics = self.calculator.compute(expenses(40, 70), 100)
        assert metrics.spent == 110
        assert metrics.remaining == -10
        assert metrics.progress_pct == 0
        assert metrics.tier == BudgetTier.CRITICAL

    def test_low_remaining_is_danger(self):
        """budget=50, expense [45] -> remaining 5, progress 10."""
        metrics = self.calculator.compute(expenses(45), 50)
        assert metrics.spent == 45
        assert metrics.remaining == 5
        assert metrics.progress_pct == pytest.approx(10)
        assert metrics.tier == BudgetTier.DANGER

    def test_nothing_spent(self):
        metrics = self.calculator.compute([], 100)
        assert metrics.spent == 0
        assert metrics.remaining == 100
        assert metrics.progress_pct == 100
        assert metrics.tier == BudgetTier.SAFE

    def test_exactly_spent_is_critical(self):
        metrics = self.calculator.compute(expenses(60, 40), 100)
        assert metrics.remaining == 0
        assert metrics.tier == BudgetTier.CRITICAL

    def test_twenty_percent_left_is_warning(self):
        metrics = self.calculator.compute(expenses(80), 100)
        assert metrics.progress_pct == 20
        assert metrics.tier == BudgetTier.WARNING

    def test_half_left_is_safe(self):
        metrics = self.calculator.compute(expenses(50), 100)
        assert metrics.progress_pct == 50
        assert metrics.tier == BudgetTier.SAFE

    def test_just_under_half_is_warning(self):
        metrics = self.calculator.compute(expenses(50.01), 100)
        assert metrics.tier == BudgetTier.WARNING

    def test_adding_amount_moves_spent_and_remaining(self):
        before = self.calculator.compute(expenses(12.5), 80)
        after = self.calculator.compute(expenses(12.5, 7.3), 80)
        assert after.spent - before.spent == pytest.approx(7.3)
        assert before.remaining - after.remaining == pytest.approx(7.3)


class TestClassifyTier:

    @pytest.mark.parametrize("remaining, progress, tier", [
        (0, 0, BudgetTier.CRITICAL),
        (-5, 0, BudgetTier.CRITICAL),
        (19.99, 19.99, BudgetTier.DANGER),
        (20, 20, BudgetTier.WARNING),
        (49.99, 49.99, BudgetTier.WARNING),
        (50, 50, BudgetTier.SAFE),
        (100, 100, BudgetTier.SAFE),
    ])
    def test_boundaries(self, remaining, progress, tier):
        assert classify_tier(remaining, progress) == tier


class TestHistorySummary:

    def setup_method(self):
        self.calculator = MetricsCalculator()
        start = date(2026, 10, 1)
        self.history = [
            HistoryEntry.close_day(start + timedelta(days=i), spent=spent, budget=100)
            for i, spent in enumerate([50, 120, 90, 30, 100, 250, 10, 60, 70])
        ]

    def test_recent_is_last_days_oldest_first(self):
        view = self.calculator.history_summary(self.history, limit=7)
        assert [entry.date for entry in view.recent] == [entry.date for entry in self.history[-7:]]

    def test_all_is_newest_first(self):
        view = self.calculator.history_summary(self.history)
        assert view.all[0] == self.history[-1]
        assert view.all[-1] == self.history[0]
        assert len(view.all) == len(self.history)

    def test_chart_scale(self):
        view = self.calculator.history_summary(self.history, limit=7)
        assert view.chart_max == 250
        view = self.calculator.history_summary(self.history, limit=2)
        assert view.chart_max == 100

    def test_chart_scale_never_below_floor(self):
        small = [HistoryEntry.close_day(date(2026, 10, 1), spent=5, budget=20)]
        assert self.calculator.history_summary(small).chart_max == 100

    def test_totals(self):
        view = self.calculator.history_summary(self.history)
        # Results 50, -20, 10, 70, 0, -150, 90, 40, 30
        assert view.days_saved == 7
        assert view.days_deficit == 2
        assert view.total_saved == pytest.approx(290)
        assert view.total_deficit == pytest.approx(170)

    def test_empty_history(self):
        view = self.calculator.history_summary([])
        assert view.recent == []
        assert view.all == []
        assert view.chart_max == 100
        assert view.days_saved == 0

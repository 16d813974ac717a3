"""
Metrics Calculator

Pure functions of (expenses, budget) - nothing here reads or writes state.

TIERS are evaluated in priority order and are mutually exclusive:
    remaining <= 0        -> critical
    progress_pct < 20     -> danger
    progress_pct < 50     -> warning
    otherwise             -> safe

progress_pct is the share of the budget still REMAINING, clamped to 0-100.
Exactly 20% remaining is a warning, exactly 50% is safe.
"""

import math
from typing import Iterable, Sequence

from daily_spend.models.ledger import (
    BudgetTier,
    DayStatus,
    Expense,
    HistoryEntry,
    HistoryView,
    TodayMetrics,
)


DANGER_BELOW_PCT = 20.0
WARNING_BELOW_PCT = 50.0

# The history chart never scales below this value
MIN_CHART_SCALE = 100.0


def classify_tier(remaining: float, progress_pct: float) -> BudgetTier:
    """Map remaining budget onto its tier."""
    if remaining <= 0:
        return BudgetTier.CRITICAL
    if progress_pct < DANGER_BELOW_PCT:
        return BudgetTier.DANGER
    if progress_pct < WARNING_BELOW_PCT:
        return BudgetTier.WARNING
    return BudgetTier.SAFE


class MetricsCalculator:
    """Derives today's numbers and the history summary."""

    def compute(self, today_expenses: Iterable[Expense], budget: float) -> TodayMetrics:
        """
        Derive spent, remaining, progress and tier.

        Args:
            today_expenses: Expenses of the current day
            budget: Daily budget, always > 0

        Returns:
            TodayMetrics
        """
        spent = math.fsum(expense.amount for expense in today_expenses)
        remaining = budget - spent
        # Multiply first so exact boundaries (20%, 50%) stay exact
        progress_pct = min(100.0, max(0.0, remaining * 100 / budget))

        return TodayMetrics(
            spent=spent,
            remaining=remaining,
            progress_pct=progress_pct,
            tier=classify_tier(remaining, progress_pct),
        )

    def history_summary(self, history: Sequence[HistoryEntry], limit: int = 7) -> HistoryView:
        """
        Prepare archived days for display.

        `recent` holds the last `limit` days oldest-first; `all` holds
        every day newest-first.
        """
        recent = list(history[-limit:]) if limit > 0 else []
        chart_max = max(
            [MIN_CHART_SCALE] + [max(entry.spent, entry.budget) for entry in recent]
        )

        saved = [entry for entry in history if entry.status == DayStatus.SAVED]
        deficit = [entry for entry in history if entry.status == DayStatus.DEFICIT]

        return HistoryView(
            recent=recent,
            all=list(reversed(history)),
            chart_max=chart_max,
            total_saved=math.fsum(entry.result for entry in saved),
            total_deficit=math.fsum(-entry.result for entry in deficit),
            days_saved=len(saved),
            days_deficit=len(deficit),
        )

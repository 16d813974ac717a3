"""Ledger package: expense mutations and the day rollover."""

from daily_spend.ledger.expenses import ExpenseLedger
from daily_spend.ledger.rollover import DayRolloverEngine

__all__ = ["DayRolloverEngine", "ExpenseLedger"]

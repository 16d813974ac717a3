"""Derived metrics package."""

from daily_spend.metrics.calculator import MetricsCalculator, classify_tier

__all__ = ["MetricsCalculator", "classify_tier"]

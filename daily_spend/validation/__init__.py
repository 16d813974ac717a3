"""Validation package."""

from daily_spend.validation.validator import AmountValidator, parse_number

__all__ = ["AmountValidator", "parse_number"]

"""
Amount and Budget Validation

DESIGN DECISION: Invalid input is rejected up front and never half-applied.

A rejection is NOT an exception. The validator returns an explicit
OperationResult carrying the reason, so callers (and tests) can see why
nothing happened, while a caller that does not care can simply ignore it.

Accepted input:
- int, float and Decimal values
- strings holding a plain decimal number such as "12", "-4.5", ".5" or
  "1e3" (surrounding whitespace is ignored), as typed into an input box

Rejected input:
- anything that is not a number (including booleans and None)
- Python-only spellings like "1_000", non-ASCII digits, "nan" and "inf"
- NaN and infinities
- zero and negative values
- amounts and budgets above MAX_AMOUNT
- an amount that would push the day's total above MAX_DAILY_TOTAL
"""

import math
import re
from decimal import Decimal
from typing import Any, Optional

from daily_spend.models.ledger import (
    MAX_AMOUNT,
    MAX_DAILY_TOTAL,
    OperationResult,
    RejectionReason,
)


_DECIMAL_TEXT = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def parse_number(value: Any) -> Optional[float]:
    """
    Convert raw input to a finite float.

    Returns None when the value is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        if isinstance(value, (int, float, Decimal)):
            number = float(value)
        elif isinstance(value, str):
            text = value.strip()
            if not _DECIMAL_TEXT.fullmatch(text):
                return None
            number = float(text)
        else:
            return None
    except (ValueError, OverflowError):
        return None

    if not math.isfinite(number):
        return None
    return number


class AmountValidator:
    """Validates expense amounts and budget values."""

    def check_amount(
        self,
        value: Any,
        day_total: float = 0.0,
    ) -> tuple[Optional[float], Optional[OperationResult]]:
        """
        Validate an expense amount.

        Args:
            value: Raw amount
            day_total: What the target day already holds

        Returns: (amount, None) when valid, (None, rejection) otherwise
        """
        number = parse_number(value)
        if number is None:
            return None, OperationResult.rejected(
                RejectionReason.INVALID_AMOUNT,
                f"Amount {value!r} is not a finite number",
            )
        if number <= 0:
            return None, OperationResult.rejected(
                RejectionReason.INVALID_AMOUNT,
                f"Amount must be greater than zero, got {number}",
            )
        if number > MAX_AMOUNT:
            return None, OperationResult.rejected(
                RejectionReason.INVALID_AMOUNT,
                f"Amount must not exceed {MAX_AMOUNT:.0f}, got {number}",
            )
        if day_total + number > MAX_DAILY_TOTAL:
            return None, OperationResult.rejected(
                RejectionReason.INVALID_AMOUNT,
                f"Daily total would exceed {MAX_DAILY_TOTAL:.0f}",
            )
        return number, None

    def check_budget(self, value: Any) -> tuple[Optional[float], Optional[OperationResult]]:
        """
        Validate a new daily budget.

        Returns: (budget, None) when valid, (None, rejection) otherwise
        """
        number = parse_number(value)
        if number is None:
            return None, OperationResult.rejected(
                RejectionReason.INVALID_BUDGET,
                f"Budget {value!r} is not a finite number",
            )
        if number <= 0:
            return None, OperationResult.rejected(
                RejectionReason.INVALID_BUDGET,
                f"Budget must be greater than zero, got {number}",
            )
        if number > MAX_AMOUNT:
            return None, OperationResult.rejected(
                RejectionReason.INVALID_BUDGET,
                f"Budget must not exceed {MAX_AMOUNT:.0f}, got {number}",
            )
        return number, None

"""
Core Data Models for Daily Spend

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce the ledger invariants at runtime (positive amounts and budgets)
2. Keep archived records immutable
3. Serialize to exactly the persisted JSON blob
4. Heal legacy data written by older clients

DESIGN DECISION: Calendar dates are real `datetime.date` values compared
structurally. Locale-formatted strings are only accepted on the way in.
"""

import datetime as dt
import math
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


DEFAULT_NOTE = "Expense"

# Largest accepted expense amount or daily budget
MAX_AMOUNT = 1_000_000_000.0

# Largest total a single day may accumulate. Keeps every sum finite.
MAX_DAILY_TOTAL = 1_000_000_000_000.0

# Older clients stored dates as en-US locale strings ("10/17/2026").
_LEGACY_DATE_FORMATS = ("%m/%d/%Y", "%Y/%m/%d")


def parse_calendar_date(value: Any) -> Any:
    """
    Coerce a stored date into a `datetime.date`.

    Accepts date objects, datetimes, ISO strings and the legacy locale
    formats. Anything else is returned unchanged for pydantic to reject.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return dt.date.fromisoformat(text)
        except ValueError:
            pass
        for fmt in _LEGACY_DATE_FORMATS:
            try:
                return dt.datetime.strptime(text, fmt).date()
            except ValueError:
                continue
    return value


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class DayStatus(str, Enum):
    """Outcome of an archived day."""
    SAVED = "saved"      # spent at most the budget
    DEFICIT = "deficit"  # spent more than the budget


class BudgetTier(str, Enum):
    """
    Qualitative health of today's remaining budget.

    Ordered from healthiest to worst. Exactly one tier applies at a time.
    """
    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"
    CRITICAL = "critical"


class RejectionReason(str, Enum):
    """Why an operation was refused without touching state."""
    INVALID_AMOUNT = "invalid_amount"
    INVALID_BUDGET = "invalid_budget"


# =============================================================================
# CORE LEDGER RECORDS
# =============================================================================

class Expense(BaseModel):
    """
    A single expense entered by the user.

    Immutable once created. Only a full reset removes it.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        min_length=1,
        description="Unique expense token"
    )
    amount: float = Field(
        ...,
        gt=0,
        le=MAX_AMOUNT,
        allow_inf_nan=False,
        description="Amount spent"
    )
    note: str = Field(
        default=DEFAULT_NOTE,
        description="What the money was spent on"
    )
    date: dt.date = Field(
        ...,
        description="Calendar day the expense belongs to"
    )
    timestamp: str = Field(
        default="",
        description="Display time of entry (e.g. 08:15)"
    )

    @field_validator('note', mode='before')
    @classmethod
    def default_blank_note(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_NOTE
        return v

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return parse_calendar_date(v)


class HistoryEntry(BaseModel):
    """
    Archived summary of one finished day.

    Created only by the rollover, exactly once per day transition,
    and never modified afterwards.
    """
    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(
        ...,
        description="The day that was closed out"
    )
    spent: float = Field(
        ...,
        ge=0,
        le=MAX_DAILY_TOTAL,
        allow_inf_nan=False,
        description="Total spent that day"
    )
    budget: float = Field(
        ...,
        gt=0,
        le=MAX_AMOUNT,
        allow_inf_nan=False,
        description="Budget in force when the day was archived"
    )
    result: float = Field(
        ...,
        allow_inf_nan=False,
        description="budget - spent; positive means saved"
    )
    status: DayStatus

    @field_validator('date', mode='before')
    @classmethod
    def parse_date(cls, v: Any) -> Any:
        return parse_calendar_date(v)

    @model_validator(mode='after')
    def validate_outcome(self) -> 'HistoryEntry':
        """Result and status must agree with spent and budget."""
        if not math.isclose(self.result, self.budget - self.spent, abs_tol=1e-6):
            raise ValueError("Result must equal budget minus spent")
        expected = DayStatus.SAVED if self.result >= 0 else DayStatus.DEFICIT
        if self.status != expected:
            raise ValueError(f"Status must be '{expected.value}' for result {self.result}")
        return self

    @classmethod
    def close_day(cls, day: dt.date, spent: float, budget: float) -> 'HistoryEntry':
        """Build the archive record for a finished day."""
        result = budget - spent
        return cls(
            date=day,
            spent=spent,
            budget=budget,
            result=result,
            status=DayStatus.SAVED if result >= 0 else DayStatus.DEFICIT,
        )


# =============================================================================
# TRACKER STATE
# =============================================================================

class TrackerState(BaseModel):
    """
    The single persisted state value.

    Expenses are ordered most-recent-first; history oldest-to-newest.
    Serializes to the exact blob stored by the LedgerStore.
    """
    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
    )

    budget: float = Field(
        default=100.0,
        gt=0,
        le=MAX_AMOUNT,
        allow_inf_nan=False,
        description="Daily budget"
    )
    expenses: list[Expense] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)
    last_opened_date: dt.date = Field(
        default_factory=dt.date.today,
        alias="lastOpenedDate",
        description="Day of the most recent activation"
    )

    @field_validator('last_opened_date', mode='before')
    @classmethod
    def parse_last_opened(cls, v: Any) -> Any:
        return parse_calendar_date(v)

    @model_validator(mode='after')
    def validate_unique_ids(self) -> 'TrackerState':
        ids = [expense.id for expense in self.expenses]
        if len(ids) != len(set(ids)):
            raise ValueError("Expense ids must be unique")
        return self

    def to_blob(self) -> dict[str, Any]:
        """JSON-ready dict in the persisted shape."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# OPERATION RESULTS
# =============================================================================

class OperationResult(BaseModel):
    """
    Outcome of a mutating operation.

    Rejections are results, not exceptions: the caller may ignore them,
    but state is guaranteed unchanged when `accepted` is False.
    """

    accepted: bool
    reason: Optional[RejectionReason] = None
    message: str = ""
    expense: Optional[Expense] = Field(
        default=None,
        description="The expense created, for add operations"
    )

    @classmethod
    def ok(cls, message: str = "", expense: Optional[Expense] = None) -> 'OperationResult':
        return cls(accepted=True, message=message, expense=expense)

    @classmethod
    def rejected(cls, reason: RejectionReason, message: str) -> 'OperationResult':
        return cls(accepted=False, reason=reason, message=message)


class RolloverOutcome(BaseModel):
    """What happened during the day-boundary check of one activation."""

    rolled_over: bool
    previous_date: dt.date
    current_date: dt.date
    archived: Optional[HistoryEntry] = None
    dropped: Optional[HistoryEntry] = Field(
        default=None,
        description="Oldest entry evicted by the history cap"
    )
    skipped_days: int = Field(
        default=0,
        ge=0,
        description="Unopened days between the two dates that were not archived"
    )


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class TodayMetrics(BaseModel):
    """Derived numbers for today's spending."""

    spent: float
    remaining: float
    progress_pct: float = Field(
        ...,
        ge=0,
        le=100,
        description="Share of the budget still remaining, 0-100"
    )
    tier: BudgetTier


class TodayView(TodayMetrics):
    """Everything the presentation layer needs for the tracking screen."""

    today_expenses: list[Expense] = Field(default_factory=list)


class HistoryView(BaseModel):
    """
    Archived days prepared for display.

    `recent` is chronological (for a chart); `all` is newest-first (for a list).
    """

    recent: list[HistoryEntry] = Field(default_factory=list)
    all: list[HistoryEntry] = Field(default_factory=list)
    chart_max: float = Field(
        default=100.0,
        description="Scale for the chart: largest spent or budget in `recent`"
    )
    total_saved: float = 0.0
    total_deficit: float = 0.0
    days_saved: int = 0
    days_deficit: int = 0

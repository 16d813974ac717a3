"""Shared fixtures: an injectable clock and in-memory storage."""

from datetime import date, datetime, timedelta

import pytest

from daily_spend.audit import AuditLogger
from daily_spend.orchestrator import DailySpendTracker
from daily_spend.services.storage import (
    LedgerStore,
    MemoryAuditStorage,
    MemoryKeyValueStore,
    StorageError,
)


class FakeClock:
    """Callable returning a settable 'now'."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.current.date()

    def advance(self, days: int = 0, minutes: int = 0) -> None:
        self.current = self.current + timedelta(days=days, minutes=minutes)


class FailingKeyValueStore(MemoryKeyValueStore):
    """Memory store whose reads or writes fail while the matching flag is set."""

    def __init__(self):
        super().__init__()
        self.fail_reads = False
        self.fail_writes = False
        self.write_count = 0

    def get(self, key: str):
        if self.fail_reads:
            raise StorageError("device not ready")
        return super().get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageError("disk full")
        self.write_count += 1
        super().set(key, value)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 17, 9, 30))


@pytest.fixture
def kv():
    return FailingKeyValueStore()


@pytest.fixture
def store(kv, clock):
    return LedgerStore(kv, today=clock.today)


@pytest.fixture
def audit_storage():
    return MemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def tracker(store, audit_logger, clock):
    return DailySpendTracker(store, audit_logger=audit_logger, now=clock)

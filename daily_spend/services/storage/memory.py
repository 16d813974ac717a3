"""
In-memory storage backends.

State is lost when the process exits. Used for tests and for running the
tracker without touching the disk.
"""

from typing import Optional

from daily_spend.models.audit import AuditEvent
from daily_spend.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStoreInterface,
)


class MemoryKeyValueStore(KeyValueStoreInterface):
    """In-process key-value store."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)


class MemoryAuditStorage(AuditStorageInterface):
    """Append-only in-process audit log."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event.model_copy(deep=True))
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        if limit <= 0:
            return []
        return [event.model_copy(deep=True) for event in reversed(self._events[-limit:])]

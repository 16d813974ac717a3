"""
Storage Services Package

Provides the abstract key-value interface, its memory and JSON file
implementations, and the LedgerStore that keeps the tracker state in it.
"""

from daily_spend.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStoreInterface,
    StorageError,
)
from daily_spend.services.storage.memory import (
    MemoryAuditStorage,
    MemoryKeyValueStore,
)
from daily_spend.services.storage.json_file import JsonFileKeyValueStore
from daily_spend.services.storage.ledger_store import LedgerStore

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStoreInterface",
    # Exceptions
    "StorageError",
    # Implementations
    "JsonFileKeyValueStore",
    "LedgerStore",
    "MemoryAuditStorage",
    "MemoryKeyValueStore",
]

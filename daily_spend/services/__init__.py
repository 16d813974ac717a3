"""Services package."""

from daily_spend.services.storage import (
    AuditStorageInterface,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    LedgerStore,
    MemoryAuditStorage,
    MemoryKeyValueStore,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "LedgerStore",
    "MemoryAuditStorage",
    "MemoryKeyValueStore",
    "StorageError",
]

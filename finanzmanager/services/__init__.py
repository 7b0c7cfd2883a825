"""
Services package.

Only storage is re-exported here; the audit logger depends on it.
Import webhook delivery from finanzmanager.services.webhook.
"""

from finanzmanager.services.storage import (
    AuditStorageInterface,
    CorruptStateError,
    InMemoryAuditStorage,
    InMemoryStateStorage,
    LocalFileStateStorage,
    NotFoundError,
    StateStorageInterface,
    StorageError,
    StorePersistence,
)

__all__ = [
    "AuditStorageInterface",
    "CorruptStateError",
    "InMemoryAuditStorage",
    "InMemoryStateStorage",
    "LocalFileStateStorage",
    "NotFoundError",
    "StateStorageInterface",
    "StorageError",
    "StorePersistence",
]

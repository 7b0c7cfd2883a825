"""
Storage Services Package

Provides abstract interfaces and concrete implementations for state storage.
Currently implements a local JSON file as the backend, but designed to be swappable.
"""

from finanzmanager.services.storage.interface import (
    AuditStorageInterface,
    CorruptStateError,
    NotFoundError,
    StateStorageInterface,
    StorageError,
)
from finanzmanager.services.storage.local_file import LocalFileStateStorage
from finanzmanager.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryStateStorage,
)
from finanzmanager.services.storage.persistence import (
    DEFAULT_PROFILE_ID,
    StorePersistence,
    default_store,
    deserialize_store,
    serialize_store,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "StateStorageInterface",
    # Exceptions
    "CorruptStateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryStateStorage",
    "LocalFileStateStorage",
    # Store persistence
    "DEFAULT_PROFILE_ID",
    "StorePersistence",
    "default_store",
    "deserialize_store",
    "serialize_store",
]

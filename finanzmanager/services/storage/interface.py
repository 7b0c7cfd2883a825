"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the whole store in a single local key-value slot today
2. Use in-memory storage for testing
3. Swap the backend without touching the application shell

The interface is intentionally tiny: the app always reads and writes the
complete serialized store, never individual records.
"""

from abc import ABC, abstractmethod
from typing import Optional

from finanzmanager.models.audit import AuditEvent


class StateStorageInterface(ABC):
    """
    Abstract key-value storage for serialized application state.

    Values are opaque strings (serialized JSON). Implementations must not
    interpret them.
    """

    @abstractmethod
    async def load_slot(self, key: str) -> Optional[str]:
        """
        Read a slot.

        Args:
            key: Slot name

        Returns:
            The stored string, or None if the slot was never written

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def save_slot(self, key: str, value: str) -> bool:
        """
        Write (replace) a slot.

        Args:
            key: Slot name
            value: Serialized state

        Returns:
            True if saved successfully

        Raises:
            StorageError: If the write fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event to the log."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class CorruptStateError(StorageError):
    """A stored slot exists but cannot be decoded into a store."""
    pass

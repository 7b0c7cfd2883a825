"""In-memory storage backends, used by tests and when no file is configured."""

from typing import Optional

from finanzmanager.models.audit import AuditEvent
from finanzmanager.services.storage.interface import (
    AuditStorageInterface,
    StateStorageInterface,
)


class InMemoryStateStorage(StateStorageInterface):
    """Dict-backed key-value storage."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.slots: dict[str, str] = dict(initial or {})
        self.write_count = 0

    async def load_slot(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    async def save_slot(self, key: str, value: str) -> bool:
        self.slots[key] = value
        self.write_count += 1
        return True


class InMemoryAuditStorage(AuditStorageInterface):
    """List-backed audit log."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self.events[-limit:]))

"""
Audit Models for Finanz-Manager

Every significant action in the app is logged for audit purposes.
This provides:
1. Traceability of every change to the ledger
2. Debugging information when exports or webhooks fail
3. A history the user can inspect

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger
    ENTRY_ADDED = "entry_added"
    ENTRY_DELETED = "entry_deleted"

    # Profiles
    PROFILE_CREATED = "profile_created"
    PROFILE_UPDATED = "profile_updated"
    PROFILE_DELETED = "profile_deleted"
    PROFILE_SELECTED = "profile_selected"

    # Import / export
    IMPORT_SUCCEEDED = "import_succeeded"
    IMPORT_FAILED = "import_failed"
    EXPORT_GENERATED = "export_generated"

    # Webhooks
    WEBHOOK_DELIVERED = "webhook_delivered"
    WEBHOOK_FAILED = "webhook_failed"
    REPORT_SENT = "report_sent"

    # Persistence
    STORE_LOADED = "store_loaded"
    STORE_SAVED = "store_saved"
    STORE_LOAD_FAILED = "store_load_failed"
    SAVE_FAILED = "save_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'profile', 'entry', 'webhook')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all deliveries of one report)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_added(profile_id, entry_id, amount, type)
        event = AuditEventBuilder.webhook_failed(url, reason, correlation_id)
    """

    @staticmethod
    def entry_added(
        profile_id: str,
        entry_id: str,
        amount: float,
        entry_type: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            entity_type="entry",
            entity_id=entry_id,
            description=f"{entry_type} of {amount:.2f} added",
            details={"profile_id": profile_id, "amount": amount, "type": entry_type},
            is_user_action=True,
        )

    @staticmethod
    def entry_deleted(profile_id: str, entry_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_DELETED,
            entity_type="entry",
            entity_id=entry_id,
            description="Entry deleted",
            details={"profile_id": profile_id},
            is_user_action=True,
        )

    @staticmethod
    def profile_created(profile_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_CREATED,
            entity_type="profile",
            entity_id=profile_id,
            description=f"Profile created: {name}",
            is_user_action=True,
        )

    @staticmethod
    def profile_updated(profile_id: str, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_UPDATED,
            entity_type="profile",
            entity_id=profile_id,
            description=f"Profile updated: {', '.join(fields)}",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def profile_deleted(profile_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_DELETED,
            entity_type="profile",
            entity_id=profile_id,
            description="Profile deleted",
            is_user_action=True,
        )

    @staticmethod
    def profile_selected(profile_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_SELECTED,
            entity_type="profile",
            entity_id=profile_id,
            description="Active profile changed",
            is_user_action=True,
        )

    @staticmethod
    def import_succeeded(profile_id: str, entry_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_SUCCEEDED,
            entity_type="profile",
            entity_id=profile_id,
            description=f"Imported profile data with {entry_count} entries",
            details={"entry_count": entry_count},
            is_user_action=True,
        )

    @staticmethod
    def import_failed(profile_id: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="profile",
            entity_id=profile_id,
            description="Import rejected",
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def export_generated(profile_id: str, export_format: str, filename: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="profile",
            entity_id=profile_id,
            description=f"{export_format.upper()} export generated: {filename}",
            details={"format": export_format, "filename": filename},
            is_user_action=True,
        )

    @staticmethod
    def webhook_delivered(
        url: str,
        status_code: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WEBHOOK_DELIVERED,
            entity_type="webhook",
            correlation_id=correlation_id,
            description=f"Webhook answered with HTTP {status_code}",
            details={"url": url, "status_code": status_code},
        )

    @staticmethod
    def webhook_failed(
        url: str,
        reason: str,
        correlation_id: UUID,
        status_code: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WEBHOOK_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="webhook",
            correlation_id=correlation_id,
            description="Webhook delivery failed",
            details={"url": url, "status_code": status_code},
            error_message=reason,
        )

    @staticmethod
    def report_sent(
        profile_id: str,
        attempted: int,
        succeeded: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        ok = succeeded > 0
        return AuditEvent(
            event_type=AuditEventType.REPORT_SENT,
            severity=AuditSeverity.INFO if ok else AuditSeverity.WARNING,
            entity_type="profile",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description=f"Report sent to {succeeded}/{attempted} webhooks",
            details={"attempted": attempted, "succeeded": succeeded},
            is_user_action=True,
        )

    @staticmethod
    def store_loaded(profile_count: int, from_storage: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_LOADED,
            entity_type="store",
            description=(
                f"Store loaded with {profile_count} profiles"
                if from_storage else "No saved store found, using defaults"
            ),
            details={"profile_count": profile_count, "from_storage": from_storage},
        )

    @staticmethod
    def store_saved(key: str, size_bytes: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="store",
            description=f"Store written to slot {key}",
            details={"key": key, "size_bytes": size_bytes},
        )

    @staticmethod
    def store_load_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="store",
            description=f"Saved store in slot {key} is unreadable, using defaults",
            error_message=error_message,
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="store",
            description=f"Failed to write slot {key}",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
            correlation_id=correlation_id,
        )

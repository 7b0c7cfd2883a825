"""
Data Models Package

This package contains all Pydantic models used in Finanz-Manager.
Everything that is persisted, imported or exported conforms to these schemas.
"""

from finanzmanager.models.ledger import (
    AppStore,
    LedgerView,
    Profile,
    Summary,
    Transaction,
    TransactionType,
)
from finanzmanager.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "AppStore",
    "LedgerView",
    "Profile",
    "Summary",
    "Transaction",
    "TransactionType",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]

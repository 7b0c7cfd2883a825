"""Application state and command handlers."""

from finanzmanager.state.app_state import (
    STATUS_ENTRY_ADDED,
    STATUS_IMPORT_FAILED,
    STATUS_IMPORT_OK,
    STATUS_READY,
    STATUS_SEND_FAILED,
    STATUS_SEND_OK,
    STATUS_SENDING,
    AppState,
    EntryForm,
    StatusMessage,
    StatusType,
    tax_rate_input_bounds,
)
from finanzmanager.state import commands

__all__ = [
    "STATUS_ENTRY_ADDED",
    "STATUS_IMPORT_FAILED",
    "STATUS_IMPORT_OK",
    "STATUS_READY",
    "STATUS_SEND_FAILED",
    "STATUS_SEND_OK",
    "STATUS_SENDING",
    "AppState",
    "EntryForm",
    "StatusMessage",
    "StatusType",
    "tax_rate_input_bounds",
    "commands",
]

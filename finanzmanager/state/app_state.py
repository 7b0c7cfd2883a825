"""
Application State

Everything the UI shows lives in one immutable AppState:
1. store - the persisted profiles
2. form - the "new entry" form fields
3. status - the last status message

Command handlers (finanzmanager.state.commands) take a state and return a
new one. Only the store part is ever persisted.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from finanzmanager.models.ledger import AppStore, TransactionType


# Status messages shown in the header badge
STATUS_READY = "Bereit"
STATUS_ENTRY_ADDED = "Eintrag hinzugefügt"
STATUS_IMPORT_OK = "Import erfolgreich"
STATUS_IMPORT_FAILED = "Fehler beim Import"
STATUS_SENDING = "Sende an Discord..."
STATUS_SEND_OK = "Discord Übertragung erfolgreich"
STATUS_SEND_FAILED = "Fehler bei Discord Übertragung"


# Nominal range of the tax-rate input
TAX_RATE_MIN = 0.0
TAX_RATE_MAX = 100.0


def tax_rate_input_bounds(rate: float) -> tuple[float, float]:
    """
    Bounds for the tax-rate input widget.

    Imported profiles may carry a rate outside the nominal range; the
    bounds widen to include it so the stored value is shown unchanged.
    """
    return min(TAX_RATE_MIN, rate), max(TAX_RATE_MAX, rate)


class StatusType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class StatusMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str = STATUS_READY
    type: StatusType = StatusType.INFO


class EntryForm(BaseModel):
    """
    Raw form input for a new entry.

    The amount stays a string until the entry is created; an unparsable
    amount simply blocks creation.
    """
    model_config = ConfigDict(frozen=True)

    date: str = Field(default_factory=lambda: date.today().isoformat())
    description: str = ""
    amount: str = ""
    type: TransactionType = TransactionType.INCOME


class AppState(BaseModel):
    model_config = ConfigDict(frozen=True)

    store: AppStore
    form: EntryForm = Field(default_factory=EntryForm)
    status: StatusMessage = Field(default_factory=StatusMessage)

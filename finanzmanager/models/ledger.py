"""
Core Data Models for Finanz-Manager

These models define the schemas of everything that is persisted,
imported or exported:
1. Transaction - a single income/expense entry
2. Profile - one business entity's full ledger and report settings
3. AppStore - all profiles plus the active-profile pointer

DESIGN DECISION: Field names on the wire are camelCase (taxId, monthFilter,
activeProfileId) so that stores and exports written by earlier versions of
the tool load unchanged. Python code uses the snake_case attribute names;
always dump with by_alias=True when writing JSON.

All models are frozen. State changes go through model_copy(update=...)
so a previous AppStore is never mutated in place.
"""

from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    model_validator,
)


def json_number(value: float) -> Any:
    """
    Render a float the way JSON writers without a float type do.

    100.0 -> 100, 12.5 -> 12.5
    """
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a ledger entry.

    The values are the labels stored in existing data files and printed
    in CSV/PDF exports.
    """
    INCOME = "Einnahme"
    EXPENSE = "Ausgabe"


# =============================================================================
# LEDGER MODELS
# =============================================================================

class Transaction(BaseModel):
    """
    A single ledger entry.

    The date is kept as the raw ISO string (YYYY-MM-DD). Month filtering
    is a plain string-prefix match on it, so it is never parsed.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Opaque unique id")
    date: str = Field(..., min_length=1, description="ISO calendar date")
    description: str = Field(..., description="What the entry is for")
    amount: float = Field(
        ...,
        allow_inf_nan=False,
        description="Amount in currency units"
    )
    type: TransactionType

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @field_serializer('amount', when_used='json')
    def _serialize_amount(self, value: float) -> Any:
        return json_number(value)


class Profile(BaseModel):
    """
    One business entity: master data, report settings and its ledger.

    Entries are kept in insertion order. Sorting happens only in derived
    views (see finanzmanager.queries.engine).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(default="")
    tax_id: str = Field(default="", alias="taxId")
    responsible: str = Field(default="")
    tax_rate: float = Field(
        default=5.0,
        alias="taxRate",
        allow_inf_nan=False,
        description="Flat tax rate in percent"
    )
    month_filter: str = Field(
        default="",
        alias="monthFilter",
        description="Empty, or a YYYY-MM prefix entries must start with"
    )
    webhook1: str = Field(default="")
    webhook2: str = Field(default="")
    entries: list[Transaction] = Field(default_factory=list)

    @field_serializer('tax_rate', when_used='json')
    def _serialize_tax_rate(self, value: float) -> Any:
        return json_number(value)

    def webhook(self, number: int) -> str:
        """Return webhook URL 1 or 2."""
        if number == 1:
            return self.webhook1
        if number == 2:
            return self.webhook2
        raise ValueError(f"Unknown webhook slot: {number}")

    def to_json_dict(self) -> dict:
        """Serialize with the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True)


class AppStore(BaseModel):
    """
    The complete persisted state.

    CRITICAL: at least one profile must always exist.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    active_profile_id: str = Field(..., alias="activeProfileId")
    profiles: dict[str, Profile]

    @model_validator(mode='after')
    def validate_profiles(self) -> 'AppStore':
        if not self.profiles:
            raise ValueError("Store must contain at least one profile")
        for key, profile in self.profiles.items():
            if key != profile.id:
                raise ValueError(
                    f"Profile key {key!r} does not match profile id {profile.id!r}"
                )
        return self

    @property
    def resolved_active_id(self) -> str:
        """
        Id of the profile that is actually active.

        Falls back to the lexicographically smallest id when
        active_profile_id does not resolve.
        """
        if self.active_profile_id in self.profiles:
            return self.active_profile_id
        return min(self.profiles)

    @property
    def active_profile(self) -> Profile:
        return self.profiles[self.resolved_active_id]

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# DERIVED VALUES
# =============================================================================

class Summary(BaseModel):
    """Totals over a set of entries."""
    model_config = ConfigDict(frozen=True)

    income: float = 0.0
    expense: float = 0.0
    tax: float = 0.0
    net: float = 0.0


class LedgerView(BaseModel):
    """Filtered, date-sorted entries of a profile and their summary."""
    model_config = ConfigDict(frozen=True)

    filtered_entries: list[Transaction] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)

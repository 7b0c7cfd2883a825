"""
Command Handlers

Pure functions (state, ...) -> new state. They never perform I/O; the
orchestrator applies them and persists the store when it changed.

A handler that refuses to act (invalid form, deleting the last profile,
unknown profile id) returns the very same state object, so callers can
detect a no-op with `new is old`.
"""

import math
from typing import Any, Optional
from uuid import uuid4

from finanzmanager.config import AppSettings, get_settings
from finanzmanager.models.ledger import AppStore, Profile, Transaction
from finanzmanager.state.app_state import (
    STATUS_ENTRY_ADDED,
    AppState,
    EntryForm,
    StatusMessage,
    StatusType,
)


def new_entry_id() -> str:
    return uuid4().hex


def new_profile_id() -> str:
    return f"p-{uuid4().hex[:12]}"


def parse_amount(raw: str) -> Optional[float]:
    """
    Parse a form amount. Accepts "12.50" and the German "12,50".

    Returns None for anything that is not a finite number.
    """
    text = raw.strip().replace(",", ".")
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _with_store(state: AppState, store: AppStore) -> AppState:
    return state.model_copy(update={"store": store})


def _with_profile(state: AppState, profile: Profile) -> AppState:
    store = state.store
    profiles = dict(store.profiles)
    profiles[profile.id] = profile
    return _with_store(state, store.model_copy(update={"profiles": profiles}))


def set_status(state: AppState, message: str, status_type: StatusType = StatusType.INFO) -> AppState:
    return state.model_copy(update={"status": StatusMessage(message=message, type=status_type)})


def set_form(state: AppState, **fields: Any) -> AppState:
    """Update form fields (date, description, amount, type)."""
    form = EntryForm.model_validate({**state.form.model_dump(), **fields})
    return state.model_copy(update={"form": form})


def update_profile(state: AppState, **updates: Any) -> AppState:
    """
    Overwrite fields of the active profile.

    Keys are attribute names (tax_rate, month_filter, ...). The id cannot
    be changed this way; unknown keys are ignored.
    """
    updates = {k: v for k, v in updates.items() if k in Profile.model_fields and k != "id"}
    if not updates:
        return state
    profile = state.store.active_profile
    updated = Profile.model_validate({**profile.model_dump(), **updates})
    return _with_profile(state, updated)


def replace_active_profile(state: AppState, profile: Profile) -> AppState:
    """Swap in a complete profile for the active one, keeping the active id."""
    active_id = state.store.resolved_active_id
    if profile.id != active_id:
        profile = profile.model_copy(update={"id": active_id})
    return _with_profile(state, profile)


def add_entry(state: AppState, entry_id: Optional[str] = None) -> AppState:
    """
    Create an entry from the form.

    Silently does nothing if description, amount or date is empty or the
    amount is not a number. On success the description and amount fields
    are cleared; date and type are kept for the next entry.
    """
    form = state.form
    if not form.description or not form.amount or not form.date:
        return state
    amount = parse_amount(form.amount)
    if amount is None:
        return state

    entry = Transaction(
        id=entry_id or new_entry_id(),
        date=form.date,
        description=form.description,
        amount=amount,
        type=form.type,
    )
    profile = state.store.active_profile
    new_state = update_profile(state, entries=[*profile.entries, entry])
    new_state = new_state.model_copy(update={
        "form": form.model_copy(update={"description": "", "amount": ""}),
    })
    return set_status(new_state, STATUS_ENTRY_ADDED, StatusType.SUCCESS)


def delete_entry(state: AppState, entry_id: str) -> AppState:
    profile = state.store.active_profile
    remaining = [e for e in profile.entries if e.id != entry_id]
    if len(remaining) == len(profile.entries):
        return state
    return update_profile(state, entries=remaining)


def add_profile(
    state: AppState,
    name: str,
    profile_id: Optional[str] = None,
    app_settings: Optional[AppSettings] = None,
) -> AppState:
    """Create an empty profile and make it active. An empty name is ignored."""
    if not name:
        return state
    app_settings = app_settings or get_settings().app
    profile_id = profile_id or new_profile_id()
    if profile_id in state.store.profiles:
        return state

    profile = Profile(id=profile_id, name=name, tax_rate=app_settings.default_tax_rate)
    profiles = {**state.store.profiles, profile_id: profile}
    return _with_store(state, AppStore(active_profile_id=profile_id, profiles=profiles))


def delete_profile(state: AppState) -> AppState:
    """
    Delete the active profile.

    Refused (no-op) when it is the only profile. The profile with the
    smallest id becomes active afterwards.
    """
    store = state.store
    if len(store.profiles) <= 1:
        return state
    profiles = dict(store.profiles)
    del profiles[store.resolved_active_id]
    return _with_store(state, AppStore(active_profile_id=min(profiles), profiles=profiles))


def select_profile(state: AppState, profile_id: str) -> AppState:
    store = state.store
    if profile_id not in store.profiles or profile_id == store.active_profile_id:
        return state
    return _with_store(state, store.model_copy(update={"active_profile_id": profile_id}))

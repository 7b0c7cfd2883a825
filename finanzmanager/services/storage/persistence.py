"""
Store Persistence

Loads the AppStore from a single key-value slot at startup and writes the
whole store back after every change.

DESIGN DECISION: There is no incremental persistence. The store is small
(a few profiles with their entries), and writing it whole means the slot
can never hold a half-applied change.
"""

import json
from typing import Optional

from pydantic import ValidationError

from finanzmanager.config import AppSettings, get_settings
from finanzmanager.models.ledger import AppStore, Profile
from finanzmanager.services.storage.interface import (
    CorruptStateError,
    StateStorageInterface,
)


DEFAULT_PROFILE_ID = "default"


def default_store(app_settings: Optional[AppSettings] = None) -> AppStore:
    """Build the store used on first run: one empty default profile."""
    app_settings = app_settings or get_settings().app
    profile = Profile(
        id=DEFAULT_PROFILE_ID,
        name=app_settings.default_profile_name,
        tax_rate=app_settings.default_tax_rate,
    )
    return AppStore(
        active_profile_id=DEFAULT_PROFILE_ID,
        profiles={DEFAULT_PROFILE_ID: profile},
    )


def serialize_store(store: AppStore) -> str:
    return json.dumps(store.to_json_dict(), ensure_ascii=False)


def deserialize_store(raw: str) -> AppStore:
    """
    Decode a serialized store.

    Raises:
        CorruptStateError: If the text is not JSON or not store-shaped
    """
    try:
        return AppStore.model_validate_json(raw)
    except ValidationError as e:
        raise CorruptStateError(f"Stored state is not a valid store: {e}")


class StorePersistence:
    """
    Reads and writes the AppStore through a StateStorageInterface.

    Instances are registered as state-change observers on the
    orchestrator (see LedgerApp.subscribe).
    """

    def __init__(
        self,
        storage: StateStorageInterface,
        key: str = "finanz_manager_store",
    ):
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    async def load(self) -> Optional[AppStore]:
        """
        Load the saved store.

        Returns:
            The store, or None if nothing was saved yet

        Raises:
            CorruptStateError: If the slot holds undecodable data
            StorageError: If the backend cannot be read
        """
        raw = await self._storage.load_slot(self._key)
        if raw is None:
            return None
        return deserialize_store(raw)

    async def save(self, store: AppStore) -> int:
        """Persist the complete store. Returns the number of bytes written."""
        payload = serialize_store(store)
        await self._storage.save_slot(self._key, payload)
        return len(payload.encode("utf-8"))

"""
Main Orchestrator for Finanz-Manager

This module ties together all the components and defines the
user-facing flows:
1. Ledger editing (entries, profiles, settings) → persisted store
2. Import / export of a profile
3. Sending the report to webhooks

DESIGN DECISION: State changes are unidirectional.
- Command handlers compute a new AppState from the old one
- LedgerApp swaps it in and, if the store changed, notifies observers
- The persistence observer writes the complete store

Nothing here raises for user-caused problems. Every failure ends up as a
status message and an audit event.
"""

from typing import Awaitable, Callable, Iterable, Optional

import structlog

from finanzmanager.audit import AuditLogger, create_correlation_id
from finanzmanager.config import AppSettings, get_settings
from finanzmanager.exports import (
    ExportArtifact,
    ExportFormat,
    ImportFormatError,
    build_export,
    merge_import,
    parse_import_payload,
)
from finanzmanager.models.audit import AuditEventBuilder
from finanzmanager.models.ledger import AppStore, LedgerView, Profile
from finanzmanager.queries import derive_view
from finanzmanager.services.storage import (
    InMemoryStateStorage,
    LocalFileStateStorage,
    StorageError,
    StorePersistence,
    default_store,
)
from finanzmanager.services.webhook import DispatchResult, WebhookDispatcher
from finanzmanager.state import (
    STATUS_IMPORT_FAILED,
    STATUS_IMPORT_OK,
    STATUS_SEND_FAILED,
    STATUS_SEND_OK,
    STATUS_SENDING,
    AppState,
    StatusType,
    commands,
)


logger = structlog.get_logger(__name__)

StoreObserver = Callable[[AppStore], Awaitable[None]]


class LedgerApp:
    """
    Owns the application state and wires user actions to the engine,
    the formatters and the webhook dispatcher.

    Flow:
    1. load() once at startup
    2. call the action methods; each one applies a command
    3. read `state`, `active_profile` and `view` to render
    """

    def __init__(
        self,
        persistence: StorePersistence,
        dispatcher: Optional[WebhookDispatcher] = None,
        audit_logger: Optional[AuditLogger] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        self._persistence = persistence
        self._audit_logger = audit_logger
        self._dispatcher = dispatcher or WebhookDispatcher(audit_logger=audit_logger)
        self._app_settings = app_settings or get_settings().app
        self._state = AppState(store=default_store(self._app_settings))
        self._observers: list[StoreObserver] = [self._persist]

    # -------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def active_profile(self) -> Profile:
        return self._state.store.active_profile

    @property
    def view(self) -> LedgerView:
        """Filtered entries and summary of the active profile."""
        return derive_view(self.active_profile)

    # -------------------------------------------------------------------
    # State plumbing
    # -------------------------------------------------------------------

    def subscribe(self, observer: StoreObserver) -> None:
        """Register an async callback invoked with the store after every change."""
        self._observers.append(observer)

    async def _apply(self, new_state: AppState) -> bool:
        """Swap in a new state. Returns True if the store changed."""
        old_store = self._state.store
        self._state = new_state
        if new_state.store is old_store:
            return False
        for observer in self._observers:
            await observer(new_state.store)
        return True

    async def _audit(self, event) -> None:
        if self._audit_logger:
            await self._audit_logger.log(event)

    async def _persist(self, store: AppStore) -> None:
        try:
            size = await self._persistence.save(store)
        except StorageError as e:
            logger.error("store_save_failed", error=str(e))
            await self._audit(AuditEventBuilder.save_failed(self._persistence.key, str(e)))
            return
        await self._audit(AuditEventBuilder.store_saved(self._persistence.key, size))

    async def load(self) -> AppState:
        """
        Load the persisted store, or start with the default store.

        An unreadable slot is logged and replaced by the default store
        on the next save.
        """
        store = None
        try:
            store = await self._persistence.load()
        except StorageError as e:
            logger.error("store_load_failed", error=str(e))
            await self._audit(AuditEventBuilder.store_load_failed(self._persistence.key, str(e)))

        from_storage = store is not None
        self._state = AppState(store=store or default_store(self._app_settings))
        await self._audit(AuditEventBuilder.store_loaded(
            len(self._state.store.profiles), from_storage
        ))
        return self._state

    # -------------------------------------------------------------------
    # Form and status
    # -------------------------------------------------------------------

    def set_form(self, **fields) -> AppState:
        self._state = commands.set_form(self._state, **fields)
        return self._state

    def set_status(self, message: str, status_type: StatusType = StatusType.INFO) -> AppState:
        self._state = commands.set_status(self._state, message, status_type)
        return self._state

    # -------------------------------------------------------------------
    # Ledger actions
    # -------------------------------------------------------------------

    async def add_entry(self) -> bool:
        """Create an entry from the current form. Returns False if the form was incomplete."""
        before = self.active_profile
        if not await self._apply(commands.add_entry(self._state)):
            return False
        entry = self.active_profile.entries[-1]
        await self._audit(AuditEventBuilder.entry_added(
            before.id, entry.id, entry.amount, entry.type.value
        ))
        return True

    async def delete_entry(self, entry_id: str) -> bool:
        profile_id = self.active_profile.id
        if not await self._apply(commands.delete_entry(self._state, entry_id)):
            return False
        await self._audit(AuditEventBuilder.entry_deleted(profile_id, entry_id))
        return True

    async def update_profile(self, **updates) -> bool:
        """Change settings of the active profile (name, tax_rate, month_filter, ...)."""
        changed = {
            k: v for k, v in updates.items()
            if k in Profile.model_fields and k != "id"
            and getattr(self.active_profile, k) != v
        }
        if not changed:
            return False
        await self._apply(commands.update_profile(self._state, **changed))
        await self._audit(AuditEventBuilder.profile_updated(
            self.active_profile.id, sorted(changed)
        ))
        return True

    async def add_profile(self, name: str) -> bool:
        if not await self._apply(commands.add_profile(self._state, name, app_settings=self._app_settings)):
            return False
        await self._audit(AuditEventBuilder.profile_created(self.active_profile.id, name))
        return True

    async def delete_profile(self) -> bool:
        """Delete the active profile. Refused when it is the last one."""
        profile_id = self.active_profile.id
        if not await self._apply(commands.delete_profile(self._state)):
            return False
        await self._audit(AuditEventBuilder.profile_deleted(profile_id))
        return True

    async def select_profile(self, profile_id: str) -> bool:
        if not await self._apply(commands.select_profile(self._state, profile_id)):
            return False
        await self._audit(AuditEventBuilder.profile_selected(profile_id))
        return True

    # -------------------------------------------------------------------
    # Import / export
    # -------------------------------------------------------------------

    async def import_file(self, content: str | bytes) -> bool:
        """
        Overwrite the active profile with an exported profile file.

        On any format problem the store stays unchanged and the status
        shows an import error.
        """
        profile = self.active_profile
        try:
            data = parse_import_payload(content)
            imported = merge_import(profile, data)
        except ImportFormatError as e:
            await self._audit(AuditEventBuilder.import_failed(profile.id, str(e)))
            self.set_status(STATUS_IMPORT_FAILED, StatusType.ERROR)
            return False

        new_state = commands.replace_active_profile(self._state, imported)
        await self._apply(commands.set_status(new_state, STATUS_IMPORT_OK, StatusType.SUCCESS))
        await self._audit(AuditEventBuilder.import_succeeded(profile.id, len(imported.entries)))
        return True

    async def export(self, export_format: ExportFormat) -> ExportArtifact:
        profile = self.active_profile
        artifact = build_export(profile, export_format)
        await self._audit(AuditEventBuilder.export_generated(
            profile.id, export_format.value, artifact.filename
        ))
        return artifact

    # -------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------

    async def send_report(self, hook_numbers: Iterable[int] = (1, 2)) -> DispatchResult:
        """Post the active profile's report to webhook 1 and/or 2."""
        self.set_status(STATUS_SENDING)
        profile = self.active_profile
        urls = [profile.webhook(n) for n in hook_numbers]
        correlation_id = create_correlation_id()

        result = await self._dispatcher.send_report(
            profile,
            urls,
            limit=self._app_settings.recent_entries_limit,
            correlation_id=correlation_id,
        )

        if result.success:
            self.set_status(STATUS_SEND_OK, StatusType.SUCCESS)
        else:
            self.set_status(STATUS_SEND_FAILED, StatusType.ERROR)
        await self._audit(AuditEventBuilder.report_sent(
            profile.id, result.attempted_count, result.success_count, correlation_id
        ))
        return result


def create_app_components(
    use_storage: bool = True,
    audit_logger: Optional[AuditLogger] = None,
) -> LedgerApp:
    """
    Factory function to create the application.

    Args:
        use_storage: Whether to persist to the local storage file.
                    Set to False to keep everything in memory.

    Returns:
        An unloaded LedgerApp; call `await app.load()` before use.
    """
    settings = get_settings()
    audit_logger = audit_logger or AuditLogger()

    if use_storage:
        storage = LocalFileStateStorage(settings.storage.path)
    else:
        storage = InMemoryStateStorage()

    persistence = StorePersistence(storage, key=settings.storage.store_key)
    dispatcher = WebhookDispatcher(settings=settings.webhook, audit_logger=audit_logger)

    return LedgerApp(
        persistence=persistence,
        dispatcher=dispatcher,
        audit_logger=audit_logger,
        app_settings=settings.app,
    )

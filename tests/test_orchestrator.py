"""
Integration tests for the LedgerApp flows.

Storage is in memory, webhooks use a fake transport.
"""

import asyncio
import json

import pytest

from finanzmanager.audit import AuditLogger
from finanzmanager.config import AppSettings, WebhookSettings
from finanzmanager.exports import ExportFormat, profile_to_json
from finanzmanager.models.audit import AuditEventType
from finanzmanager.models.ledger import Profile, Transaction, TransactionType
from finanzmanager.orchestrator import LedgerApp, create_app_components
from finanzmanager.services.storage import (
    InMemoryAuditStorage,
    InMemoryStateStorage,
    StorageError,
    StorePersistence,
    deserialize_store,
)
from finanzmanager.services.webhook import WebhookDispatcher
from finanzmanager.state import (
    STATUS_IMPORT_FAILED,
    STATUS_IMPORT_OK,
    STATUS_SEND_FAILED,
    STATUS_SEND_OK,
    StatusType,
)


KEY = "finanz_manager_store"
SETTINGS = AppSettings(default_profile_name="Mein Unternehmen", default_tax_rate=5.0)


class FailingStorage(InMemoryStateStorage):
    async def save_slot(self, key, value):
        raise StorageError("disk full")


def make_app(storage=None, transport=None):
    storage = storage if storage is not None else InMemoryStateStorage()
    audit_storage = InMemoryAuditStorage()
    audit_logger = AuditLogger(audit_storage)
    dispatcher = WebhookDispatcher(
        settings=WebhookSettings(),
        transport=transport or (lambda url, body, headers, timeout: 200),
        audit_logger=audit_logger,
    )
    app = LedgerApp(
        persistence=StorePersistence(storage, key=KEY),
        dispatcher=dispatcher,
        audit_logger=audit_logger,
        app_settings=SETTINGS,
    )
    asyncio.run(app.load())
    return app, storage, audit_storage


def add(app, description="Beratung", amount="100", day="2024-03-01",
        kind=TransactionType.INCOME):
    app.set_form(date=day, description=description, amount=amount, type=kind)
    return asyncio.run(app.add_entry())


class TestLoading:
    """Tests for startup."""

    def test_default_store_when_nothing_saved(self):
        app, storage, audit = make_app()
        assert app.active_profile.id == "default"
        assert app.active_profile.name == "Mein Unternehmen"
        assert storage.write_count == 0
        assert audit.events[-1].event_type == AuditEventType.STORE_LOADED

    def test_loads_saved_store(self):
        first, storage, _ = make_app()
        add(first)
        second, _, _ = make_app(storage=storage)
        assert len(second.active_profile.entries) == 1

    def test_corrupt_slot_falls_back_to_default(self):
        """Test that unreadable state never crashes the app."""
        app, _, audit = make_app(storage=InMemoryStateStorage({KEY: "{broken"}))
        assert app.active_profile.id == "default"
        types = [e.event_type for e in audit.events]
        assert AuditEventType.STORE_LOAD_FAILED in types


class TestPersistence:
    """Tests for persist-on-every-change."""

    def test_every_store_change_is_written(self):
        app, storage, _ = make_app()
        add(app)
        assert storage.write_count == 1
        asyncio.run(app.update_profile(tax_rate=19.0))
        assert storage.write_count == 2
        saved = deserialize_store(storage.slots[KEY])
        assert saved == app.state.store

    def test_form_and_status_changes_are_not_written(self):
        app, storage, _ = make_app()
        app.set_form(description="halb fertig")
        app.set_status("Hallo")
        assert storage.write_count == 0

    def test_noop_commands_are_not_written(self):
        app, storage, _ = make_app()
        assert add(app, description="") is False
        assert asyncio.run(app.delete_profile()) is False
        assert asyncio.run(app.update_profile(tax_rate=5.0)) is False
        assert storage.write_count == 0

    def test_unknown_profile_keys_are_not_written(self):
        """Test that an update with only unknown keys is a no-op."""
        app, storage, audit = make_app()
        before = len(audit.events)
        assert asyncio.run(app.update_profile(colour="blau")) is False
        assert storage.write_count == 0
        assert len(audit.events) == before

    def test_extra_observers_are_notified(self):
        app, _, _ = make_app()
        seen = []

        async def observer(store):
            seen.append(store)

        app.subscribe(observer)
        add(app)
        assert seen == [app.state.store]

    def test_save_failure_is_not_fatal(self):
        app, _, audit = make_app(storage=FailingStorage())
        assert add(app) is True
        assert len(app.active_profile.entries) == 1
        assert audit.events[-2].event_type == AuditEventType.SAVE_FAILED


class TestLedgerFlow:
    """Tests for editing and the derived view."""

    def test_view_reflects_filter(self):
        app, _, _ = make_app()
        add(app, amount="100", day="2024-03-01")
        add(app, description="Miete", amount="40", day="2024-03-15", kind=TransactionType.EXPENSE)
        add(app, amount="500", day="2024-02-01")
        asyncio.run(app.update_profile(month_filter="2024-03"))

        view = app.view
        assert [e.date for e in view.filtered_entries] == ["2024-03-15", "2024-03-01"]
        assert view.summary.income == 100
        assert view.summary.expense == 40
        assert view.summary.tax == pytest.approx(3)
        assert view.summary.net == pytest.approx(57)

    def test_delete_entry(self):
        app, _, audit = make_app()
        add(app)
        entry_id = app.active_profile.entries[0].id
        assert asyncio.run(app.delete_entry(entry_id)) is True
        assert app.active_profile.entries == []
        assert audit.events[-1].event_type == AuditEventType.ENTRY_DELETED

    def test_profile_lifecycle(self):
        app, _, _ = make_app()
        assert asyncio.run(app.add_profile("Zweitfirma")) is True
        new_id = app.active_profile.id
        assert app.active_profile.name == "Zweitfirma"
        assert asyncio.run(app.select_profile("default")) is True
        assert asyncio.run(app.select_profile(new_id)) is True
        assert asyncio.run(app.delete_profile()) is True
        assert list(app.state.store.profiles) == ["default"]
        assert asyncio.run(app.delete_profile()) is False
        assert len(app.state.store.profiles) == 1


class TestImportExport:
    """Tests for file import and export."""

    def test_import_overwrites_active_profile(self):
        app, storage, _ = make_app()
        source = Profile(
            id="somewhere-else",
            name="Importiert GmbH",
            tax_rate=7.5,
            entries=[Transaction(id="x", date="2024-01-01", description="Alt",
                                 amount=10, type=TransactionType.EXPENSE)],
        )
        assert asyncio.run(app.import_file(profile_to_json(source))) is True

        profile = app.active_profile
        assert profile.id == "default"
        assert profile.name == "Importiert GmbH"
        assert profile.tax_rate == 7.5
        assert profile.entries == source.entries
        assert app.state.status.message == STATUS_IMPORT_OK
        assert storage.write_count == 1

    @pytest.mark.parametrize("content", ["{broken", '{"name": "ohne Einträge"}'])
    def test_failed_import_leaves_store_unchanged(self, content):
        app, storage, audit = make_app()
        add(app)
        before = app.state.store
        assert asyncio.run(app.import_file(content)) is False
        assert app.state.store is before
        assert app.state.status.message == STATUS_IMPORT_FAILED
        assert app.state.status.type == StatusType.ERROR
        assert storage.write_count == 1
        assert audit.events[-1].event_type == AuditEventType.IMPORT_FAILED

    def test_overflowing_amount_is_rejected(self):
        """Test that an import with amount 1e999 keeps reports working."""
        app, storage, _ = make_app()
        content = (b'{"entries": [{"id": "x", "date": "2024-01-01", "description": "Riesig",'
                   b' "amount": 1e999, "type": "Einnahme"}]}')
        assert asyncio.run(app.import_file(content)) is False
        assert app.active_profile.entries == []
        assert app.state.status.message == STATUS_IMPORT_FAILED
        assert storage.write_count == 0

        asyncio.run(app.update_profile(webhook1="https://a.example/hook"))
        assert asyncio.run(app.export(ExportFormat.PDF)).content.startswith(b"%PDF")
        assert asyncio.run(app.send_report([1])).success is True

    def test_export_json_roundtrip_through_app(self):
        app, _, _ = make_app()
        add(app)
        artifact = asyncio.run(app.export(ExportFormat.JSON))
        assert artifact.filename.startswith("Export_Mein Unternehmen_")
        data = json.loads(artifact.content)

        other, _, _ = make_app()
        asyncio.run(other.import_file(artifact.content))
        assert other.active_profile.entries == app.active_profile.entries
        assert data["id"] == "default"

    def test_export_is_audited(self):
        app, _, audit = make_app()
        asyncio.run(app.export(ExportFormat.CSV))
        assert audit.events[-1].event_type == AuditEventType.EXPORT_GENERATED

    def test_rendering_reads_do_not_generate_exports(self):
        """Test that only an explicit export call produces an export event."""
        app, _, audit = make_app()
        add(app)
        assert app.view.summary.income == 100
        assert app.active_profile.entries
        assert AuditEventType.EXPORT_GENERATED not in [e.event_type for e in audit.events]

        asyncio.run(app.export(ExportFormat.PDF))
        exports = [e for e in audit.events if e.event_type == AuditEventType.EXPORT_GENERATED]
        assert len(exports) == 1


class TestSendReport:
    """Tests for the webhook flow."""

    def test_success_status(self):
        app, _, audit = make_app()
        asyncio.run(app.update_profile(webhook1="https://a.example/hook"))
        result = asyncio.run(app.send_report([1, 2]))
        assert result.success is True
        assert app.state.status.message == STATUS_SEND_OK
        assert app.state.status.type == StatusType.SUCCESS
        assert audit.events[-1].event_type == AuditEventType.REPORT_SENT

    def test_no_webhooks_configured_is_failure(self):
        app, _, _ = make_app()
        result = asyncio.run(app.send_report([1, 2]))
        assert result.attempted_count == 0
        assert app.state.status.message == STATUS_SEND_FAILED
        assert app.state.status.type == StatusType.ERROR

    def test_only_selected_hooks_are_used(self):
        calls = []

        def transport(url, body, headers, timeout):
            calls.append(url)
            return 200

        app, _, _ = make_app(transport=transport)
        asyncio.run(app.update_profile(
            webhook1="https://a.example/hook", webhook2="https://b.example/hook"
        ))
        asyncio.run(app.send_report([2]))
        assert calls == ["https://b.example/hook"]

    def test_server_errors_report_failure(self):
        app, _, _ = make_app(transport=lambda url, body, headers, timeout: 500)
        asyncio.run(app.update_profile(webhook1="https://a.example/hook"))
        assert asyncio.run(app.send_report([1])).success is False
        assert app.state.status.message == STATUS_SEND_FAILED


class TestFactory:
    def test_create_app_components_in_memory(self):
        app = create_app_components(use_storage=False)
        asyncio.run(app.load())
        assert len(app.state.store.profiles) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

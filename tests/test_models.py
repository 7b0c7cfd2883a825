"""
Tests for Finanz-Manager

Test strategy:
1. Unit tests for individual components (models, engine, formatters)
2. Integration tests for flows (with in-memory storage and fake transports)
3. No real network calls in tests
"""

import json

import pytest
from pydantic import ValidationError

from finanzmanager.models.ledger import (
    AppStore,
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


def make_profile(**overrides) -> Profile:
    data = {
        "id": "default",
        "name": "Mein Unternehmen",
        "entries": [
            Transaction(id="1", date="2024-03-01", description="Beratung",
                        amount=100, type=TransactionType.INCOME),
        ],
    }
    data.update(overrides)
    return Profile(**data)


class TestLedgerModels:
    """Tests for ledger Pydantic models."""

    def test_transaction_type_values(self):
        """Test the stored labels of the entry types."""
        assert TransactionType.INCOME.value == "Einnahme"
        assert TransactionType("Ausgabe") == TransactionType.EXPENSE

    def test_transaction_is_frozen(self):
        """Test that entries cannot be modified after creation."""
        entry = Transaction(id="1", date="2024-03-01", description="x",
                            amount=5, type=TransactionType.EXPENSE)
        with pytest.raises(ValidationError):
            entry.amount = 10

    def test_transaction_rejects_unknown_type(self):
        """Test that only known entry types are accepted."""
        with pytest.raises(ValidationError):
            Transaction(id="1", date="2024-03-01", description="x",
                        amount=5, type="Spende")

    def test_profile_defaults(self):
        """Test Profile default values."""
        profile = Profile(id="p-1")
        assert profile.tax_rate == 5.0
        assert profile.month_filter == ""
        assert profile.entries == []

    def test_profile_accepts_camel_case(self):
        """Test that wire names populate the snake_case attributes."""
        profile = Profile.model_validate({
            "id": "p-1", "taxId": "DE123", "taxRate": 19, "monthFilter": "2024-03",
        })
        assert profile.tax_id == "DE123"
        assert profile.tax_rate == 19.0
        assert profile.month_filter == "2024-03"

    def test_profile_json_dict_uses_wire_names(self):
        """Test serialization keys and integral numbers."""
        data = make_profile(tax_rate=5.0).to_json_dict()
        assert set(data) == {
            "id", "name", "taxId", "responsible", "taxRate",
            "monthFilter", "webhook1", "webhook2", "entries",
        }
        assert data["taxRate"] == 5
        assert isinstance(data["taxRate"], int)
        assert data["entries"][0] == {
            "id": "1", "date": "2024-03-01", "description": "Beratung",
            "amount": 100, "type": "Einnahme",
        }

    def test_fractional_amount_serialized_as_float(self):
        """Test that non-integral amounts keep their fraction."""
        entry = Transaction(id="1", date="2024-03-01", description="x",
                            amount=12.5, type=TransactionType.INCOME)
        assert json.loads(entry.model_dump_json())["amount"] == 12.5

    def test_webhook_slot_lookup(self):
        """Test webhook(1) and webhook(2)."""
        profile = make_profile(webhook1="https://a", webhook2="https://b")
        assert profile.webhook(1) == "https://a"
        assert profile.webhook(2) == "https://b"
        with pytest.raises(ValueError):
            profile.webhook(3)


class TestAppStore:
    """Tests for the AppStore model."""

    def test_store_requires_a_profile(self):
        """Test that an empty store is rejected."""
        with pytest.raises(ValidationError, match="at least one profile"):
            AppStore(active_profile_id="x", profiles={})

    def test_store_rejects_mismatched_keys(self):
        """Test that profile keys must equal profile ids."""
        with pytest.raises(ValidationError, match="does not match"):
            AppStore(active_profile_id="a", profiles={"a": Profile(id="b")})

    def test_active_profile_resolves(self):
        """Test normal active profile lookup."""
        store = AppStore(
            active_profile_id="b",
            profiles={"a": Profile(id="a"), "b": Profile(id="b")},
        )
        assert store.active_profile.id == "b"

    def test_active_profile_fallback_is_smallest_id(self):
        """Test the fallback when the active id does not resolve."""
        store = AppStore(
            active_profile_id="gone",
            profiles={"p-2": Profile(id="p-2"), "default": Profile(id="default")},
        )
        assert store.resolved_active_id == "default"
        assert store.active_profile.id == "default"

    def test_store_json_roundtrip(self):
        """Test that a store survives serialization."""
        store = AppStore(active_profile_id="default", profiles={"default": make_profile()})
        restored = AppStore.model_validate_json(json.dumps(store.to_json_dict()))
        assert restored == store
        assert "activeProfileId" in store.to_json_dict()


class TestSummaryModel:
    """Tests for derived value models."""

    def test_summary_defaults_to_zero(self):
        summary = Summary()
        assert (summary.income, summary.expense, summary.tax, summary.net) == (0, 0, 0, 0)


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            description="Entry added",
        )
        assert event.event_type == AuditEventType.ENTRY_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.entry_added("default", "e-1", 100.0, "Einnahme")
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "entry_added"
        assert log_dict["entity_id"] == "e-1"
        assert log_dict["details"]["profile_id"] == "default"

    def test_import_failed_is_warning(self):
        """Test AuditEventBuilder.import_failed."""
        event = AuditEventBuilder.import_failed("default", "bad json")
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "bad json"
        assert event.is_user_action is True

    def test_report_sent_severity_depends_on_success(self):
        """Test that a report nobody received is a warning."""
        from uuid import uuid4

        ok = AuditEventBuilder.report_sent("default", 2, 1, uuid4())
        failed = AuditEventBuilder.report_sent("default", 2, 0, uuid4())
        assert ok.severity == AuditSeverity.INFO
        assert failed.severity == AuditSeverity.WARNING


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

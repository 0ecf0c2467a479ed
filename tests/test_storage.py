"""
Tests for the storage layer and the derived read helpers.
"""

import json
from datetime import date
from unittest.mock import MagicMock

import pytest

from finance_tracker.models.audit import AuditEventType
from finance_tracker.models.finance import TransactionType
from finance_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    StorageWriteError,
    calculate_balance,
    calculate_spending_by_category,
    find_by_id,
    get_current_month_transactions,
    get_transactions_by_category,
)


class TestJsonFileStorage:
    """Tests for the JSON file backend."""

    def test_missing_file_creates_empty_document(self, tmp_path):
        """Test that a missing file is created with the seeded document."""
        path = tmp_path / "data" / "finance-data.json"
        storage = JsonFileStorage(path=path)

        doc = storage.load()

        assert doc.accounts[0].name == "Main Account"
        assert path.exists()
        assert json.loads(path.read_text())["defaultCurrency"] == "USD"

    def test_round_trip(self, tmp_path, make_transaction):
        """Test that a saved document loads back unchanged."""
        storage = JsonFileStorage(path=tmp_path / "f.json")
        doc = storage.load()
        doc.transactions.append(make_transaction(25, description="Pizza, large"))

        storage.save(doc)
        loaded = storage.load()

        assert [t.model_dump() for t in loaded.transactions] == [t.model_dump() for t in doc.transactions]
        assert loaded.last_updated == doc.last_updated

    def test_save_stamps_last_updated(self, tmp_path, document):
        storage = JsonFileStorage(path=tmp_path / "f.json")
        before = document.last_updated

        storage.save(document)

        assert document.last_updated >= before

    def test_corrupt_file_is_replaced(self, tmp_path):
        """Test that corruption is recovered and logged, not raised."""
        path = tmp_path / "f.json"
        path.write_text("{ not json", encoding="utf-8")
        audit_logger = MagicMock()
        storage = JsonFileStorage(path=path, audit_logger=audit_logger)

        doc = storage.load()

        assert doc.transactions == []
        assert json.loads(path.read_text())["accounts"][0]["id"] == "default"
        event = audit_logger.log.call_args[0][0]
        assert event.event_type == AuditEventType.STORAGE_RECOVERED

    def test_invalid_document_shape_is_replaced(self, tmp_path):
        """Test that valid JSON with the wrong shape is also recovered."""
        path = tmp_path / "f.json"
        path.write_text(json.dumps({"transactions": [{"amount": "lots"}]}), encoding="utf-8")

        doc = JsonFileStorage(path=path, audit_logger=MagicMock()).load()

        assert doc.transactions == []

    def test_save_failure_raises(self, tmp_path, document):
        """Test that write failures propagate as StorageWriteError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        storage = JsonFileStorage(path=blocker / "f.json")

        with pytest.raises(StorageWriteError):
            storage.save(document)

    def test_load_never_raises_when_unwritable(self, tmp_path):
        """Test that load still returns a document when it cannot persist it."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        storage = JsonFileStorage(path=blocker / "f.json")

        doc = storage.load()

        assert doc.accounts[0].id == "default"


class TestInMemoryStorage:
    """Tests for the in-memory backend."""

    def test_first_load_persists_empty_document(self):
        storage = InMemoryStorage()
        storage.load()
        assert storage.save_count == 1

    def test_loads_are_independent_copies(self, make_transaction):
        """Test that mutating a loaded document does not touch storage."""
        storage = InMemoryStorage()
        doc = storage.load()
        doc.transactions.append(make_transaction(10))

        assert storage.load().transactions == []


class TestReadHelpers:
    """Tests for the derived read helpers."""

    def test_current_month_filter(self, make_document, make_transaction, today):
        doc = make_document(
            make_transaction(10, on=date(2024, 6, 1)),
            make_transaction(20, on=date(2024, 5, 31)),
            make_transaction(30, on=date(2023, 6, 15)),
        )
        monthly = get_current_month_transactions(doc, today)
        assert [t.amount for t in monthly] == [10]

    def test_category_filter_ignores_case(self, make_transaction):
        txns = [
            make_transaction(10, category="Groceries"),
            make_transaction(20, category="groceries"),
            make_transaction(30, category="Groceries & More"),
        ]
        assert [t.amount for t in get_transactions_by_category(txns, "GROCERIES")] == [10, 20]

    def test_balance(self, make_document, make_transaction):
        doc = make_document(
            make_transaction(1000, type=TransactionType.INCOME, category="Income"),
            make_transaction(250),
            make_transaction(50.5),
        )
        assert calculate_balance(doc) == pytest.approx(699.5)

    def test_spending_by_category_is_expense_only(self, make_transaction):
        txns = [
            make_transaction(100, type=TransactionType.INCOME, category="Income"),
            make_transaction(20, category="Shopping"),
            make_transaction(5, category="Food & Dining"),
            make_transaction(30, category="Shopping"),
        ]
        spending = calculate_spending_by_category(txns)
        assert spending == {"Shopping": 50, "Food & Dining": 5}
        assert list(spending) == ["Shopping", "Food & Dining"]

    def test_find_by_id(self, make_transaction):
        txns = [make_transaction(1), make_transaction(2)]
        assert find_by_id(txns, txns[1].id) == 1
        assert find_by_id(txns, "missing") is None

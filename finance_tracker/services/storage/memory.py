"""
In-Memory Storage

Holds the document as serialized JSON so every load hands out a fresh
copy, exactly like reading the file again would.
"""

from typing import Optional

from finance_tracker.models.finance import (
    FinanceDocument,
    create_empty_document,
    utcnow,
)
from finance_tracker.services.storage.interface import FinanceStorageInterface


class InMemoryStorage(FinanceStorageInterface):
    """Storage backend for tests and ephemeral sessions."""

    def __init__(self, document: Optional[FinanceDocument] = None):
        self._raw: Optional[str] = document.to_json() if document is not None else None
        self.save_count = 0

    def load(self) -> FinanceDocument:
        if self._raw is None:
            document = create_empty_document()
            self.save(document)
            return document
        return FinanceDocument.model_validate_json(self._raw)

    def save(self, document: FinanceDocument) -> None:
        document.last_updated = utcnow()
        self._raw = document.to_json()
        self.save_count += 1

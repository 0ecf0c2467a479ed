"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for persisting the
finance document. This allows us to:
1. Keep the JSON file today and swap in something else later
2. Use in-memory storage for testing
3. Keep every engine free of I/O

The contract is deliberately tiny: the whole document is loaded and
saved in one piece. There is no locking; two concurrent writers race
and the last full save wins.
"""

from abc import ABC, abstractmethod

from finance_tracker.models.finance import FinanceDocument


class FinanceStorageInterface(ABC):
    """
    Abstract interface for finance document storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self) -> FinanceDocument:
        """
        Load the current finance document.

        Never raises: a missing or unreadable document is replaced by a
        fresh empty one, which is persisted before being returned.
        """
        pass

    @abstractmethod
    def save(self, document: FinanceDocument) -> None:
        """
        Persist the full document, stamping `last_updated` first.

        Raises:
            StorageError: If the document cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageWriteError(StorageError):
    """The document could not be written."""
    pass

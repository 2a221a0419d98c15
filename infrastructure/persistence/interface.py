"""
Persistence Interface
=====================

Abstract base class defining the contract for document persistence.
Records are plain dicts grouped by collection name; the backend assigns ids.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional


class PersistenceInterface(ABC):
    """
    Abstract interface for document persistence.

    Concrete implementations:
        - DjangoDocumentPersistence: Rows in the storefront StoredDocument table
        - InMemoryPersistence: Dict-backed store for tests and development

    Time fields may be written as ``SERVER_TIMESTAMP``; backends either stamp
    their own clock or keep the marker for readers to resolve.
    """

    @abstractmethod
    def create(self, collection: str, record: Mapping[str, Any]) -> str:
        """
        Store a new document.

        Args:
            collection: Collection name (e.g., "orders")
            record: Document fields

        Returns:
            Id assigned to the new document

        Raises:
            PersistenceException: If the write fails
        """
        pass

    @abstractmethod
    def update(self, collection: str, document_id: str, fields: Mapping[str, Any]) -> None:
        """
        Merge fields into an existing document.

        Raises:
            PersistenceException: If the document does not exist or the write fails
        """
        pass

    @abstractmethod
    def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch one document by id.

        Returns:
            Document fields plus "id", or None if absent
        """
        pass

    @abstractmethod
    def find_by(self, collection: str, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """
        Fetch the newest document whose top-level field equals value.

        Returns:
            Document fields plus "id", or None if nothing matches
        """
        pass


class PersistenceException(Exception):
    """Base exception for persistence operations."""

    pass

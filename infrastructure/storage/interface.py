"""
Key-Value Storage Interface
===========================

Abstract base class defining the contract for durable string key-value storage.
Backs per-user data such as the local order history.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for key-value storage.

    Concrete implementations:
        - CacheKeyValueStorage: Django cache framework (Redis or LocMem)
        - InMemoryKeyValueStorage: Process-local dict for tests and development
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            Stored string, or None if the key is absent

        Raises:
            StorageException: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageException: If the backend cannot be written
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Delete a key. Removing an absent key is not an error.

        Raises:
            StorageException: If the backend cannot be written
        """
        pass


class StorageException(Exception):
    """Base exception for storage operations."""

    pass

"""
Storage Factory
===============

Factory pattern for creating key-value storage instances based on configuration.
"""

import logging
from typing import Literal

from django.conf import settings

from .cache_adapter import CacheKeyValueStorage
from .interface import KeyValueStorageInterface
from .memory_adapter import InMemoryKeyValueStorage

logger = logging.getLogger(__name__)

StorageBackend = Literal["cache", "memory"]


class StorageFactory:
    """
    Factory for creating key-value storage backends.

    Usage:
        # In settings.py
        INFRASTRUCTURE = {"STORAGE_BACKEND": "cache"}  # or 'memory'

        # In your code
        storage = StorageFactory.create()
    """

    @staticmethod
    def create(backend: StorageBackend | None = None) -> KeyValueStorageInterface:
        """
        Create a storage backend instance.

        Args:
            backend: 'cache' or 'memory'. If None, reads
                     settings.INFRASTRUCTURE["STORAGE_BACKEND"] (default 'cache')

        Raises:
            ValueError: If backend type is invalid
        """
        backend_type = backend or getattr(settings, "INFRASTRUCTURE", {}).get("STORAGE_BACKEND", "cache")

        logger.info(f"Creating key-value storage backend: {backend_type}")

        if backend_type == "cache":
            return CacheKeyValueStorage()
        elif backend_type == "memory":
            return InMemoryKeyValueStorage()
        else:
            raise ValueError(f"Invalid storage backend: {backend_type}. Must be 'cache' or 'memory'")

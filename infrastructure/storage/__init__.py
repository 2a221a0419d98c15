"""
Key-Value Storage Abstraction Layer
====================================

Provides a unified interface for durable per-user key-value storage.
"""

from .cache_adapter import CacheKeyValueStorage
from .factory import StorageFactory
from .interface import KeyValueStorageInterface, StorageException
from .memory_adapter import InMemoryKeyValueStorage

__all__ = [
    "KeyValueStorageInterface",
    "StorageException",
    "CacheKeyValueStorage",
    "InMemoryKeyValueStorage",
    "StorageFactory",
]

"""
In-Memory Storage Adapter
=========================

Process-local KeyValueStorageInterface implementation for tests and development.
"""

import logging
import threading
from typing import Dict, Optional

from .interface import KeyValueStorageInterface, StorageException

logger = logging.getLogger(__name__)


class InMemoryKeyValueStorage(KeyValueStorageInterface):
    """
    Dict-backed storage.

    Call ``fail_with(exc)`` to make every operation raise, which lets tests
    exercise callers' handling of storage outages.
    """

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._failure: Optional[Exception] = None

    def fail_with(self, error: Optional[Exception]) -> None:
        self._failure = error

    def _check(self) -> None:
        if self._failure is not None:
            raise StorageException(f"Storage unavailable: {self._failure}") from self._failure

    def get(self, key: str) -> Optional[str]:
        self._check()
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._check()
        with self._lock:
            self._data[key] = value
        logger.debug(f"[MEMORY STORAGE] Set {key}")

    def remove(self, key: str) -> None:
        self._check()
        with self._lock:
            self._data.pop(key, None)

    def keys(self):
        with self._lock:
            return sorted(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

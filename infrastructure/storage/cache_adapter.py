"""
Django Cache Storage Adapter
============================

KeyValueStorageInterface on top of Django's cache framework. With the
Redis backend configured (REDIS_URL set) values survive restarts;
otherwise the configured local-memory cache is used.
"""

import logging
from typing import Optional

from django.conf import settings
from django.core.cache import caches

from .interface import KeyValueStorageInterface, StorageException

logger = logging.getLogger(__name__)


class CacheKeyValueStorage(KeyValueStorageInterface):
    """
    Key-value storage backed by a Django cache alias.

    Configuration (in settings.py):
        STOREFRONT_STORAGE_CACHE_ALIAS: Cache alias to use (default: "default")

    Values are written without expiry.
    """

    def __init__(self, alias: Optional[str] = None):
        self.alias = alias or getattr(settings, "STOREFRONT_STORAGE_CACHE_ALIAS", "default")

    @property
    def cache(self):
        return caches[self.alias]

    def get(self, key: str) -> Optional[str]:
        try:
            return self.cache.get(key)
        except Exception as e:
            logger.error(f"Cache read failed for key {key}: {str(e)}")
            raise StorageException(f"Storage read failed: {str(e)}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self.cache.set(key, value, timeout=None)
            logger.debug(f"Stored {len(value)} chars under {key} in cache '{self.alias}'")
        except Exception as e:
            logger.error(f"Cache write failed for key {key}: {str(e)}")
            raise StorageException(f"Storage write failed: {str(e)}") from e

    def remove(self, key: str) -> None:
        try:
            self.cache.delete(key)
        except Exception as e:
            logger.error(f"Cache delete failed for key {key}: {str(e)}")
            raise StorageException(f"Storage delete failed: {str(e)}") from e

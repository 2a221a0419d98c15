"""
LocalOrderCache - Per-User Order History

A bounded, newest-first list of OrderRecords per user, kept in key-value
storage under ``orders:<user_id>``. Each user's list lives under its own key
and no operation for one user reads or writes another user's key.
"""

import json
import threading
from typing import List, Optional

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder

from infrastructure.storage import KeyValueStorageInterface
from storefront.domain import OrderRecord

from .base import BaseService

DEFAULT_CAPACITY = 50
KEY_PREFIX = "orders"


class LocalOrderCache(BaseService):
    """
    Bounded per-user append log of placed orders.

    New records go to the front; once a list holds ``capacity`` entries the
    oldest ones are dropped silently.

    Storage errors propagate as StorageException. An unreadable stored value
    is treated as an empty history.
    """

    def __init__(self, storage: Optional[KeyValueStorageInterface] = None, capacity: Optional[int] = None):
        super().__init__()
        if storage is None:
            from infrastructure.container import container

            storage = container.storage()
        self.storage = storage
        self.capacity = capacity if capacity is not None else getattr(settings, "STOREFRONT", {}).get(
            "ORDER_HISTORY_CAPACITY", DEFAULT_CAPACITY
        )
        self._lock = threading.Lock()

    @staticmethod
    def key_for(user_id) -> str:
        return f"{KEY_PREFIX}:{user_id}"

    def _read(self, user_id) -> List[dict]:
        raw = self.storage.get(self.key_for(user_id))
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except (TypeError, ValueError) as e:
            self.logger.warning(f"Discarding unreadable order history for user {user_id}: {e}")
            return []
        if not isinstance(entries, list):
            self.logger.warning(f"Discarding malformed order history for user {user_id}")
            return []
        return entries

    def list_for(self, user_id) -> List[OrderRecord]:
        records = []
        for entry in self._read(user_id):
            try:
                records.append(OrderRecord.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                self.logger.warning(f"Skipping unreadable order history entry for user {user_id}: {e}")
        return records

    def append_for(self, user_id, record: OrderRecord) -> None:
        with self._lock:
            entries = [record.to_dict(), *self._read(user_id)][: self.capacity]
            self.storage.set(self.key_for(user_id), json.dumps(entries, cls=DjangoJSONEncoder))
        self.logger.info(f"Cached order {record.order_id} for user {user_id} ({len(entries)} in history)")

    def clear_for(self, user_id) -> None:
        with self._lock:
            self.storage.remove(self.key_for(user_id))
        self.logger.info(f"Cleared order history for user {user_id}")

    def find_for(self, user_id, order_id: str) -> Optional[OrderRecord]:
        for record in self.list_for(user_id):
            if record.order_id == order_id:
                return record
        return None

"""
In-Memory Persistence
=====================

Dict-backed PersistenceInterface for tests and development.
"""

import copy
import logging
import uuid
from collections import defaultdict
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .interface import PersistenceException, PersistenceInterface

logger = logging.getLogger(__name__)


class InMemoryPersistence(PersistenceInterface):
    """
    Mock persistence that keeps documents in process memory.

    Unlike the database backend it stores ``SERVER_TIMESTAMP`` markers as-is,
    the way a document store returns a write it has not acknowledged yet.

    Test helpers:
        - calls: (operation, collection) tuples in call order
        - fail_with(error, operation): make create/update raise
    """

    def __init__(self):
        self.documents: Dict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)
        self.calls: List[Tuple[str, str]] = []
        self._failures: Dict[str, Exception] = {}

    def fail_with(self, error: Optional[Exception], operation: str = "create") -> None:
        if error is None:
            self._failures.pop(operation, None)
        else:
            self._failures[operation] = error

    def _check(self, operation: str, collection: str) -> None:
        self.calls.append((operation, collection))
        error = self._failures.get(operation)
        if error is not None:
            raise PersistenceException(str(error)) from error

    def create(self, collection: str, record: Mapping[str, Any]) -> str:
        self._check("create", collection)
        document_id = uuid.uuid4().hex
        self.documents[collection][document_id] = copy.deepcopy(dict(record))
        logger.info(f"[MOCK PERSISTENCE] Created {collection}/{document_id}")
        return document_id

    def update(self, collection: str, document_id: str, fields: Mapping[str, Any]) -> None:
        self._check("update", collection)
        document = self.documents[collection].get(document_id)
        if document is None:
            raise PersistenceException(f"Document {document_id} not found in {collection}")
        document.update(copy.deepcopy(dict(fields)))

    def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        document = self.documents[collection].get(document_id)
        if document is None:
            return None
        return {**copy.deepcopy(document), "id": document_id}

    def find_by(self, collection: str, field: str, value: Any) -> Optional[Dict[str, Any]]:
        for document_id, document in reversed(list(self.documents[collection].items())):
            if document.get(field) == value:
                return {**copy.deepcopy(document), "id": document_id}
        return None

    def count(self, collection: str) -> int:
        return len(self.documents[collection])

    def call_count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

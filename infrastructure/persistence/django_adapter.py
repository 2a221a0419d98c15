"""
Django Document Persistence
===========================

PersistenceInterface implementation storing documents as JSON rows in the
storefront ``StoredDocument`` model.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

from django.apps import apps
from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction
from django.utils import timezone

from storefront.domain.timestamps import PendingServerTime

from .interface import PersistenceException, PersistenceInterface

logger = logging.getLogger(__name__)


def _stamp(value: Any, now) -> Any:
    if isinstance(value, PendingServerTime):
        return now
    if isinstance(value, Mapping):
        return {key: _stamp(item, now) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_stamp(item, now) for item in value]
    return value


def _to_json(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Replace pending server times with the write time and coerce to JSON types."""
    return json.loads(json.dumps(_stamp(fields, timezone.now()), cls=DjangoJSONEncoder))


class DjangoDocumentPersistence(PersistenceInterface):
    """
    Document store on the default database.

    Pending server timestamps are stamped with the database write time, so
    documents read back from this backend always hold concrete instants.
    """

    def __init__(self, model=None):
        self._model = model

    @property
    def model(self):
        return self._model or apps.get_model("storefront", "StoredDocument")

    def create(self, collection: str, record: Mapping[str, Any]) -> str:
        try:
            document = self.model.objects.create(collection=collection, data=_to_json(record))
        except Exception as e:
            logger.error(f"Failed to create document in {collection}: {str(e)}")
            raise PersistenceException(f"Create in {collection} failed: {str(e)}") from e

        logger.info(f"Created {collection} document {document.pk}")
        return str(document.pk)

    def update(self, collection: str, document_id: str, fields: Mapping[str, Any]) -> None:
        try:
            with transaction.atomic():
                document = self.model.objects.select_for_update().get(pk=document_id, collection=collection)
                document.data = {**document.data, **_to_json(fields)}
                document.save(update_fields=["data", "updated_at"])
        except (self.model.DoesNotExist, ValidationError) as e:
            raise PersistenceException(f"Document {document_id} not found in {collection}") from e
        except Exception as e:
            logger.error(f"Failed to update {collection} document {document_id}: {str(e)}")
            raise PersistenceException(f"Update of {collection}/{document_id} failed: {str(e)}") from e

        logger.debug(f"Updated {collection} document {document_id}: {sorted(fields)}")

    def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        try:
            document = self.model.objects.get(pk=document_id, collection=collection)
        except (self.model.DoesNotExist, ValidationError):
            return None
        return document.as_record()

    def find_by(self, collection: str, field: str, value: Any) -> Optional[Dict[str, Any]]:
        document = (
            self.model.objects.filter(collection=collection, **{f"data__{field}": value})
            .order_by("-created_at")
            .first()
        )
        return document.as_record() if document else None

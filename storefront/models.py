import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class StoredDocument(models.Model):
    """A JSON document in a named collection (e.g. placed orders)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    collection = models.CharField(max_length=64, db_index=True)
    data = models.JSONField(default=dict, encoder=DjangoJSONEncoder)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "storefront"
        indexes = [models.Index(fields=["collection", "created_at"], name="sf_document_collection_idx")]

    def __str__(self):
        return f"{self.collection}/{self.id}"

    def as_record(self) -> dict:
        record = dict(self.data)
        record.setdefault("created_at", self.created_at.isoformat())
        record["id"] = str(self.id)
        return record

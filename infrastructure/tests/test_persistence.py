"""
Persistence Infrastructure Tests
================================

Tests for the document persistence backends.
"""

import uuid
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from infrastructure.persistence import (
    DjangoDocumentPersistence,
    InMemoryPersistence,
    PersistenceException,
    PersistenceFactory,
    PersistenceInterface,
)
from storefront.domain import SERVER_TIMESTAMP, PendingServerTime
from storefront.models import StoredDocument


class PersistenceInterfaceTest(TestCase):
    def test_interface_is_abstract(self):
        with self.assertRaises(TypeError):
            PersistenceInterface()


class DjangoDocumentPersistenceTest(TestCase):
    """Test DjangoDocumentPersistence against the test database."""

    def setUp(self):
        self.persistence = DjangoDocumentPersistence()

    def test_create_stamps_server_time(self):
        before = timezone.now()

        document_id = self.persistence.create(
            "orders", {"order_id": "AGC-1", "created_at": SERVER_TIMESTAMP, "total": Decimal("6.30")}
        )

        stored = StoredDocument.objects.get(pk=document_id)
        self.assertEqual(stored.collection, "orders")
        self.assertEqual(stored.data["order_id"], "AGC-1")
        self.assertEqual(stored.data["total"], "6.30")
        self.assertGreaterEqual(parse_datetime(stored.data["created_at"]), before.replace(microsecond=0))

    def test_update_merges_fields(self):
        document_id = self.persistence.create("orders", {"order_id": "AGC-2", "status": "confirmed"})

        self.persistence.update("orders", document_id, {"internal_id": document_id})

        document = self.persistence.get("orders", document_id)
        self.assertEqual(document["internal_id"], document_id)
        self.assertEqual(document["status"], "confirmed")
        self.assertEqual(document["id"], document_id)

    def test_update_missing_document(self):
        with self.assertRaises(PersistenceException):
            self.persistence.update("orders", str(uuid.uuid4()), {"status": "shipped"})

    def test_update_with_malformed_id(self):
        with self.assertRaises(PersistenceException):
            self.persistence.update("orders", "not-a-uuid", {"status": "shipped"})

    def test_update_respects_collection(self):
        document_id = self.persistence.create("carts", {"order_id": "AGC-3"})

        with self.assertRaises(PersistenceException):
            self.persistence.update("orders", document_id, {"status": "shipped"})

    def test_get_missing(self):
        self.assertIsNone(self.persistence.get("orders", str(uuid.uuid4())))
        self.assertIsNone(self.persistence.get("orders", "not-a-uuid"))

    def test_find_by(self):
        self.persistence.create("orders", {"order_id": "AGC-4", "status": "confirmed"})
        self.persistence.create("orders", {"order_id": "AGC-5", "status": "confirmed"})

        document = self.persistence.find_by("orders", "order_id", "AGC-5")

        self.assertEqual(document["order_id"], "AGC-5")
        self.assertIsNone(self.persistence.find_by("orders", "order_id", "AGC-6"))
        self.assertIsNone(self.persistence.find_by("carts", "order_id", "AGC-5"))

    def test_database_errors_are_wrapped(self):
        with patch.object(StoredDocument.objects, "create", side_effect=RuntimeError("database is locked")):
            with self.assertRaises(PersistenceException) as ctx:
                self.persistence.create("orders", {"order_id": "AGC-7"})

        self.assertIn("database is locked", str(ctx.exception))


class InMemoryPersistenceTest(TestCase):
    def setUp(self):
        self.persistence = InMemoryPersistence()

    def test_keeps_pending_server_time(self):
        document_id = self.persistence.create("orders", {"order_id": "AGC-1", "created_at": SERVER_TIMESTAMP})

        document = self.persistence.get("orders", document_id)

        self.assertIsInstance(document["created_at"], PendingServerTime)

    def test_records_calls(self):
        document_id = self.persistence.create("orders", {"order_id": "AGC-1"})
        self.persistence.update("orders", document_id, {"internal_id": document_id})

        self.assertEqual(self.persistence.calls, [("create", "orders"), ("update", "orders")])
        self.assertEqual(self.persistence.count("orders"), 1)

    def test_fail_with_keeps_message(self):
        self.persistence.fail_with(RuntimeError("connection refused"))

        with self.assertRaises(PersistenceException) as ctx:
            self.persistence.create("orders", {"order_id": "AGC-1"})

        self.assertEqual(str(ctx.exception), "connection refused")
        self.assertEqual(self.persistence.count("orders"), 0)

    def test_stored_documents_are_copies(self):
        record = {"order_id": "AGC-1", "items": [{"id": "p1"}]}
        document_id = self.persistence.create("orders", record)

        record["items"].append({"id": "p2"})

        self.assertEqual(len(self.persistence.get("orders", document_id)["items"]), 1)


class PersistenceFactoryTest(TestCase):
    def test_create_backends(self):
        self.assertIsInstance(PersistenceFactory.create("django"), DjangoDocumentPersistence)
        self.assertIsInstance(PersistenceFactory.create("memory"), InMemoryPersistence)

    def test_invalid_backend(self):
        with self.assertRaises(ValueError):
            PersistenceFactory.create("mongodb")

"""
Notification Infrastructure Tests
=================================

Tests for the order confirmation channels.
"""

from datetime import datetime
from datetime import timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch

from django.core import mail
from django.test import TestCase, override_settings

from infrastructure.notifications import (
    EmailNotificationService,
    MockNotificationService,
    NotificationException,
    NotificationFactory,
    NotificationServiceInterface,
    OrderConfirmationPayload,
    OrderLine,
)


def make_payload(**overrides) -> OrderConfirmationPayload:
    values = {
        "recipient": "ana@example.com",
        "customer_name": "Ana Torres",
        "order_id": "AGC-LZ7Q3K2A-4F9XQ1",
        "order_date": datetime(2024, 3, 1, 10, 0, tzinfo=dt_timezone.utc),
        "items": (OrderLine(name="Apples", quantity=2, unit_price=Decimal("1.25"), line_total=Decimal("2.50")),),
        "totals": {
            "subtotal": Decimal("2.50"),
            "tax": Decimal("0.30"),
            "shipping": Decimal("3.50"),
            "total": Decimal("6.30"),
        },
        "payment_method": "Cash on Delivery",
        "shipping_address": {"address": "Av. Amazonas 123", "city": "Quito", "province": "Pichincha"},
        "tracking_number": "AGCA-4F9XQ1",
        "estimated_delivery": datetime(2024, 3, 3, 10, 0, tzinfo=dt_timezone.utc),
    }
    values.update(overrides)
    return OrderConfirmationPayload(**values)


class NotificationInterfaceTest(TestCase):
    def test_interface_is_abstract(self):
        with self.assertRaises(TypeError):
            NotificationServiceInterface()


@override_settings(
    EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend",
    DEFAULT_FROM_EMAIL="orders@example.com",
    STOREFRONT={"STORE_NAME": "Agro Market", "SUPPORT_EMAIL": "help@example.com"},
)
class EmailNotificationServiceTest(TestCase):
    def setUp(self):
        self.service = EmailNotificationService()

    def test_sends_confirmation_email(self):
        receipt = self.service.send_order_confirmation(make_payload())

        self.assertTrue(receipt.success)
        self.assertTrue(receipt.message_id)
        self.assertEqual(len(mail.outbox), 1)

        message = mail.outbox[0]
        self.assertEqual(message.subject, "Order Confirmation #AGC-LZ7Q3K2A-4F9XQ1")
        self.assertEqual(message.to, ["ana@example.com"])
        self.assertEqual(message.from_email, "orders@example.com")
        self.assertEqual(message.extra_headers["Message-ID"], receipt.message_id)

    def test_email_content(self):
        self.service.send_order_confirmation(make_payload())

        message = mail.outbox[0]
        self.assertIn("Ana Torres", message.body)
        self.assertIn("AGCA-4F9XQ1", message.body)
        self.assertIn("6.30", message.body)
        self.assertIn("Agro Market", message.body)

        html, mimetype = message.alternatives[0]
        self.assertEqual(mimetype, "text/html")
        self.assertIn("Apples", html)
        self.assertIn("help@example.com", html)

    def test_send_failure_raises(self):
        with patch("infrastructure.notifications.email_service.EmailMultiAlternatives.send") as send:
            send.side_effect = ConnectionRefusedError("smtp down")

            with self.assertRaises(NotificationException):
                self.service.send_order_confirmation(make_payload())

    def test_nothing_sent_gives_failed_receipt(self):
        with patch("infrastructure.notifications.email_service.EmailMultiAlternatives.send", return_value=0):
            receipt = self.service.send_order_confirmation(make_payload())

        self.assertFalse(receipt.success)


class MockNotificationServiceTest(TestCase):
    def setUp(self):
        self.service = MockNotificationService()

    def test_records_payloads(self):
        payload = make_payload()

        receipt = self.service.send_order_confirmation(payload)

        self.assertTrue(receipt.success)
        self.assertEqual(self.service.get_sent_count(), 1)
        self.assertIs(self.service.get_last_payload(), payload)

    def test_fail_with_raises_given_error(self):
        self.service.fail_with(RuntimeError("boom"))

        with self.assertRaises(RuntimeError):
            self.service.send_order_confirmation(make_payload())

    def test_reject(self):
        self.service.reject()

        receipt = self.service.send_order_confirmation(make_payload())

        self.assertFalse(receipt.success)
        self.assertEqual(self.service.get_sent_count(), 0)

    def test_clear(self):
        self.service.send_order_confirmation(make_payload())
        self.service.reject()

        self.service.clear()

        self.assertEqual(self.service.get_sent_count(), 0)
        self.assertTrue(self.service.send_order_confirmation(make_payload()).success)


class NotificationFactoryTest(TestCase):
    def test_create_backends(self):
        self.assertIsInstance(NotificationFactory.create("email"), EmailNotificationService)
        self.assertIsInstance(NotificationFactory.create("mock"), MockNotificationService)

    @override_settings(INFRASTRUCTURE={}, TESTING=True)
    def test_defaults_to_mock_when_testing(self):
        self.assertIsInstance(NotificationFactory.create(), MockNotificationService)

    @override_settings(INFRASTRUCTURE={}, TESTING=False)
    def test_defaults_to_email_otherwise(self):
        self.assertIsInstance(NotificationFactory.create(), EmailNotificationService)

    def test_invalid_backend(self):
        with self.assertRaises(ValueError):
            NotificationFactory.create("sms")

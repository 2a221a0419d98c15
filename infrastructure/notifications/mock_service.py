"""
Mock Notification Service
=========================

Mock implementation of NotificationServiceInterface for testing.
Logs notifications instead of sending them.
"""

import logging
import uuid
from typing import List, Optional

from .interface import NotificationReceipt, NotificationServiceInterface, OrderConfirmationPayload

logger = logging.getLogger(__name__)


class MockNotificationService(NotificationServiceInterface):
    """
    Mock notification service for testing and development.

    Instead of sending, this service:
        - Logs each confirmation
        - Stores payloads in memory for verification
        - Succeeds unless told otherwise with fail_with() or reject()
    """

    def __init__(self):
        self.sent_payloads: List[OrderConfirmationPayload] = []
        self._failure: Optional[Exception] = None
        self._rejecting = False

    def fail_with(self, error: Optional[Exception]) -> None:
        """Raise ``error`` from every subsequent send (None to stop)."""
        self._failure = error

    def reject(self, rejecting: bool = True) -> None:
        """Return unsuccessful receipts instead of raising."""
        self._rejecting = rejecting

    def send_order_confirmation(self, payload: OrderConfirmationPayload) -> NotificationReceipt:
        if self._failure is not None:
            raise self._failure

        if self._rejecting:
            logger.info(f"[MOCK NOTIFICATION] Rejected confirmation for {payload.order_id}")
            return NotificationReceipt(success=False, message="Rejected by mock")

        logger.info(
            f"[MOCK NOTIFICATION] To: {payload.recipient}, Order: {payload.order_id}, "
            f"Tracking: {payload.tracking_number}"
        )
        self.sent_payloads.append(payload)
        return NotificationReceipt(success=True, message_id=f"mock-{uuid.uuid4().hex[:12]}", message="Logged")

    def clear(self) -> None:
        self.sent_payloads.clear()
        self._failure = None
        self._rejecting = False

    def get_sent_count(self) -> int:
        return len(self.sent_payloads)

    def get_last_payload(self) -> Optional[OrderConfirmationPayload]:
        return self.sent_payloads[-1] if self.sent_payloads else None

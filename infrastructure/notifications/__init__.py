"""
Notification Service Abstraction Layer
========================================

Provides a unified interface for customer notifications (order confirmations).
"""

from .email_service import EmailNotificationService
from .factory import NotificationFactory
from .interface import (
    NotificationException,
    NotificationReceipt,
    NotificationServiceInterface,
    OrderConfirmationPayload,
    OrderLine,
)
from .mock_service import MockNotificationService

__all__ = [
    "NotificationServiceInterface",
    "NotificationException",
    "NotificationReceipt",
    "OrderConfirmationPayload",
    "OrderLine",
    "EmailNotificationService",
    "MockNotificationService",
    "NotificationFactory",
]

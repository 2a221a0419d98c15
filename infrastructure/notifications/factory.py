"""
Notification Service Factory
============================

Factory pattern for creating notification service instances based on configuration.
"""

import logging
from typing import Literal

from django.conf import settings

from .email_service import EmailNotificationService
from .interface import NotificationServiceInterface
from .mock_service import MockNotificationService

logger = logging.getLogger(__name__)

NotificationBackend = Literal["email", "mock"]


class NotificationFactory:
    """
    Factory for creating notification service instances.

    Usage:
        # In settings.py
        INFRASTRUCTURE = {"NOTIFICATION_BACKEND": "email"}  # or 'mock' for testing

        # In your code
        notifications = NotificationFactory.create()
    """

    @staticmethod
    def create(backend: NotificationBackend | None = None) -> NotificationServiceInterface:
        """
        Create a notification service instance.

        Args:
            backend: 'email' or 'mock'. If None, reads
                     settings.INFRASTRUCTURE["NOTIFICATION_BACKEND"]

        Raises:
            ValueError: If backend type is invalid
        """
        # Default to 'email' in production, 'mock' in testing
        is_testing = getattr(settings, "TESTING", False)
        default_backend = "mock" if is_testing else "email"

        backend_type = backend or getattr(settings, "INFRASTRUCTURE", {}).get("NOTIFICATION_BACKEND", default_backend)

        logger.info(f"Creating notification backend: {backend_type}")

        if backend_type == "email":
            return EmailNotificationService()
        elif backend_type == "mock":
            return MockNotificationService()
        else:
            raise ValueError(f"Invalid notification backend: {backend_type}. Must be 'email' or 'mock'")

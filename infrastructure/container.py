"""
Dependency Injection Container
================================

Simple service locator pattern for managing infrastructure dependencies.
Provides centralized access to infrastructure services through their
abstract interfaces, plus the storefront services built on top of them.

Usage:
    from infrastructure.container import container

    persistence = container.persistence()
    notifications = container.notifications()
    placement = container.order_placement_service(cart_store)
"""

import logging
from typing import Optional

from .notifications import NotificationFactory, NotificationServiceInterface
from .persistence import PersistenceFactory, PersistenceInterface
from .storage import KeyValueStorageInterface, StorageFactory

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure dependencies.

    Implements lazy initialization and caching of service instances.
    Singleton: every ServiceContainer() call returns the same object.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._clear()
            self._initialized = True
            logger.info("Service container initialized")

    def _clear(self):
        self._storage: Optional[KeyValueStorageInterface] = None
        self._persistence: Optional[PersistenceInterface] = None
        self._notifications: Optional[NotificationServiceInterface] = None

        # Domain Services
        self._pricing_service = None
        self._delivery_service = None
        self._order_validator = None
        self._local_order_cache = None
        self._order_tracking_service = None

    def storage(self, backend: Optional[str] = None) -> KeyValueStorageInterface:
        """
        Get key-value storage instance.

        Args:
            backend: 'cache' or 'memory'. If None, uses configuration from settings
        """
        if self._storage is None or backend is not None:
            self._storage = StorageFactory.create(backend)
            logger.debug(f"Created storage service: {type(self._storage).__name__}")

        return self._storage

    def persistence(self, backend: Optional[str] = None) -> PersistenceInterface:
        """
        Get persistence backend instance.

        Args:
            backend: 'django' or 'memory'. If None, uses configuration from settings
        """
        if self._persistence is None or backend is not None:
            self._persistence = PersistenceFactory.create(backend)
            logger.debug(f"Created persistence service: {type(self._persistence).__name__}")

        return self._persistence

    def notifications(self, backend: Optional[str] = None) -> NotificationServiceInterface:
        """
        Get notification service instance.

        Args:
            backend: 'email' or 'mock'. If None, uses configuration from settings
        """
        if self._notifications is None or backend is not None:
            self._notifications = NotificationFactory.create(backend)
            logger.debug(f"Created notification service: {type(self._notifications).__name__}")

        return self._notifications

    def pricing_service(self):
        """Get PricingService instance."""
        if self._pricing_service is None:
            from storefront.services import PricingService

            self._pricing_service = PricingService()
            logger.debug("Created PricingService")
        return self._pricing_service

    def delivery_service(self):
        """Get DeliveryService instance."""
        if self._delivery_service is None:
            from storefront.services import DeliveryService

            self._delivery_service = DeliveryService()
            logger.debug("Created DeliveryService")
        return self._delivery_service

    def order_validator(self):
        if self._order_validator is None:
            from storefront.services import OrderValidator

            self._order_validator = OrderValidator()
        return self._order_validator

    def local_order_cache(self):
        """Get LocalOrderCache instance."""
        if self._local_order_cache is None:
            from storefront.services import LocalOrderCache

            self._local_order_cache = LocalOrderCache(storage=self.storage())
            logger.debug("Created LocalOrderCache")
        return self._local_order_cache

    def order_tracking_service(self):
        """Get OrderTrackingService instance."""
        if self._order_tracking_service is None:
            from storefront.services import OrderTrackingService

            self._order_tracking_service = OrderTrackingService(
                persistence=self.persistence(), order_cache=self.local_order_cache()
            )
            logger.debug("Created OrderTrackingService")
        return self._order_tracking_service

    def order_placement_service(self, cart_store):
        """
        Build an OrderPlacementService for one cart.

        Not cached: the in-progress guard belongs to the cart it was built for.
        """
        from storefront.services import OrderPlacementService

        return OrderPlacementService(
            cart_store=cart_store,
            persistence=self.persistence(),
            notifications=self.notifications(),
            order_cache=self.local_order_cache(),
            validator=self.order_validator(),
            pricing_service=self.pricing_service(),
            delivery_service=self.delivery_service(),
        )

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._clear()
        logger.info("Service container reset")

    def configure_for_testing(self):
        """
        Configure container with in-memory/mock backends for testing.

        Sets up:
            - In-memory key-value storage
            - In-memory persistence
            - Mock notifications (nothing is sent)
        """
        self.reset()
        self._storage = StorageFactory.create("memory")
        self._persistence = PersistenceFactory.create("memory")
        self._notifications = NotificationFactory.create("mock")
        logger.info("Service container configured for testing")


# Global singleton instance
container = ServiceContainer()


# Convenience functions for quick access
def get_storage() -> KeyValueStorageInterface:
    """Get key-value storage from global container."""
    return container.storage()


def get_persistence() -> PersistenceInterface:
    """Get persistence backend from global container."""
    return container.persistence()


def get_notifications() -> NotificationServiceInterface:
    """Get notification service from global container."""
    return container.notifications()

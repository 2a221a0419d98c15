"""
Storefront Service Layer

Cart and checkout business logic.

Services:
- PricingService: Cart pricing breakdown (subtotal, tax, shipping, total)
- CartStore: Cart state container with subscriptions
- OrderValidator: Fail-fast checkout validation
- DeliveryService: Delivery zones, estimates and availability
- OrderPlacementService: Validate → persist → notify → cache → clear
- LocalOrderCache: Bounded per-user order history
- OrderTrackingService: Order status, history and summaries

Usage:
    from storefront.services import CartStore
    from infrastructure.container import container

    cart = CartStore()
    cart.add({"id": "p1", "name": "Apples", "price": "1.25"}, 2)

    service = container.order_placement_service(cart)
    result = async_to_sync(service.place_order)(user_id, shipping, payment)
"""

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from .cart_store import CartStore
from .delivery_service import DeliveryAvailability, DeliveryService, DeliveryZone
from .local_order_cache import LocalOrderCache
from .order_placement_service import OrderPlacementService, PlacementState
from .order_tracking_service import OrderTrackingService
from .order_validator import OrderValidator
from .pricing_service import PricingService, summarize

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    "ErrorCodes",
    "service_ok",
    "service_err",
    # Services
    "CartStore",
    "DeliveryAvailability",
    "DeliveryService",
    "DeliveryZone",
    "LocalOrderCache",
    "OrderPlacementService",
    "OrderTrackingService",
    "OrderValidator",
    "PlacementState",
    "PricingService",
    "summarize",
]

"""
OrderTrackingService - Order Read Side

Status lookup, per-user order history and display summaries for placed orders.
"""

from typing import Any, Dict, List, Optional

from django.conf import settings

from infrastructure.persistence import PersistenceInterface
from storefront.domain import OrderRecord, OrderRequest

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from .local_order_cache import LocalOrderCache
from .order_placement_service import DEFAULT_ORDERS_COLLECTION


class OrderTrackingService(BaseService):
    """
    Service for reading back placed orders.

    Lookups try the user's local history first and fall back to persistence,
    resolving stored timestamps to concrete instants on the way out.
    """

    def __init__(self, persistence: PersistenceInterface = None, order_cache: LocalOrderCache = None):
        super().__init__()
        from infrastructure.container import container

        self.persistence = persistence or container.persistence()
        self.order_cache = order_cache or container.local_order_cache()
        self.collection = getattr(settings, "STOREFRONT", {}).get("ORDERS_COLLECTION", DEFAULT_ORDERS_COLLECTION)

    @BaseService.log_performance
    def get_order_status(self, order_id: str, user_id=None) -> ServiceResult[Dict[str, Any]]:
        """
        Get tracking information for an order.

        Args:
            order_id: Public order id
            user_id: When given, the user's local history is checked first

        Returns:
            ServiceResult with order_id, status, status_text, tracking_number,
            estimated_delivery and last_updated
        """
        try:
            record: Optional[OrderRecord] = None
            if user_id is not None:
                record = self.order_cache.find_for(user_id, order_id)

            if record is None:
                document = self.persistence.find_by(self.collection, "order_id", order_id)
                if document is None:
                    return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} does not exist")
                record = OrderRecord.from_dict(document)

        except Exception as e:
            self.logger.error(f"Error looking up order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        return service_ok(
            {
                "order_id": record.order_id,
                "status": record.status.value,
                "status_text": record.status_text,
                "tracking_number": record.tracking_number,
                "estimated_delivery": record.estimated_delivery.isoformat(),
                "last_updated": record.created_at.isoformat(),
            }
        )

    @BaseService.log_performance
    def list_user_orders(self, user_id) -> ServiceResult[List[OrderRecord]]:
        try:
            return service_ok(self.order_cache.list_for(user_id))
        except Exception as e:
            self.logger.error(f"Error listing orders for user {user_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def clear_user_orders(self, user_id) -> ServiceResult[None]:
        try:
            self.order_cache.clear_for(user_id)
            return service_ok(None)
        except Exception as e:
            self.logger.error(f"Error clearing orders for user {user_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def order_summary(self, request: OrderRequest) -> Dict[str, Any]:
        """
        Display summary of a checkout submission.

        ``item_count`` comes from the pricing summary, ``total_items`` is
        counted from the cart lines themselves.
        """
        summary = request.summary
        method = request.payment.method
        return {
            "item_count": summary.item_count,
            "total_items": sum(item.quantity for item in request.cart.items),
            "subtotal": summary.subtotal,
            "tax": summary.tax,
            "shipping": summary.shipping,
            "total": summary.total,
            "payment_method": method.label if method else "",
            "delivery_address": request.shipping.delivery_address,
        }

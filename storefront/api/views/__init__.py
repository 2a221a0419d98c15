from .cart_views import CartViewSet
from .order_views import (
    CheckoutSummaryView,
    CheckoutView,
    DeliveryAvailabilityView,
    OrderHistoryView,
    OrderStatusView,
)
from .prometheus_metrics import storefront_prometheus_metrics

__all__ = [
    "CartViewSet",
    "CheckoutView",
    "CheckoutSummaryView",
    "DeliveryAvailabilityView",
    "OrderHistoryView",
    "OrderStatusView",
    "storefront_prometheus_metrics",
]

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .api.views import (
    CartViewSet,
    CheckoutSummaryView,
    CheckoutView,
    DeliveryAvailabilityView,
    OrderHistoryView,
    OrderStatusView,
    storefront_prometheus_metrics,
)

router = DefaultRouter()
router.register(r"cart", CartViewSet, basename="cart")

app_name = "storefront"

urlpatterns = [
    path("", include(router.urls)),
    # Checkout
    path("checkout/", CheckoutView.as_view(), name="checkout"),
    path("checkout/summary/", CheckoutSummaryView.as_view(), name="checkout-summary"),
    # Orders
    path("orders/", OrderHistoryView.as_view(), name="order-history"),
    path("orders/<str:order_id>/status/", OrderStatusView.as_view(), name="order-status"),
    path("delivery/availability/", DeliveryAvailabilityView.as_view(), name="delivery-availability"),
    # Prometheus metrics endpoint
    path("metrics/", storefront_prometheus_metrics, name="storefront-metrics"),
]

from prometheus_client import Counter, Histogram


# Order Metrics
orders_placed_total = Counter("storefront_orders_placed_total", "Order placement attempts by outcome", ["status"])
order_value = Histogram(
    "storefront_order_value",
    "Order value distribution",
    buckets=[5, 10, 25, 50, 100, 200, 500, 1000, float("inf")],
)

# Degraded Step Metrics
notification_failures_total = Counter(
    "storefront_order_notification_failures_total", "Order confirmations that could not be sent"
)
order_cache_failures_total = Counter(
    "storefront_order_cache_failures_total", "Placed orders that could not be added to the local history"
)

# Performance Metrics
checkout_validation_duration = Histogram("storefront_checkout_validation_seconds", "Checkout validation time")
order_placement_duration = Histogram("storefront_order_placement_seconds", "End-to-end order placement time")

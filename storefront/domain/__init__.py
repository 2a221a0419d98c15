from .cart import EMPTY_CART, CartItem, CartState, CartSummary, CatalogProduct, normalize_product
from .orders import (
    OrderConfirmation,
    OrderRecord,
    OrderRequest,
    OrderStatus,
    PaymentInfo,
    PaymentMethod,
    ShippingInfo,
    mask_card_number,
)
from .timestamps import SERVER_TIMESTAMP, PendingServerTime, ResolvedInstant, resolve_timestamp


__all__ = [
    "EMPTY_CART",
    "CartItem",
    "CartState",
    "CartSummary",
    "CatalogProduct",
    "normalize_product",
    "OrderConfirmation",
    "OrderRecord",
    "OrderRequest",
    "OrderStatus",
    "PaymentInfo",
    "PaymentMethod",
    "ShippingInfo",
    "mask_card_number",
    "SERVER_TIMESTAMP",
    "PendingServerTime",
    "ResolvedInstant",
    "resolve_timestamp",
]

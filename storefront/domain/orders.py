"""
Checkout and order value types.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from .cart import CartItem, CartState, CartSummary
from .timestamps import resolve_timestamp


class PaymentMethod(str, Enum):
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    CASH_ON_DELIVERY = "cash_on_delivery"

    @property
    def label(self) -> str:
        return PAYMENT_METHOD_LABELS[self]


PAYMENT_METHOD_LABELS = {
    PaymentMethod.CARD: "Credit/Debit Card",
    PaymentMethod.BANK_TRANSFER: "Bank Transfer",
    PaymentMethod.CASH_ON_DELIVERY: "Cash on Delivery",
}


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def text(self) -> str:
        return ORDER_STATUS_TEXT[self]


ORDER_STATUS_TEXT = {
    OrderStatus.PENDING: "Order received, awaiting confirmation",
    OrderStatus.CONFIRMED: "Order confirmed and being prepared",
    OrderStatus.PREPARING: "Order is being prepared",
    OrderStatus.SHIPPED: "Order shipped",
    OrderStatus.DELIVERED: "Order delivered",
    OrderStatus.CANCELLED: "Order cancelled",
}


def mask_card_number(card_number: str) -> str:
    """
    Keep only the last four digits of a card number.

    Example:
        >>> mask_card_number("4111 1111 1111 1234")
        '****-****-****-1234'
    """
    digits = "".join(ch for ch in str(card_number or "") if ch.isdigit())
    if not digits:
        return ""
    return f"****-****-****-{digits[-4:]}"


@dataclass(frozen=True)
class ShippingInfo:
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    province: str = ""
    city: str = ""
    reference: str = ""
    postal_code: str = ""
    notes: str = ""

    REQUIRED_FIELDS = ("first_name", "last_name", "email", "phone", "address", "province", "city")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def delivery_address(self) -> str:
        return f"{self.address}, {self.city}, {self.province}"

    def to_dict(self) -> Dict[str, str]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "province": self.province,
            "city": self.city,
            "reference": self.reference,
            "postal_code": self.postal_code,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ShippingInfo":
        return cls(**{key: str(data.get(key) or "") for key in cls().to_dict()})


@dataclass(frozen=True)
class PaymentInfo:
    """Payment choice. Card data is opaque here and must already be masked."""

    method: Optional[PaymentMethod] = None
    cardholder: str = ""
    card_number: str = ""
    expiry: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value if self.method else None,
            "cardholder": self.cardholder,
            "card_number": self.card_number,
            "expiry": self.expiry,
        }


@dataclass(frozen=True)
class OrderRequest:
    """Everything submitted at checkout, frozen at the moment of submission."""

    cart: CartState
    shipping: ShippingInfo
    payment: PaymentInfo
    summary: CartSummary

    @classmethod
    def capture(
        cls,
        cart: CartState,
        shipping: ShippingInfo,
        payment: PaymentInfo,
        summarize: Callable[[Iterable[CartItem]], CartSummary],
    ) -> "OrderRequest":
        return cls(cart=cart, shipping=shipping, payment=payment, summary=summarize(cart.items))


@dataclass(frozen=True)
class OrderRecord:
    """
    A placed order.

    Created once when persistence succeeds. Only ``status`` changes afterwards,
    through fulfillment updates that happen outside this app.
    """

    order_id: str
    status: OrderStatus
    tracking_number: str
    estimated_delivery: datetime
    items: Tuple[CartItem, ...]
    summary: CartSummary
    customer: ShippingInfo
    payment_method: Optional[PaymentMethod]
    created_at: datetime
    internal_id: Optional[str] = field(default=None, compare=False)

    @property
    def status_text(self) -> str:
        return self.status.text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "status": self.status.value,
            "status_text": self.status_text,
            "tracking_number": self.tracking_number,
            "estimated_delivery": self.estimated_delivery.isoformat(),
            "items": [item.to_dict() for item in self.items],
            "summary": self.summary.to_dict(),
            "customer": self.customer.to_dict(),
            "payment_method": self.payment_method.value if self.payment_method else None,
            "created_at": self.created_at.isoformat(),
            "internal_id": self.internal_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], fallback_time: Optional[datetime] = None) -> "OrderRecord":
        """
        Rebuild a record from storage, resolving time fields to concrete instants.

        ``fallback_time`` stands in for timestamps the backend never stamped.
        """
        created_at = resolve_timestamp(data.get("created_at"), fallback_time)
        payment_method = data.get("payment_method")
        return cls(
            order_id=data["order_id"],
            status=OrderStatus(data.get("status", OrderStatus.CONFIRMED.value)),
            tracking_number=data.get("tracking_number", ""),
            estimated_delivery=resolve_timestamp(data.get("estimated_delivery"), created_at),
            items=tuple(CartItem.from_dict(item) for item in data.get("items", ())),
            summary=CartSummary.from_dict(data.get("summary", {})),
            customer=ShippingInfo.from_dict(data.get("customer", {})),
            payment_method=PaymentMethod(payment_method) if payment_method else None,
            created_at=created_at,
            internal_id=data.get("internal_id"),
        )


@dataclass(frozen=True)
class OrderConfirmation:
    order_id: str
    tracking_number: str
    estimated_delivery: datetime
    message: str = "Order placed successfully."

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order_id": self.order_id,
            "tracking_number": self.tracking_number,
            "estimated_delivery": self.estimated_delivery.isoformat(),
            "message": self.message,
        }

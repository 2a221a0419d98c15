"""
Notification Service Interface
==============================

Abstract base class defining the contract for customer notifications about
placed orders.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class OrderLine:
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class OrderConfirmationPayload:
    """
    Everything an order confirmation needs.

    Attributes:
        recipient: Customer email address
        customer_name: Name used in the greeting
        order_id: Public order id
        order_date: When the order was placed
        items: Ordered lines
        totals: subtotal/tax/shipping/total amounts
        payment_method: Human-readable payment method
        shipping_address: Address fields
        tracking_number: Carrier tracking number
        estimated_delivery: Expected delivery instant
    """

    recipient: str
    customer_name: str
    order_id: str
    order_date: datetime
    items: Tuple[OrderLine, ...]
    totals: Dict[str, Decimal]
    payment_method: str
    shipping_address: Dict[str, str]
    tracking_number: str
    estimated_delivery: Optional[datetime] = None

    def to_context(self) -> Dict[str, Any]:
        return {
            "recipient": self.recipient,
            "customer_name": self.customer_name,
            "order_id": self.order_id,
            "order_date": self.order_date,
            "items": self.items,
            "totals": self.totals,
            "payment_method": self.payment_method,
            "shipping_address": self.shipping_address,
            "tracking_number": self.tracking_number,
            "estimated_delivery": self.estimated_delivery,
        }


@dataclass(frozen=True)
class NotificationReceipt:
    success: bool
    message_id: Optional[str] = None
    message: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)


class NotificationServiceInterface(ABC):
    """
    Abstract interface for order notifications.

    Concrete implementations:
        - EmailNotificationService: Templated email through Django's mail backend
        - MockNotificationService: Records payloads instead of sending
    """

    @abstractmethod
    def send_order_confirmation(self, payload: OrderConfirmationPayload) -> NotificationReceipt:
        """
        Tell the customer their order was placed.

        Returns:
            NotificationReceipt (success=False if the channel accepted nothing)

        Raises:
            NotificationException: If sending fails
        """
        pass


class NotificationException(Exception):
    """Base exception for notification operations."""

    pass

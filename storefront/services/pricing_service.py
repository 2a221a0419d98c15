"""
PricingService - Cart Pricing

Derives the pricing breakdown (subtotal, tax, shipping, total) from cart items.
All calculations use Decimal; nothing is cached, every call recomputes from
the items it is given.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from django.conf import settings

from storefront.domain import CartItem, CartSummary

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

CENT = Decimal("0.01")

DEFAULT_TAX_RATE = Decimal("0.12")
DEFAULT_FREE_SHIPPING_THRESHOLD = Decimal("25.00")
DEFAULT_FLAT_SHIPPING_FEE = Decimal("3.50")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def summarize(
    items: Iterable[CartItem],
    tax_rate: Decimal = DEFAULT_TAX_RATE,
    free_shipping_threshold: Decimal = DEFAULT_FREE_SHIPPING_THRESHOLD,
    flat_shipping_fee: Decimal = DEFAULT_FLAT_SHIPPING_FEE,
) -> CartSummary:
    """
    Compute the pricing breakdown for a collection of cart items.

    Shipping is free once the subtotal reaches the threshold, otherwise a
    flat fee applies (an empty cart is charged the fee too).

    Example:
        >>> summary = summarize([CartItem("p1", "Apples", Decimal("1.25"), 2, "a.webp")])
        >>> summary.subtotal, summary.tax, summary.shipping, summary.total
        (Decimal('2.50'), Decimal('0.30'), Decimal('3.50'), Decimal('6.30'))
    """
    items = tuple(items)
    subtotal = sum((item.unit_price * item.quantity for item in items), Decimal("0"))
    tax = subtotal * tax_rate
    shipping = Decimal("0") if subtotal >= free_shipping_threshold else flat_shipping_fee

    return CartSummary(
        subtotal=_money(subtotal),
        tax_rate=tax_rate,
        tax=_money(tax),
        shipping=_money(shipping),
        total=_money(subtotal + tax + shipping),
        item_count=sum(item.quantity for item in items),
    )


class PricingService(BaseService):
    """
    Service for cart pricing with rates taken from settings.

    Settings (``STOREFRONT``):
        TAX_RATE: Tax applied to the subtotal (default 0.12)
        FREE_SHIPPING_THRESHOLD: Subtotal from which shipping is free (default 25.00)
        FLAT_SHIPPING_FEE: Shipping charged below the threshold (default 3.50)
    """

    def __init__(
        self,
        tax_rate: Optional[Decimal] = None,
        free_shipping_threshold: Optional[Decimal] = None,
        flat_shipping_fee: Optional[Decimal] = None,
    ):
        super().__init__()
        config = getattr(settings, "STOREFRONT", {})

        def configured(explicit, key, default) -> Decimal:
            return Decimal(str(explicit if explicit is not None else config.get(key, default)))

        self.tax_rate = configured(tax_rate, "TAX_RATE", DEFAULT_TAX_RATE)
        self.free_shipping_threshold = configured(
            free_shipping_threshold, "FREE_SHIPPING_THRESHOLD", DEFAULT_FREE_SHIPPING_THRESHOLD
        )
        self.flat_shipping_fee = configured(flat_shipping_fee, "FLAT_SHIPPING_FEE", DEFAULT_FLAT_SHIPPING_FEE)

    def summarize(self, items: Iterable[CartItem]) -> CartSummary:
        return summarize(
            items,
            tax_rate=self.tax_rate,
            free_shipping_threshold=self.free_shipping_threshold,
            flat_shipping_fee=self.flat_shipping_fee,
        )

    @BaseService.log_performance
    def summarize_result(self, items: Iterable[CartItem]) -> ServiceResult[CartSummary]:
        """
        Summarize items, wrapping unexpected errors in a ServiceResult.

        Returns:
            ServiceResult with the CartSummary
        """
        try:
            return service_ok(self.summarize(items))
        except Exception as e:
            self.logger.error(f"Error summarizing cart: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

"""
OrderValidator - Checkout Payload Validation

Checks an OrderRequest before anything is written anywhere. Rules run in a
fixed order and the first failing rule decides the message shown to the user.
"""

import re

from storefront.domain import OrderRequest, PaymentMethod, ShippingInfo

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")


class OrderValidator(BaseService):
    """
    Fail-fast validation of a checkout submission.

    Order of checks:
    1. Cart has items
    2. Cart total is positive
    3. Required shipping fields are filled in
    4. Email looks like an address
    5. Phone has exactly 10 digits
    6. A payment method is selected
    7. Card payments carry cardholder, masked number and expiry
    """

    @BaseService.log_performance
    def validate(self, request: OrderRequest) -> ServiceResult[None]:
        """
        Validate an order request.

        Returns:
            service_ok(None) when valid, otherwise a VALIDATION_ERROR result
            whose error_detail is the message for the user
        """
        message = self._first_failure(request)
        if message:
            self.logger.info(f"Order request rejected: {message}")
            return service_err(ErrorCodes.VALIDATION_ERROR, message)
        return service_ok(None)

    def _first_failure(self, request: OrderRequest) -> str:
        cart = request.cart
        if not cart.items:
            return "Your cart is empty. Add products before continuing."

        if cart.total <= 0:
            return "The order total must be greater than zero."

        shipping = request.shipping
        for field_name in ShippingInfo.REQUIRED_FIELDS:
            value = getattr(shipping, field_name, None)
            if value is None or str(value).strip() == "":
                return f"The field {field_name} is required for shipping."

        if not EMAIL_PATTERN.fullmatch(shipping.email):
            return "The email address format is invalid."

        if not PHONE_PATTERN.fullmatch(shipping.phone):
            return "The phone number must have 10 digits."

        payment = request.payment
        if not payment.method:
            return "Select a payment method."

        if payment.method == PaymentMethod.CARD:
            if not (payment.cardholder and payment.card_number and payment.expiry):
                return "Complete all the credit card information."

        return ""

from dataclasses import replace
from decimal import Decimal

import pytest

from storefront.domain import CartState, OrderRequest, PaymentInfo, PaymentMethod
from storefront.services import ErrorCodes, OrderValidator
from storefront.services.pricing_service import summarize
from storefront.tests.factories import CardPaymentFactory, CartItemFactory, PaymentInfoFactory, ShippingInfoFactory


def build_request(cart=None, shipping=None, payment=None) -> OrderRequest:
    if cart is None:
        cart = CartState.of([CartItemFactory(unit_price=Decimal("1.25"), quantity=2)])
    return OrderRequest.capture(
        cart,
        shipping if shipping is not None else ShippingInfoFactory(),
        payment if payment is not None else PaymentInfoFactory(),
        summarize,
    )


@pytest.mark.unit
class TestOrderValidatorUnit:
    def setup_method(self):
        self.validator = OrderValidator()

    def assert_rejected(self, request, message):
        result = self.validator.validate(request)
        assert not result.ok
        assert result.error == ErrorCodes.VALIDATION_ERROR
        assert result.error_detail == message

    def test_valid_request(self):
        result = self.validator.validate(build_request())

        assert result.ok
        assert result.value is None

    def test_valid_card_request(self):
        assert self.validator.validate(build_request(payment=CardPaymentFactory())).ok

    def test_empty_cart(self):
        self.assert_rejected(
            build_request(cart=CartState.of([])), "Your cart is empty. Add products before continuing."
        )

    def test_zero_total(self):
        cart = CartState.of([CartItemFactory(unit_price=Decimal("0"), quantity=3)])

        self.assert_rejected(build_request(cart=cart), "The order total must be greater than zero.")

    @pytest.mark.parametrize(
        "field_name", ["first_name", "last_name", "email", "phone", "address", "province", "city"]
    )
    def test_required_shipping_fields(self, field_name):
        shipping = replace(ShippingInfoFactory(), **{field_name: ""})

        self.assert_rejected(build_request(shipping=shipping), f"The field {field_name} is required for shipping.")

    def test_whitespace_only_field_is_missing(self):
        shipping = replace(ShippingInfoFactory(), city="   ")

        self.assert_rejected(build_request(shipping=shipping), "The field city is required for shipping.")

    def test_first_missing_field_wins(self):
        shipping = replace(ShippingInfoFactory(), last_name="", city="")

        self.assert_rejected(build_request(shipping=shipping), "The field last_name is required for shipping.")

    @pytest.mark.parametrize("email", ["ana", "ana@", "ana@example", "ana @example.com", "@example.com"])
    def test_invalid_email(self, email):
        shipping = replace(ShippingInfoFactory(), email=email)

        self.assert_rejected(build_request(shipping=shipping), "The email address format is invalid.")

    @pytest.mark.parametrize("phone", ["099123456", "09912345678", "099-123-456", "09912345ab"])
    def test_invalid_phone(self, phone):
        shipping = replace(ShippingInfoFactory(), phone=phone)

        self.assert_rejected(build_request(shipping=shipping), "The phone number must have 10 digits.")

    def test_missing_payment_method(self):
        self.assert_rejected(build_request(payment=PaymentInfo()), "Select a payment method.")

    @pytest.mark.parametrize("missing", ["cardholder", "card_number", "expiry"])
    def test_incomplete_card(self, missing):
        payment = replace(CardPaymentFactory(), **{missing: ""})

        self.assert_rejected(build_request(payment=payment), "Complete all the credit card information.")

    def test_card_fields_not_required_for_other_methods(self):
        payment = PaymentInfo(method=PaymentMethod.BANK_TRANSFER)

        assert self.validator.validate(build_request(payment=payment)).ok

    def test_rules_run_in_order(self):
        # Empty cart is reported before the missing shipping and payment details.
        self.assert_rejected(
            build_request(cart=CartState.of([]), shipping=replace(ShippingInfoFactory(), email=""), payment=PaymentInfo()),
            "Your cart is empty. Add products before continuing.",
        )

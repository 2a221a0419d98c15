from rest_framework import serializers

from storefront.domain import PaymentInfo, PaymentMethod, ShippingInfo, mask_card_number


class ProductPayloadSerializer(serializers.Serializer):
    """Catalog product as sent by the client. Missing fields get catalog defaults."""

    id = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False)
    unit = serializers.CharField(max_length=32, required=False, allow_blank=True)
    availability = serializers.IntegerField(min_value=0, required=False)
    images = serializers.ListField(child=serializers.CharField(allow_blank=True), required=False)
    province = serializers.CharField(required=False, allow_blank=True)
    certifications = serializers.ListField(child=serializers.CharField(), required=False)


class AddToCartRequestSerializer(serializers.Serializer):
    """Request body for adding a product to the cart"""

    product = ProductPayloadSerializer()
    quantity = serializers.IntegerField(min_value=1, default=1, help_text="Quantity to add (default: 1)")


class UpdateCartRequestSerializer(serializers.Serializer):
    """Request body for setting a cart line quantity"""

    product_id = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField(help_text="New quantity (values below 1 are ignored)")


class CartItemRequestSerializer(serializers.Serializer):
    """Request body for actions on a single cart line"""

    product_id = serializers.CharField(max_length=64)


class ShippingInfoSerializer(serializers.Serializer):
    # Presence and format are checked by OrderValidator so the user gets its messages.
    first_name = serializers.CharField(required=False, allow_blank=True, default="")
    last_name = serializers.CharField(required=False, allow_blank=True, default="")
    email = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")
    province = serializers.CharField(required=False, allow_blank=True, default="")
    city = serializers.CharField(required=False, allow_blank=True, default="")
    reference = serializers.CharField(required=False, allow_blank=True, default="")
    postal_code = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class PaymentInfoSerializer(serializers.Serializer):
    method = serializers.ChoiceField(
        choices=[method.value for method in PaymentMethod], required=False, allow_blank=True, allow_null=True
    )
    cardholder = serializers.CharField(required=False, allow_blank=True, default="")
    card_number = serializers.CharField(required=False, allow_blank=True, default="")
    expiry = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_card_number(self, value):
        # Only the masked form ever leaves this serializer.
        return mask_card_number(value)


class CheckoutRequestSerializer(serializers.Serializer):
    """Request body for placing an order from the session cart"""

    shipping = ShippingInfoSerializer()
    payment = PaymentInfoSerializer()

    def to_domain(self):
        data = self.validated_data
        payment = data["payment"]
        method = payment.get("method")
        return (
            ShippingInfo(**data["shipping"]),
            PaymentInfo(
                method=PaymentMethod(method) if method else None,
                cardholder=payment.get("cardholder", ""),
                card_number=payment.get("card_number", ""),
                expiry=payment.get("expiry", ""),
            ),
        )


class ErrorResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=False)
    error = serializers.DictField(help_text="code, message and, for persistence failures, cause")


class OrderConfirmationResponseSerializer(serializers.Serializer):
    order_id = serializers.CharField()
    tracking_number = serializers.CharField()
    estimated_delivery = serializers.DateTimeField()
    message = serializers.CharField()

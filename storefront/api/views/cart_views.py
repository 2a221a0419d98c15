from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from infrastructure.container import container
from storefront.api.serializers import (
    AddToCartRequestSerializer,
    CartItemRequestSerializer,
    ErrorResponseSerializer,
    UpdateCartRequestSerializer,
)
from storefront.api.session_cart import load_cart
from storefront.services import CartStore


class CartViewSet(viewsets.ViewSet):
    """Session cart. Every action answers with the full cart and its pricing summary."""

    permission_classes = [AllowAny]

    def _cart_response(self, store: CartStore, status_code=status.HTTP_200_OK) -> Response:
        state = store.current_state()
        summary = container.pricing_service().summarize(state.items)
        return Response({**state.to_dict(), "summary": summary.to_dict()}, status=status_code)

    def _invalid(self, serializer) -> Response:
        return Response(
            {"success": False, "error": {"code": "invalid_input", "message": serializer.errors}},
            status=status.HTTP_400_BAD_REQUEST,
        )

    @extend_schema(
        operation_id="cart_get",
        summary="Get the session cart",
        description="""
        **What it returns:**
        - Cart lines with unit price, quantity and line total
        - `total` and `count` aggregates
        - Pricing summary (subtotal, tax, shipping, total)
        """,
        tags=["Storefront - Cart"],
    )
    def list(self, request):
        return self._cart_response(load_cart(request))

    @extend_schema(
        operation_id="cart_add_item",
        summary="Add a product to the cart",
        description="Adds `quantity` units, merging with an existing line for the same product id.",
        request=AddToCartRequestSerializer,
        responses={400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid payload")},
        tags=["Storefront - Cart"],
    )
    @action(detail=False, methods=["post"], url_path="add-item")
    def add_item(self, request):
        serializer = AddToCartRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return self._invalid(serializer)

        store = load_cart(request)
        store.add(dict(serializer.validated_data["product"]), serializer.validated_data["quantity"])
        return self._cart_response(store)

    @extend_schema(
        operation_id="cart_update_item",
        summary="Set the quantity of a cart line",
        description="Quantities below 1 leave the cart unchanged; use remove-item to delete a line.",
        request=UpdateCartRequestSerializer,
        tags=["Storefront - Cart"],
    )
    @action(detail=False, methods=["post"], url_path="update-item")
    def update_item(self, request):
        serializer = UpdateCartRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return self._invalid(serializer)

        store = load_cart(request)
        store.set_quantity(serializer.validated_data["product_id"], serializer.validated_data["quantity"])
        return self._cart_response(store)

    @extend_schema(operation_id="cart_remove_item", request=CartItemRequestSerializer, tags=["Storefront - Cart"])
    @action(detail=False, methods=["post"], url_path="remove-item")
    def remove_item(self, request):
        serializer = CartItemRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return self._invalid(serializer)

        store = load_cart(request)
        store.remove(serializer.validated_data["product_id"])
        return self._cart_response(store)

    @extend_schema(operation_id="cart_increment", request=CartItemRequestSerializer, tags=["Storefront - Cart"])
    @action(detail=False, methods=["post"])
    def increment(self, request):
        serializer = CartItemRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return self._invalid(serializer)

        store = load_cart(request)
        store.increment_quantity(serializer.validated_data["product_id"])
        return self._cart_response(store)

    @extend_schema(operation_id="cart_decrement", request=CartItemRequestSerializer, tags=["Storefront - Cart"])
    @action(detail=False, methods=["post"])
    def decrement(self, request):
        serializer = CartItemRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return self._invalid(serializer)

        store = load_cart(request)
        store.decrement_quantity(serializer.validated_data["product_id"])
        return self._cart_response(store)

    @extend_schema(operation_id="cart_clear", request=None, tags=["Storefront - Cart"])
    @action(detail=False, methods=["post"])
    def clear(self, request):
        store = load_cart(request)
        store.clear()
        return self._cart_response(store)

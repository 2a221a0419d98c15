import logging

from asgiref.sync import async_to_sync
from django.conf import settings
from django.core.cache import cache
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from infrastructure.container import container
from storefront.api.serializers import (
    CheckoutRequestSerializer,
    ErrorResponseSerializer,
    OrderConfirmationResponseSerializer,
)
from storefront.api.session_cart import load_cart, session_key_for, user_id_for
from storefront.domain import OrderRequest
from storefront.services import ErrorCodes, ServiceResult, service_err
from storefront.services.order_placement_service import ORDER_IN_PROGRESS_MESSAGE

logger = logging.getLogger(__name__)

CHECKOUT_LOCK_PREFIX = "checkout-lock"
DEFAULT_CHECKOUT_LOCK_TIMEOUT = 60

ERROR_STATUS = {
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.CART_EMPTY: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.ORDER_IN_PROGRESS: status.HTTP_409_CONFLICT,
    ErrorCodes.PERSISTENCE_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(result: ServiceResult) -> Response:
    return Response(result.to_dict(), status=ERROR_STATUS.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR))


def invalid_input(serializer) -> Response:
    return Response(
        {"success": False, "error": {"code": ErrorCodes.INVALID_INPUT, "message": serializer.errors}},
        status=status.HTTP_400_BAD_REQUEST,
    )


def checkout_lock_key(request) -> str:
    return f"{CHECKOUT_LOCK_PREFIX}:{session_key_for(request)}"


class CheckoutView(APIView):
    """Place an order from the session cart."""

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="checkout_place_order",
        summary="Place an order",
        description="""
        Validates the checkout details against the session cart, stores the order,
        sends the confirmation email and clears the cart.

        **Errors:**
        - 400: validation failed, nothing was stored
        - 409: an order is already being placed from this cart
        - 503: the order could not be stored, the cart is untouched
        """,
        request=CheckoutRequestSerializer,
        responses={
            201: OrderConfirmationResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation failed"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Placement in progress"),
            503: OpenApiResponse(response=ErrorResponseSerializer, description="Order could not be stored"),
        },
        tags=["Storefront - Checkout"],
    )
    def post(self, request):
        serializer = CheckoutRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input(serializer)
        shipping, payment = serializer.to_domain()

        # Each request rebuilds the cart, so concurrent submissions from one
        # session are serialized through the cache instead.
        lock_key = checkout_lock_key(request)
        timeout = getattr(settings, "STOREFRONT", {}).get("CHECKOUT_LOCK_TIMEOUT", DEFAULT_CHECKOUT_LOCK_TIMEOUT)
        if not cache.add(lock_key, True, timeout=timeout):
            logger.warning(f"Rejected checkout for {user_id_for(request)}: another checkout holds {lock_key}")
            return error_response(service_err(ErrorCodes.ORDER_IN_PROGRESS, ORDER_IN_PROGRESS_MESSAGE))

        try:
            store = load_cart(request)
            service = container.order_placement_service(store)
            result = async_to_sync(service.place_order)(user_id_for(request), shipping, payment)
        finally:
            cache.delete(lock_key)

        if not result.ok:
            return error_response(result)
        return Response(result.map(lambda confirmation: confirmation.to_dict()).to_dict(), status=status.HTTP_201_CREATED)


class CheckoutSummaryView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="checkout_summary",
        summary="Preview the checkout summary",
        description="Totals, payment method label and delivery address for the session cart. Nothing is stored.",
        request=CheckoutRequestSerializer,
        tags=["Storefront - Checkout"],
    )
    def post(self, request):
        serializer = CheckoutRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input(serializer)
        shipping, payment = serializer.to_domain()

        order_request = OrderRequest.capture(
            load_cart(request).current_state(), shipping, payment, container.pricing_service().summarize
        )
        summary = container.order_tracking_service().order_summary(order_request)
        return Response({"success": True, "data": summary})


class OrderHistoryView(APIView):
    """The caller's recent orders, newest first."""

    permission_classes = [AllowAny]

    @extend_schema(operation_id="orders_history", summary="List recent orders", tags=["Storefront - Orders"])
    def get(self, request):
        result = container.order_tracking_service().list_user_orders(user_id_for(request))
        if not result.ok:
            return error_response(result)
        return Response({"success": True, "data": [record.to_dict() for record in result.value]})

    @extend_schema(operation_id="orders_history_clear", summary="Clear recent orders", tags=["Storefront - Orders"])
    def delete(self, request):
        result = container.order_tracking_service().clear_user_orders(user_id_for(request))
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)


class OrderStatusView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="orders_status",
        summary="Track an order",
        responses={404: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown order id")},
        tags=["Storefront - Orders"],
    )
    def get(self, request, order_id):
        result = container.order_tracking_service().get_order_status(order_id, user_id=user_id_for(request))
        if not result.ok:
            return error_response(result)
        return Response(result.to_dict())


class DeliveryAvailabilityView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="delivery_availability",
        summary="Check delivery for a province",
        parameters=[
            OpenApiParameter("province", str, required=True),
            OpenApiParameter("city", str, required=False),
        ],
        tags=["Storefront - Delivery"],
    )
    def get(self, request):
        province = request.query_params.get("province", "").strip()
        if not province:
            return Response(
                {"success": False, "error": {"code": ErrorCodes.INVALID_INPUT, "message": "province is required"}},
                status=status.HTTP_400_BAD_REQUEST,
            )

        availability = container.delivery_service().check_availability(province, request.query_params.get("city", ""))
        return Response({"success": True, "data": availability.to_dict()})

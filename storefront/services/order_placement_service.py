"""
OrderPlacementService - Checkout Orchestration

Turns the current cart plus checkout details into a placed order:
validate, persist, notify the customer, record the order in the user's local
history, then clear the cart. Only validation and persistence can fail the
placement; once the order is stored, later steps degrade to log entries.
"""

import secrets
import string
from dataclasses import replace
from datetime import datetime
from enum import Enum
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.conf import settings
from django.utils import timezone

from infrastructure.notifications import NotificationServiceInterface, OrderConfirmationPayload, OrderLine
from infrastructure.persistence import PersistenceInterface
from storefront.domain import (
    SERVER_TIMESTAMP,
    OrderConfirmation,
    OrderRecord,
    OrderRequest,
    OrderStatus,
    PaymentInfo,
    ShippingInfo,
)
from storefront.infra.observability.metrics import (
    checkout_validation_duration,
    notification_failures_total,
    order_cache_failures_total,
    order_placement_duration,
    order_value,
    orders_placed_total,
)

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from .cart_store import CartStore
from .delivery_service import DeliveryService
from .local_order_cache import LocalOrderCache
from .order_validator import OrderValidator
from .pricing_service import PricingService

DEFAULT_ORDER_ID_PREFIX = "AGC"
DEFAULT_ORDERS_COLLECTION = "orders"

PERSISTENCE_FAILURE_MESSAGE = "Error processing the order. Please try again."
ORDER_IN_PROGRESS_MESSAGE = "An order is already being processed for this cart."

BASE36_ALPHABET = string.digits + string.ascii_lowercase


class PlacementState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    PERSISTING = "persisting"
    NOTIFYING = "notifying"
    CACHING = "caching"
    CLEARED = "cleared"
    COMPLETE = "complete"
    FAILED = "failed"


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_order_id(prefix: str = DEFAULT_ORDER_ID_PREFIX, now: Optional[datetime] = None) -> str:
    """
    Build a public order id: prefix, millisecond timestamp and a random suffix, base36, upper-cased.

    Example:
        >>> generate_order_id("AGC")
        'AGC-LZ7Q3K2A-4F9XQ1'
    """
    millis = int((now or timezone.now()).timestamp() * 1000)
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(6))
    return f"{prefix}-{to_base36(millis)}-{suffix}".upper()


def tracking_number_for(order_id: str, prefix: str = DEFAULT_ORDER_ID_PREFIX) -> str:
    return f"{prefix}{order_id[-8:].upper()}"


def confirmation_payload(record: OrderRecord) -> OrderConfirmationPayload:
    return OrderConfirmationPayload(
        recipient=record.customer.email,
        customer_name=record.customer.full_name,
        order_id=record.order_id,
        order_date=record.created_at,
        items=tuple(
            OrderLine(name=item.name, quantity=item.quantity, unit_price=item.unit_price, line_total=item.line_total)
            for item in record.items
        ),
        totals={
            "subtotal": record.summary.subtotal,
            "tax": record.summary.tax,
            "shipping": record.summary.shipping,
            "total": record.summary.total,
        },
        payment_method=record.payment_method.label if record.payment_method else "",
        shipping_address=record.customer.to_dict(),
        tracking_number=record.tracking_number,
        estimated_delivery=record.estimated_delivery,
    )


class OrderPlacementService(BaseService):
    """
    Coordinates placing one order from one cart.

    Responsibilities:
    - Snapshot and validate the checkout submission
    - Persist the order record
    - Send the order confirmation
    - Add the order to the user's local history
    - Clear the cart

    Dependencies:
    - CartStore: Source of the items, cleared on success
    - PersistenceInterface: Durable order storage (failure is fatal)
    - NotificationServiceInterface: Order confirmation (failure is logged)
    - LocalOrderCache: Per-user history (failure is logged)

    State Machine:
    idle → validating → persisting → notifying → caching → cleared → complete
              ↘ failed (validation)  ↘ failed (persistence)

    One placement runs at a time per cart: the cart store is claimed before the
    first await, so any coordinator built on the same cart is rejected with
    ORDER_IN_PROGRESS while it is held. This guards against double submission,
    not against retries after a crash.
    """

    def __init__(
        self,
        cart_store: CartStore,
        persistence: PersistenceInterface = None,
        notifications: NotificationServiceInterface = None,
        order_cache: LocalOrderCache = None,
        validator: OrderValidator = None,
        pricing_service: PricingService = None,
        delivery_service: DeliveryService = None,
    ):
        """
        Initialize OrderPlacementService.

        Args:
            cart_store: Cart to place the order from
            persistence: Order storage (injected, defaults to the container's)
            notifications: Confirmation channel (injected, defaults to the container's)
            order_cache: Local order history (injected, defaults to the container's)
            validator: Checkout validator
            pricing_service: Pricing used for the order summary
            delivery_service: Delivery estimates
        """
        super().__init__()
        from infrastructure.container import container

        self.cart_store = cart_store
        self.persistence = persistence or container.persistence()
        self.notifications = notifications or container.notifications()
        self.order_cache = order_cache or container.local_order_cache()
        self.validator = validator or OrderValidator()
        self.pricing_service = pricing_service or PricingService()
        self.delivery_service = delivery_service or DeliveryService()

        config = getattr(settings, "STOREFRONT", {})
        self.order_id_prefix = config.get("ORDER_ID_PREFIX", DEFAULT_ORDER_ID_PREFIX)
        self.collection = config.get("ORDERS_COLLECTION", DEFAULT_ORDERS_COLLECTION)

        self.state = PlacementState.IDLE
        self.history: List[PlacementState] = [PlacementState.IDLE]

    @property
    def is_processing(self) -> bool:
        return self.cart_store.is_placing

    def _transition(self, state: PlacementState) -> None:
        self.logger.debug(f"Placement state {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    @BaseService.log_performance
    async def place_order(
        self, user_id, shipping: ShippingInfo, payment: PaymentInfo
    ) -> ServiceResult[OrderConfirmation]:
        """
        Place an order from the current cart contents.

        Args:
            user_id: Owner of the local order history entry
            shipping: Delivery details
            payment: Payment choice (card data already masked)

        Returns:
            ServiceResult with OrderConfirmation, or one of:
            - VALIDATION_ERROR: nothing was written, message is for the user
            - PERSISTENCE_FAILED: generic retry message, ``cause`` holds the backend error
            - ORDER_IN_PROGRESS: another placement from this cart is running

        Example:
            >>> result = async_to_sync(service.place_order)(user.pk, shipping, payment)
            >>> if result.ok:
            ...     print(result.value.tracking_number)
        """
        # Claimed before the first await so a concurrent call sees it.
        if not self.cart_store.begin_placement():
            self.logger.warning(f"Rejected placement for user {user_id}: another placement is in progress")
            orders_placed_total.labels(status="rejected_in_progress").inc()
            return service_err(ErrorCodes.ORDER_IN_PROGRESS, ORDER_IN_PROGRESS_MESSAGE)

        self.state = PlacementState.IDLE
        self.history = [PlacementState.IDLE]
        try:
            with order_placement_duration.time():
                return await self._run(user_id, shipping, payment)
        except Exception as e:
            self._transition(PlacementState.FAILED)
            self.logger.error(f"Unexpected error placing order for user {user_id}: {e}", exc_info=True)
            orders_placed_total.labels(status="error").inc()
            return service_err(ErrorCodes.INTERNAL_ERROR, PERSISTENCE_FAILURE_MESSAGE, cause=str(e))
        finally:
            self.cart_store.end_placement()

    async def _run(self, user_id, shipping: ShippingInfo, payment: PaymentInfo) -> ServiceResult[OrderConfirmation]:
        # Step 1: Snapshot the cart and validate
        self._transition(PlacementState.VALIDATING)
        request = OrderRequest.capture(
            self.cart_store.current_state(), shipping, payment, self.pricing_service.summarize
        )
        with checkout_validation_duration.time():
            validation = self.validator.validate(request)
        if not validation.ok:
            self._transition(PlacementState.FAILED)
            orders_placed_total.labels(status="validation_failed").inc()
            return validation

        # Step 2: Persist (fatal on failure, nothing else has happened yet)
        self._transition(PlacementState.PERSISTING)
        try:
            record = await self._persist(request)
        except Exception as e:
            self._transition(PlacementState.FAILED)
            self.logger.error(f"Order persistence failed for user {user_id}, cart left untouched: {e}", exc_info=True)
            orders_placed_total.labels(status="persistence_failed").inc()
            return service_err(ErrorCodes.PERSISTENCE_FAILED, PERSISTENCE_FAILURE_MESSAGE, cause=str(e))

        # Step 3: Notify the customer (order already exists, never fatal)
        self._transition(PlacementState.NOTIFYING)
        await self._notify(record)

        # Step 4: Record in the local history (never fatal)
        self._transition(PlacementState.CACHING)
        await self._cache(user_id, record)

        # Step 5: Clear the cart
        self._transition(PlacementState.CLEARED)
        self.cart_store.clear()

        self._transition(PlacementState.COMPLETE)
        orders_placed_total.labels(status="success").inc()
        order_value.observe(float(record.summary.total))
        self.logger.info(
            f"Order {record.order_id} placed for user {user_id}: "
            f"{record.summary.item_count} items, total {record.summary.total}"
        )

        return service_ok(
            OrderConfirmation(
                order_id=record.order_id,
                tracking_number=record.tracking_number,
                estimated_delivery=record.estimated_delivery,
            )
        )

    async def _persist(self, request: OrderRequest) -> OrderRecord:
        placed_at = timezone.now()
        order_id = generate_order_id(self.order_id_prefix, placed_at)

        record = OrderRecord(
            order_id=order_id,
            status=OrderStatus.CONFIRMED,
            tracking_number=tracking_number_for(order_id, self.order_id_prefix),
            estimated_delivery=self.delivery_service.estimate_delivery_date(request.shipping.province, placed_at),
            items=request.cart.items,
            summary=request.summary,
            customer=request.shipping,
            payment_method=request.payment.method,
            created_at=placed_at,
        )

        document = record.to_dict()
        document.pop("internal_id")
        document["created_at"] = SERVER_TIMESTAMP
        document["payment"] = request.payment.to_dict()

        internal_id = await sync_to_async(self.persistence.create)(self.collection, document)
        self.logger.info(f"Persisted order {order_id} as {self.collection}/{internal_id}")

        try:
            await sync_to_async(self.persistence.update)(self.collection, internal_id, {"internal_id": internal_id})
        except Exception:
            self.logger.warning(
                f"Order document {self.collection}/{internal_id} was written without its internal id; "
                "a retry will store the order again"
            )
            raise

        return replace(record, internal_id=internal_id)

    async def _notify(self, record: OrderRecord) -> None:
        try:
            receipt = await sync_to_async(self.notifications.send_order_confirmation)(confirmation_payload(record))
        except Exception as e:
            notification_failures_total.inc()
            self.logger.error(f"Order {record.order_id} placed but confirmation failed: {e}", exc_info=True)
            return

        if receipt.success:
            self.logger.info(f"Confirmation for order {record.order_id} sent ({receipt.message_id})")
        else:
            notification_failures_total.inc()
            self.logger.warning(f"Confirmation for order {record.order_id} not delivered: {receipt.message}")

    async def _cache(self, user_id, record: OrderRecord) -> None:
        try:
            await sync_to_async(self.order_cache.append_for)(user_id, record)
        except Exception as e:
            order_cache_failures_total.inc()
            self.logger.error(f"Order {record.order_id} placed but not added to local history: {e}", exc_info=True)

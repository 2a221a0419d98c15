from decimal import Decimal

import pytest

from infrastructure.persistence import InMemoryPersistence
from infrastructure.storage import InMemoryKeyValueStorage
from storefront.domain import SERVER_TIMESTAMP, CartState, OrderRequest, PaymentInfo, PaymentMethod
from storefront.services import ErrorCodes, LocalOrderCache, OrderTrackingService
from storefront.services.pricing_service import summarize
from storefront.tests.factories import CartItemFactory, OrderRecordFactory, ShippingInfoFactory


@pytest.mark.unit
class TestOrderTrackingServiceUnit:
    def setup_method(self):
        self.persistence = InMemoryPersistence()
        self.storage = InMemoryKeyValueStorage()
        self.order_cache = LocalOrderCache(storage=self.storage)
        self.service = OrderTrackingService(persistence=self.persistence, order_cache=self.order_cache)

    def test_status_from_local_history(self):
        record = OrderRecordFactory()
        self.order_cache.append_for("user-1", record)

        result = self.service.get_order_status(record.order_id, user_id="user-1")

        assert result.ok
        assert result.value["order_id"] == record.order_id
        assert result.value["status"] == "confirmed"
        assert result.value["status_text"] == "Order confirmed and being prepared"
        assert result.value["tracking_number"] == record.tracking_number
        assert result.value["estimated_delivery"] == record.estimated_delivery.isoformat()
        assert result.value["last_updated"] == record.created_at.isoformat()
        # Served without touching the database
        assert self.persistence.calls == []

    def test_status_falls_back_to_persistence(self):
        record = OrderRecordFactory()
        document = record.to_dict()
        document["created_at"] = SERVER_TIMESTAMP
        self.persistence.create("orders", document)

        result = self.service.get_order_status(record.order_id, user_id="someone-else")

        assert result.ok
        assert result.value["tracking_number"] == record.tracking_number
        assert result.value["last_updated"]

    def test_unknown_order(self):
        result = self.service.get_order_status("AGC-NOPE")

        assert not result.ok
        assert result.error == ErrorCodes.ORDER_NOT_FOUND

    def test_list_and_clear(self):
        records = [OrderRecordFactory(), OrderRecordFactory()]
        for record in records:
            self.order_cache.append_for("user-1", record)

        listed = self.service.list_user_orders("user-1")
        assert listed.ok
        assert [r.order_id for r in listed.value] == [records[1].order_id, records[0].order_id]

        assert self.service.clear_user_orders("user-1").ok
        assert self.service.list_user_orders("user-1").value == []

    def test_storage_failure_is_reported(self):
        self.storage.fail_with(RuntimeError("offline"))

        result = self.service.list_user_orders("user-1")

        assert result.error == ErrorCodes.INTERNAL_ERROR

    def test_order_summary(self):
        cart = CartState.of(
            [
                CartItemFactory(unit_price=Decimal("10.00"), quantity=2),
                CartItemFactory(unit_price=Decimal("5.00"), quantity=2),
            ]
        )
        shipping = ShippingInfoFactory(address="Calle Larga 5", city="Cuenca", province="Azuay")
        request = OrderRequest.capture(cart, shipping, PaymentInfo(method=PaymentMethod.BANK_TRANSFER), summarize)

        summary = self.service.order_summary(request)

        assert summary == {
            "item_count": 4,
            "total_items": 4,
            "subtotal": Decimal("30.00"),
            "tax": Decimal("3.60"),
            "shipping": Decimal("0.00"),
            "total": Decimal("33.60"),
            "payment_method": "Bank Transfer",
            "delivery_address": "Calle Larga 5, Cuenca, Azuay",
        }

    def test_order_summary_without_payment_method(self):
        request = OrderRequest.capture(CartState.of([]), ShippingInfoFactory(), PaymentInfo(), summarize)

        assert self.service.order_summary(request)["payment_method"] == ""

from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

import pytest
from django.test import override_settings

from storefront.services import DeliveryService


@pytest.mark.unit
class TestDeliveryServiceUnit:
    def setup_method(self):
        self.service = DeliveryService()
        self.placed_at = datetime(2024, 3, 1, 10, 0, tzinfo=dt_timezone.utc)

    def test_zone_lookup_is_case_insensitive(self):
        assert self.service.zone_for("Pichincha").name == "pichincha"
        assert self.service.zone_for("  GUAYAS ").name == "guayas"

    def test_unknown_province_uses_default_zone(self):
        zone = self.service.zone_for("Galapagos")

        assert zone.name == "default"
        assert zone.fee == Decimal("5.00")

    @pytest.mark.parametrize(
        "province,days",
        [("Pichincha", 2), ("Guayas", 3), ("Azuay", 4), ("Loja", 4), ("", 4)],
    )
    def test_estimate_uses_max_lead_time(self, province, days):
        estimate = self.service.estimate_delivery_date(province, self.placed_at)

        assert estimate == self.placed_at + timedelta(days=days)

    def test_next_day_availability(self):
        availability = self.service.check_availability("Pichincha", "Quito")

        assert availability.available
        assert availability.message == "Next-day delivery available"
        assert availability.shipping_cost == Decimal("0.00")
        assert availability.to_dict()["city"] == "Quito"

    def test_multi_day_availability(self):
        availability = self.service.check_availability("Azuay")

        assert availability.message == "Delivery in 3-4 business days"
        assert availability.to_dict()["shipping_cost"] == "2.50"

    def test_zone_table_needs_default(self):
        with pytest.raises(ValueError):
            DeliveryService(zones={"pichincha": {"min_days": 1, "max_days": 2}})

    @override_settings(STOREFRONT={"DELIVERY_ZONES": {"default": {"min_days": 5, "max_days": 7, "fee": "9.00"}}})
    def test_zones_from_settings(self):
        service = DeliveryService()

        assert service.zone_for("Pichincha").max_days == 7
        assert service.estimate_delivery_date("Pichincha", self.placed_at) == self.placed_at + timedelta(days=7)

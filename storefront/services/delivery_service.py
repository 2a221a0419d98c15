"""
DeliveryService - Delivery Zones and Estimates

Maps a shipping province to a delivery zone (lead-time range and zone fee).
Provinces without their own entry use the ``default`` zone.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Mapping, Optional

from django.conf import settings

from .base import BaseService

DEFAULT_ZONE_KEY = "default"

DEFAULT_DELIVERY_ZONES = {
    "pichincha": {"min_days": 1, "max_days": 2, "fee": "0.00"},
    "guayas": {"min_days": 2, "max_days": 3, "fee": "0.00"},
    "azuay": {"min_days": 3, "max_days": 4, "fee": "2.50"},
    DEFAULT_ZONE_KEY: {"min_days": 3, "max_days": 4, "fee": "5.00"},
}


@dataclass(frozen=True)
class DeliveryZone:
    name: str
    min_days: int
    max_days: int
    fee: Decimal


@dataclass(frozen=True)
class DeliveryAvailability:
    available: bool
    province: str
    city: str
    min_days: int
    max_days: int
    shipping_cost: Decimal
    message: str

    def to_dict(self) -> dict:
        return {
            "available": self.available,
            "province": self.province,
            "city": self.city,
            "min_days": self.min_days,
            "max_days": self.max_days,
            "shipping_cost": str(self.shipping_cost),
            "message": self.message,
        }


class DeliveryService(BaseService):
    """
    Delivery estimates from the zone table in ``STOREFRONT["DELIVERY_ZONES"]``.

    The table must contain a ``default`` entry.
    """

    def __init__(self, zones: Optional[Mapping[str, Mapping]] = None):
        super().__init__()
        if zones is None:
            zones = getattr(settings, "STOREFRONT", {}).get("DELIVERY_ZONES", DEFAULT_DELIVERY_ZONES)
        if DEFAULT_ZONE_KEY not in zones:
            raise ValueError("Delivery zone table needs a 'default' entry")

        self.zones: Dict[str, DeliveryZone] = {
            name.lower(): DeliveryZone(
                name=name.lower(),
                min_days=int(zone["min_days"]),
                max_days=int(zone["max_days"]),
                fee=Decimal(str(zone.get("fee", "0"))),
            )
            for name, zone in zones.items()
        }

    def zone_for(self, province: str) -> DeliveryZone:
        key = (province or "").strip().lower()
        return self.zones.get(key) or self.zones[DEFAULT_ZONE_KEY]

    def estimate_delivery_date(self, province: str, placed_at: datetime) -> datetime:
        """Latest expected delivery: placement time plus the zone's max lead time."""
        return placed_at + timedelta(days=self.zone_for(province).max_days)

    def check_availability(self, province: str, city: str = "") -> DeliveryAvailability:
        zone = self.zone_for(province)
        if zone.min_days == 1:
            message = "Next-day delivery available"
        else:
            message = f"Delivery in {zone.min_days}-{zone.max_days} business days"

        return DeliveryAvailability(
            available=True,
            province=province,
            city=city,
            min_days=zone.min_days,
            max_days=zone.max_days,
            shipping_cost=zone.fee,
            message=message,
        )

"""
Cart value types.

CartState is an immutable snapshot: every mutation of the cart builds a new
state through ``CartState.of`` so ``total`` and ``count`` always match the
items they were computed from.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from django.conf import settings

DEFAULT_DESCRIPTION = "-"
DEFAULT_UNIT = "unit"
FALLBACK_PRODUCT_IMAGE = "images/products/placeholder.webp"

ZERO = Decimal("0")


def default_product_image() -> str:
    return getattr(settings, "STOREFRONT", {}).get("DEFAULT_PRODUCT_IMAGE", FALLBACK_PRODUCT_IMAGE)


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    if value is None or value == "":
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return default


@dataclass(frozen=True)
class CatalogProduct:
    """A catalog entry as the cart sees it, already filled with defaults."""

    id: str
    name: str
    description: str = DEFAULT_DESCRIPTION
    price_per_unit: Decimal = ZERO
    unit: str = DEFAULT_UNIT
    availability: int = 0
    images: Tuple[str, ...] = ()
    province: str = ""
    certifications: Tuple[str, ...] = ()

    @property
    def image_url(self) -> str:
        """First usable image, or the default product asset."""
        for image in self.images:
            if image and str(image).strip():
                return image
        return default_product_image()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": {"per_unit": str(self.price_per_unit), "unit": self.unit},
            "availability": self.availability,
            "images": list(self.images),
            "province": self.province,
            "certifications": list(self.certifications),
        }


def normalize_product(raw: Union[CatalogProduct, Mapping[str, Any]]) -> CatalogProduct:
    """
    Build a CatalogProduct from a raw catalog mapping, filling in defaults.

    Missing description becomes "-", missing images become the default asset,
    missing price and availability become zero. ``price`` may be a plain
    number or a mapping with ``per_unit`` and ``unit``.

    Raises:
        ValueError: If the product has no id
    """
    if isinstance(raw, CatalogProduct):
        if raw.images:
            return raw
        return replace(raw, images=(default_product_image(),))

    product_id = raw.get("id")
    if product_id is None or str(product_id).strip() == "":
        raise ValueError("Product id is required")

    price = raw.get("price")
    unit = raw.get("unit") or DEFAULT_UNIT
    if isinstance(price, Mapping):
        unit = price.get("unit") or unit
        price = price.get("per_unit")

    images = tuple(str(image) for image in (raw.get("images") or ()) if image and str(image).strip())

    try:
        availability = int(raw.get("availability") or 0)
    except (TypeError, ValueError):
        availability = 0

    return CatalogProduct(
        id=str(product_id),
        name=raw.get("name") or "",
        description=raw.get("description") or DEFAULT_DESCRIPTION,
        price_per_unit=to_decimal(price),
        unit=unit,
        availability=availability,
        images=images or (default_product_image(),),
        province=raw.get("province") or "",
        certifications=tuple(raw.get("certifications") or ()),
    )


@dataclass(frozen=True)
class CartItem:
    id: str
    name: str
    unit_price: Decimal
    quantity: int
    image_url: str
    product: Optional[CatalogProduct] = field(default=None, compare=False)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def with_quantity(self, quantity: int) -> "CartItem":
        return replace(self, quantity=quantity)

    @classmethod
    def from_product(cls, product: CatalogProduct, quantity: int) -> "CartItem":
        return cls(
            id=product.id,
            name=product.name,
            unit_price=product.price_per_unit,
            quantity=quantity,
            image_url=product.image_url,
            product=product,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "image_url": self.image_url,
            "line_total": str(self.line_total),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartItem":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            unit_price=to_decimal(data.get("unit_price")),
            quantity=int(data.get("quantity", 1)),
            image_url=data.get("image_url") or default_product_image(),
        )


@dataclass(frozen=True)
class CartState:
    """
    Snapshot of the cart contents.

    Invariant: ``total == sum(unit_price * quantity)`` and
    ``count == sum(quantity)`` over ``items``. Build instances with
    ``CartState.of`` so the aggregates are computed from the items.
    """

    items: Tuple[CartItem, ...] = ()
    total: Decimal = ZERO
    count: int = 0

    @classmethod
    def of(cls, items: Iterable[CartItem]) -> "CartState":
        items = tuple(items)
        return cls(
            items=items,
            total=sum((item.line_total for item in items), ZERO),
            count=sum(item.quantity for item in items),
        )

    @property
    def is_empty(self) -> bool:
        return not self.items

    def get(self, item_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "total": str(self.total),
            "count": self.count,
        }


EMPTY_CART = CartState()


@dataclass(frozen=True)
class CartSummary:
    """Pricing breakdown derived from the cart items. Never stored on the cart."""

    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal
    item_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subtotal": str(self.subtotal),
            "tax_rate": str(self.tax_rate),
            "tax": str(self.tax),
            "shipping": str(self.shipping),
            "total": str(self.total),
            "item_count": self.item_count,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartSummary":
        return cls(
            subtotal=to_decimal(data.get("subtotal")),
            tax_rate=to_decimal(data.get("tax_rate")),
            tax=to_decimal(data.get("tax")),
            shipping=to_decimal(data.get("shipping")),
            total=to_decimal(data.get("total")),
            item_count=int(data.get("item_count", 0)),
        )

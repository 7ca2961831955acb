"""Catalog values used at checkout: line items, packages and the cart."""

from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Dict, Float, Integer, List, String, ValueObject

from pricing.domain import logger, pricing
from pricing.utils.amounts import as_number, non_negative


class ItemKind(Enum):
    SERVICE = "Service"
    PACKAGE = "Package"


@pricing.value_object
class LineItem:
    """A service or package selected for purchase.

    Line items are priced at the moment they are added to a cart and never
    change afterwards; a price change in the catalog means a new line item.
    """

    item_id = String(required=True, max_length=255)
    kind = String(choices=ItemKind, default=ItemKind.SERVICE.value)
    base_price = Float(default=0.0)
    duration_minutes = Integer(min_value=1)

    @classmethod
    def create(cls, item_id, base_price, duration_minutes=None, kind=ItemKind.SERVICE):
        """Build a line item, clamping negative prices to zero.

        A duration that is missing or not positive is left unset.
        """
        price = as_number(base_price, "base_price")
        if price < 0:
            logger.warning("negative_price_clamped", item_id=item_id, base_price=price)

        minutes = int(non_negative(duration_minutes, "duration_minutes"))
        if duration_minutes is not None and minutes < 1:
            logger.warning("non_positive_duration_ignored", item_id=item_id, duration_minutes=duration_minutes)

        return cls(
            item_id=str(item_id),
            kind=ItemKind(kind).value,
            base_price=max(0.0, price),
            duration_minutes=minutes or None,
        )


@pricing.value_object
class Package:
    """A bundle of services sold at a single price.

    ``service_prices`` holds the per-service selling price inside the package
    where it differs from the catalog price. A package without its own
    duration takes the summed duration of its base services.
    """

    package_id = String(required=True, max_length=255)
    price = Float(default=0.0)
    duration_minutes = Integer(min_value=1)
    service_ids = List(content_type=String, default=list)
    service_prices = Dict(default=dict)

    def includes(self, service_id) -> bool:
        return str(service_id) in {str(s) for s in self.service_ids}


@pricing.value_object
class Cart:
    """Ordered selection of line items.

    Adding or removing an item returns a new cart; the order of items has no
    effect on the subtotal.
    """

    items = List(content_type=ValueObject(LineItem), default=list)

    def add(self, item: LineItem) -> "Cart":
        if not isinstance(item, LineItem):
            raise ValidationError({"item": [f"Expected a LineItem, got {type(item).__name__}"]})
        return Cart(items=[*self.items, item])

    def remove(self, item_id) -> "Cart":
        remaining = [i for i in self.items if i.item_id != str(item_id)]
        if len(remaining) == len(self.items):
            logger.warning("cart_item_not_found", item_id=str(item_id))
        return Cart(items=remaining)

    @property
    def item_ids(self) -> list[str]:
        return [i.item_id for i in self.items]

    @property
    def subtotal(self) -> float:
        # Negative prices count as zero
        return sum((non_negative(i.base_price, "base_price") for i in self.items), 0.0)

    @property
    def duration_minutes(self) -> int:
        return sum(i.duration_minutes or 0 for i in self.items)

    def __len__(self) -> int:
        return len(self.items)

"""Discount arithmetic.

All amounts are clamped so a discount can never push a price below zero.
"""

from collections.abc import Iterable, Mapping
from datetime import date

from protean.exceptions import ValidationError

from pricing.discounts.instruments import DiscountType, Membership
from pricing.domain import logger
from pricing.utils.amounts import non_negative


def as_discount_type(value) -> DiscountType:
    """Normalize a discount type given as enum member, string or ``None``."""
    if value is None:
        return DiscountType.NONE
    if isinstance(value, DiscountType):
        return value
    try:
        return DiscountType(value)
    except ValueError:
        raise ValidationError(
            {"discount_type": [f"Unknown discount type {value!r}, expected one of none, percentage, fixed"]}
        ) from None


def discount_amount(subtotal, discount_type, discount_value) -> float:
    """Raw discount amount for a subtotal, before the zero floor is applied.

    Percentages above 100 and fixed values above the subtotal are accepted
    here; ``final_price`` takes care of the floor.
    """
    subtotal = non_negative(subtotal, "subtotal")
    value = non_negative(discount_value, "discount_value")

    kind = as_discount_type(discount_type)
    if kind == DiscountType.PERCENTAGE:
        return subtotal * (value / 100)
    if kind == DiscountType.FIXED:
        return value
    return 0.0


def final_price(subtotal, discount_type, discount_value) -> float:
    """Subtotal after the discount, never below zero."""
    subtotal = non_negative(subtotal, "subtotal")
    return max(0.0, subtotal - discount_amount(subtotal, discount_type, discount_value))


def applied_discount(subtotal, discount_type, discount_value) -> float:
    """The part of a discount that actually reduces ``subtotal``."""
    subtotal = non_negative(subtotal, "subtotal")
    return subtotal - final_price(subtotal, discount_type, discount_value)


def restricted_discount_amount(eligible_amount, discount_type, discount_value) -> float:
    """Discount on the eligible portion of a cart only.

    A fixed discount is capped by the eligible amount so it cannot spill
    over onto items the instrument does not cover.
    """
    eligible_amount = non_negative(eligible_amount, "eligible_amount")
    value = non_negative(discount_value, "discount_value")

    kind = as_discount_type(discount_type)
    if kind == DiscountType.PERCENTAGE:
        return eligible_amount * value / 100
    if kind == DiscountType.FIXED:
        return min(value, eligible_amount)
    return 0.0


def best_membership_discount(
    memberships: Iterable[Membership],
    service_prices: Mapping[str, float],
    package_prices: Mapping[str, float],
    on_date: date,
) -> tuple[Membership | None, float]:
    """Pick the membership giving the largest single-item discount.

    ``service_prices`` and ``package_prices`` hold the prices of the selected
    items only (packages already include their customizations). Memberships
    that are not active on ``on_date`` are skipped.
    """
    best: Membership | None = None
    best_amount = 0.0

    active = []
    for membership in memberships:
        if membership.is_active_on(on_date):
            active.append(membership)
        else:
            logger.info("membership_not_active", membership_id=membership.membership_id, on_date=str(on_date))

    candidates = [(price, "service", item_id) for item_id, price in service_prices.items()]
    candidates += [(price, "package", item_id) for item_id, price in package_prices.items()]

    for price, item_kind, item_id in candidates:
        for membership in active:
            covered = (
                membership.covers_service(item_id) if item_kind == "service" else membership.covers_package(item_id)
            )
            if not covered:
                continue

            amount = restricted_discount_amount(price, membership.discount_type, membership.discount_value)
            if amount > best_amount:
                best, best_amount = membership, amount

    return best, best_amount

"""Pricing engine — the pure checkout calculations in one place.

Nothing here performs I/O or keeps state between calls. Callers pass
already-resolved prices, rates and balances; use
``pricing.checkout.quote.CheckoutQuoteService`` to fetch them from the
collaborators first.
"""

from pricing.catalog.calculations import (
    cart_subtotal,
    package_price,
    selection_subtotal,
    service_price_in_package,
    total_duration,
)
from pricing.discounts.calculations import (
    applied_discount,
    best_membership_discount,
    discount_amount,
    final_price,
    restricted_discount_amount,
)
from pricing.invoice.assembly import apply_discounts, assemble_invoice, ordered_discounts
from pricing.loyalty.points import (
    check_loyalty_eligibility,
    max_redeemable_points,
    points_earned,
    points_value,
)
from pricing.tax.rates import tax_amount

__all__ = [
    "applied_discount",
    "apply_discounts",
    "assemble_invoice",
    "best_membership_discount",
    "cart_subtotal",
    "check_loyalty_eligibility",
    "discount_amount",
    "final_price",
    "max_redeemable_points",
    "ordered_discounts",
    "package_price",
    "points_earned",
    "points_value",
    "restricted_discount_amount",
    "selection_subtotal",
    "service_price_in_package",
    "tax_amount",
    "total_duration",
]

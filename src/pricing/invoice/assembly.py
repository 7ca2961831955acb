"""Invoice assembly — the fixed pricing pipeline.

Stages, in order:
    1. percentage discounts
    2. fixed discounts
    3. loyalty point redemption
    4. referral wallet redemption
    5. tax on what is left

Every stage works on the amount left by the previous one and floors it at
zero. The combination policy has already been applied by the caller; the
pipeline applies whatever it is given.
"""

from collections.abc import Iterable

from protean.exceptions import ValidationError

from pricing.discounts.calculations import as_discount_type, final_price
from pricing.discounts.instruments import Discount, DiscountType
from pricing.domain import logger
from pricing.invoice.invoice import Invoice
from pricing.loyalty.points import LoyaltyRedemption, points_earned
from pricing.loyalty.referral import ReferralRedemption
from pricing.tax.rates import TaxRate, applied_tax_id
from pricing.utils.amounts import non_negative

_STAGE_ORDER = {DiscountType.PERCENTAGE: 0, DiscountType.FIXED: 1}


def ordered_discounts(discounts: Iterable[Discount]) -> list[Discount]:
    """Percentage discounts before fixed ones, otherwise keeping the given order."""
    applicable = []
    for discount in discounts:
        if not isinstance(discount, Discount):
            raise ValidationError({"discounts": [f"Expected a Discount, got {type(discount).__name__}"]})
        discount_type = as_discount_type(discount.discount_type)
        if discount_type == DiscountType.NONE:
            continue
        applicable.append((_STAGE_ORDER[discount_type], discount))

    return [discount for _, discount in sorted(applicable, key=lambda pair: pair[0])]


def apply_discounts(subtotal, discounts: Iterable[Discount]) -> float:
    """Amount left after applying ``discounts`` in pipeline order."""
    remaining = non_negative(subtotal, "subtotal")
    for discount in ordered_discounts(discounts):
        remaining = final_price(remaining, discount.discount_type, discount.discount_value)
    return remaining


def assemble_invoice(
    subtotal,
    discounts: Iterable[Discount] = (),
    loyalty: LoyaltyRedemption | None = None,
    referral: ReferralRedemption | None = None,
    tax_rate: TaxRate | None = None,
    points_per_spend=None,
) -> Invoice:
    """Price a checkout and return a new ``Invoice``.

    ``points_per_spend`` is only needed to report points earned; leave it
    empty when the loyalty program is disabled.
    """
    subtotal = non_negative(subtotal, "subtotal")

    remaining = apply_discounts(subtotal, discounts)

    points_redeemed, loyalty_discount = (0, 0.0)
    if loyalty is not None:
        points_redeemed, loyalty_discount = loyalty.redeem_against(remaining)
        remaining = max(0.0, remaining - loyalty_discount)

    referral_discount = 0.0
    if referral is not None:
        referral_discount = referral.redeem_against(remaining)
        remaining = max(0.0, remaining - referral_discount)

    tax_amount = tax_rate.tax_on(remaining) if tax_rate is not None else 0.0
    discount_amount = subtotal - remaining

    invoice = Invoice(
        subtotal=subtotal,
        discount_amount=discount_amount,
        loyalty_discount=loyalty_discount,
        referral_discount=referral_discount,
        points_redeemed=points_redeemed,
        points_earned=points_earned(remaining, points_per_spend),
        discounted_subtotal=remaining,
        tax_id=applied_tax_id(tax_rate.tax_id) if tax_rate is not None else None,
        tax_percentage=tax_rate.percentage if tax_rate is not None and applied_tax_id(tax_rate.tax_id) else 0.0,
        tax_amount=tax_amount,
        total=remaining + tax_amount,
    )

    logger.debug(
        "invoice_assembled",
        subtotal=invoice.subtotal,
        discount_amount=invoice.discount_amount,
        tax_amount=invoice.tax_amount,
        total=invoice.total,
    )
    return invoice

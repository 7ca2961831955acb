"""Invoice value object — the result of one pricing pass."""

import math

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, Integer, String

from pricing.domain import pricing


@pricing.value_object
class Invoice:
    """Financial summary of a checkout: subtotal, discounts, tax and total.

    ``discount_amount`` is the sum of every reduction, loyalty and referral
    redemption included, so ``total`` is always the discounted subtotal plus
    tax.
    """

    subtotal = Float(default=0.0, min_value=0.0)
    discount_amount = Float(default=0.0, min_value=0.0)
    loyalty_discount = Float(default=0.0, min_value=0.0)
    referral_discount = Float(default=0.0, min_value=0.0)
    points_redeemed = Integer(default=0, min_value=0)
    points_earned = Integer(default=0, min_value=0)
    discounted_subtotal = Float(default=0.0, min_value=0.0)
    tax_id = String(max_length=255)
    tax_percentage = Float(default=0.0)
    tax_amount = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0)

    @invariant.post
    def total_is_discounted_subtotal_plus_tax(self):
        expected = max(0.0, self.subtotal - self.discount_amount) + self.tax_amount
        if not math.isclose(self.total, expected, rel_tol=1e-9, abs_tol=1e-9):
            raise ValidationError({"total": [f"Total {self.total} does not match discounted subtotal plus tax {expected}"]})

    @invariant.post
    def total_cannot_be_negative(self):
        if self.total < 0:
            raise ValidationError({"total": ["Total cannot be negative"]})

"""Tax rates and tax computation.

Tax is always charged on the subtotal left after every discount.
"""

from protean.fields import Float, String

from pricing.domain import pricing
from pricing.utils.amounts import non_negative

# Registry id meaning "no tax applied"
NO_TAX = "none"


def applied_tax_id(tax_id) -> str | None:
    """Normalize a selected tax id, mapping the no-tax sentinel to ``None``."""
    if tax_id is None or tax_id == "" or tax_id == NO_TAX:
        return None
    return str(tax_id)


def tax_amount(discounted_subtotal, tax_id, tax_percentage) -> float:
    if applied_tax_id(tax_id) is None:
        return 0.0
    return non_negative(discounted_subtotal, "discounted_subtotal") * (non_negative(tax_percentage, "percentage") / 100)


@pricing.value_object
class TaxRate:
    tax_id = String(required=True, max_length=255)
    name = String(max_length=255)
    percentage = Float(default=0.0)

    def tax_on(self, discounted_subtotal) -> float:
        return tax_amount(discounted_subtotal, self.tax_id, self.percentage)

"""Shared BDD fixtures and step definitions for the pricing domain."""

import pytest
from pricing.discounts.instruments import Discount
from pricing.invoice.assembly import assemble_invoice
from pricing.loyalty.points import LoyaltyProgramSettings, LoyaltyRedemption
from pricing.tax.rates import TaxRate
from pytest_bdd import given, parsers, then, when


# ---------------------------------------------------------------------------
# State fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def checkout():
    """Container for the inputs of one pricing pass."""
    return {"subtotal": 0.0, "discounts": [], "loyalty": None, "tax_rate": None}


@pytest.fixture()
def result():
    """Container for the invoices produced by When steps."""
    return {"invoices": []}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a cart subtotal of {amount:g}"))
def cart_subtotal(checkout, amount):
    checkout["subtotal"] = amount


@given(parsers.cfparse("a fixed coupon worth {amount:g}"))
def fixed_coupon(checkout, amount):
    checkout["discounts"].append(Discount(kind="coupon", discount_type="fixed", discount_value=amount))


@given(parsers.cfparse("a percentage membership discount of {percent:g}"))
def percentage_membership(checkout, percent):
    checkout["discounts"].append(Discount(kind="membership", discount_type="percentage", discount_value=percent))


@given(parsers.cfparse("a tax rate of {percent:g} percent"))
def tax_rate(checkout, percent):
    checkout["tax_rate"] = TaxRate(tax_id="tax-1", name="Tax", percentage=percent)


@given(parsers.cfparse("a loyalty wallet of {points:d} points with a {percent:g} percent redemption cap"))
def loyalty_wallet(checkout, points, percent):
    settings = LoyaltyProgramSettings(
        enabled=True,
        min_redemption_points=100,
        max_redemption_type="percentage",
        max_redemption_value=percent,
        point_value=1.0,
    )
    checkout["loyalty"] = LoyaltyRedemption.from_settings(settings, points)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
def _assemble(checkout):
    return assemble_invoice(
        checkout["subtotal"],
        discounts=checkout["discounts"],
        loyalty=checkout["loyalty"],
        tax_rate=checkout["tax_rate"],
    )


@when("the invoice is assembled")
def invoice_assembled(checkout, result):
    result["invoices"].append(_assemble(checkout))


@when("the invoice is assembled twice")
def invoice_assembled_twice(checkout, result):
    result["invoices"].append(_assemble(checkout))
    result["invoices"].append(_assemble(checkout))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the discounted subtotal is {amount:g}"))
def discounted_subtotal_is(result, amount):
    assert result["invoices"][-1].discounted_subtotal == pytest.approx(amount)


@then(parsers.cfparse("the tax amount is {amount:g}"))
def tax_amount_is(result, amount):
    assert result["invoices"][-1].tax_amount == pytest.approx(amount)


@then(parsers.cfparse("the invoice total is {amount:g}"))
def invoice_total_is(result, amount):
    assert result["invoices"][-1].total == pytest.approx(amount)


@then(parsers.cfparse("{points:d} points are redeemed"))
def points_redeemed(result, points):
    assert result["invoices"][-1].points_redeemed == points


@then("both invoices are identical")
def invoices_identical(result):
    first, second = result["invoices"]
    assert first.to_dict() == second.to_dict()

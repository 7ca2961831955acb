"""Pricing bounded context — checkout pricing for salon services and packages.

Turns a cart of services and packages into an invoice: item-level discounts
(coupons, memberships, manual discounts), loyalty and referral redemption,
then tax. Everything in this context is a pure computation over values that
the checkout orchestration has already fetched.
"""

from protean.domain import Domain

from pricing.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
pricing = Domain(name="pricing")

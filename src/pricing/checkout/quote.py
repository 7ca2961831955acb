"""Checkout quote — fetches everything a price depends on, then prices it.

This is the only place in the pricing context that talks to collaborators.
All lookups happen up front; the pricing functions then run on plain values,
so quoting the same request against unchanged data always yields the same
invoice.

Flow:
    1. Resolve service prices and packages (unknown ids price at zero)
    2. Collect candidate rewards: manual discount, coupon, best membership,
       loyalty points, referral wallet
    3. Filter candidates through the location's reward usage policy
    4. Resolve the tax rate
    5. Assemble the invoice
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime

from pricing.catalog.calculations import cart_subtotal, package_price, total_duration
from pricing.catalog.items import Package
from pricing.discounts.calculations import best_membership_discount
from pricing.discounts.instruments import Discount, DiscountType, RewardKind
from pricing.domain import logger
from pricing.invoice.assembly import assemble_invoice
from pricing.invoice.invoice import Invoice
from pricing.loyalty.points import LoyaltyProgramSettings, LoyaltyRedemption, check_loyalty_eligibility
from pricing.loyalty.referral import ReferralRedemption
from pricing.ports import Ports, get_ports
from pricing.tax.rates import TaxRate, applied_tax_id
from pricing.utils.logging import add_context, remove_context


@dataclass(frozen=True)
class CheckoutRequest:
    """What the customer picked at checkout."""

    customer_id: str | None = None
    location_id: str | None = None
    service_ids: tuple[str, ...] = ()
    package_ids: tuple[str, ...] = ()
    customized_services: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    manual_discount: Discount | None = None
    coupon_id: str | None = None
    tax_id: str | None = None
    use_loyalty_points: bool = False
    points_to_redeem: int | None = None
    use_referral_wallet: bool = False
    referral_amount: float | None = None
    on_date: date | None = None


class CheckoutQuoteService:
    def __init__(self, ports: Ports | None = None) -> None:
        self.ports = ports or get_ports()

    # -------------------------------------------------------------------
    # Catalog lookups
    # -------------------------------------------------------------------
    def _prices(self, service_ids) -> dict[str, float]:
        prices = {}
        for service_id in service_ids:
            price = self.ports.catalog.get_price(service_id)
            if price is not None:
                prices[service_id] = price
        return prices

    def _packages(self, package_ids) -> dict[str, Package]:
        packages = {}
        for package_id in package_ids:
            package = self.ports.catalog.get_package(package_id)
            if package is None:
                logger.warning("catalog_package_not_found", package_id=package_id)
                continue
            packages[package_id] = package
        return packages

    def _package_prices(self, request: CheckoutRequest, packages: dict[str, Package]) -> dict[str, float]:
        package_prices = {}
        for package_id, package in packages.items():
            custom_ids = tuple(request.customized_services.get(package_id, ()))
            package_prices[package_id] = package_price(package, custom_ids, self._prices(custom_ids))
        return package_prices

    # -------------------------------------------------------------------
    # Reward candidates
    # -------------------------------------------------------------------
    def _coupon(self, coupon_id) -> Discount | None:
        if coupon_id is None:
            return None

        coupon = self.ports.registry.get_coupon(coupon_id)
        if coupon is None:
            logger.warning("coupon_not_found", coupon_id=coupon_id)
            return None

        discount = coupon.as_discount()
        if discount is None:
            logger.warning("coupon_inactive", coupon_id=coupon_id)
        return discount

    def _membership(self, request, service_prices, package_prices, on_date) -> Discount | None:
        if request.customer_id is None:
            return None

        memberships = self.ports.registry.get_customer_memberships(request.customer_id)
        membership, amount = best_membership_discount(memberships, service_prices, package_prices, on_date)
        if membership is None or amount <= 0:
            return None

        return Discount(
            kind=RewardKind.MEMBERSHIP.value,
            discount_type=DiscountType.FIXED.value,
            discount_value=amount,
            source_id=membership.membership_id,
        )

    def _loyalty(self, request, settings: LoyaltyProgramSettings | None) -> LoyaltyRedemption | None:
        if not request.use_loyalty_points or request.customer_id is None or settings is None:
            return None

        balance = self.ports.ledger.get_wallet_balance(request.customer_id)
        eligibility = check_loyalty_eligibility(balance, settings)
        if not eligibility.is_eligible:
            logger.info("loyalty_redemption_not_eligible", reason=eligibility.message)
            return None

        return LoyaltyRedemption.from_settings(settings, balance, request.points_to_redeem)

    def _referral(self, request) -> ReferralRedemption | None:
        if not request.use_referral_wallet or request.customer_id is None:
            return None

        balance = self.ports.ledger.get_referral_balance(request.customer_id)
        if balance <= 0:
            logger.info("referral_wallet_empty")
            return None

        return ReferralRedemption(wallet_balance=balance, requested_amount=request.referral_amount)

    def _tax_rate(self, tax_id) -> TaxRate | None:
        tax_id = applied_tax_id(tax_id)
        if tax_id is None:
            return None

        tax_rate = self.ports.registry.get_tax_rate(tax_id)
        if tax_rate is None:
            logger.warning("tax_rate_not_found", tax_id=tax_id)
        return tax_rate

    def _program_settings(self, request) -> LoyaltyProgramSettings | None:
        if request.customer_id is None:
            return None
        settings = self.ports.ledger.get_program_settings()
        return settings if settings.enabled else None

    # -------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------
    def quote(self, request: CheckoutRequest) -> Invoice:
        """Price a checkout request."""
        add_context(customer_id=request.customer_id, location_id=request.location_id)
        try:
            on_date = request.on_date or datetime.now(UTC).date()

            service_prices = self._prices(request.service_ids)
            packages = self._packages(request.package_ids)
            package_prices = self._package_prices(request, packages)
            subtotal = cart_subtotal(request.service_ids, service_prices) + sum(package_prices.values(), 0.0)

            settings = self._program_settings(request)

            candidates = [
                (RewardKind.DISCOUNT, request.manual_discount),
                (RewardKind.COUPON, self._coupon(request.coupon_id)),
                (RewardKind.MEMBERSHIP, self._membership(request, service_prices, package_prices, on_date)),
                (RewardKind.LOYALTY_POINTS, self._loyalty(request, settings)),
                (RewardKind.REFERRAL, self._referral(request)),
            ]
            policy = self.ports.registry.get_usage_policy(request.location_id)
            accepted = policy.select((kind, instrument) for kind, instrument in candidates if instrument is not None)

            invoice = assemble_invoice(
                subtotal,
                discounts=[i for i in accepted if isinstance(i, Discount)],
                loyalty=next((i for i in accepted if isinstance(i, LoyaltyRedemption)), None),
                referral=next((i for i in accepted if isinstance(i, ReferralRedemption)), None),
                tax_rate=self._tax_rate(request.tax_id),
                points_per_spend=settings.points_per_spend if settings is not None else None,
            )
            logger.info("checkout_quoted", subtotal=invoice.subtotal, total=invoice.total)
            return invoice
        finally:
            remove_context("customer_id", "location_id")

    def duration(self, request: CheckoutRequest) -> int:
        """Total appointment length in minutes for the request's selection."""
        packages = self._packages(request.package_ids)
        service_ids = set(request.service_ids)
        for package_id, package in packages.items():
            service_ids.update(package.service_ids)
            service_ids.update(request.customized_services.get(package_id, ()))

        durations = {}
        for service_id in service_ids:
            minutes = self.ports.catalog.get_duration(service_id)
            if minutes is not None:
                durations[service_id] = minutes

        return total_duration(
            request.service_ids,
            [p for p in request.package_ids if p in packages],
            durations,
            packages,
            request.customized_services,
        )

"""In-memory collaborator adapters for development and testing.

Each adapter is seeded with plain dictionaries and records every lookup in
``calls`` so tests can assert what the orchestration asked for.
"""

from pricing.catalog.items import Package
from pricing.discounts.instruments import Coupon, Membership
from pricing.discounts.policy import RewardUsagePolicy
from pricing.loyalty.points import LoyaltyProgramSettings
from pricing.ports.port import CatalogStore, DiscountRegistry, LoyaltyLedger
from pricing.tax.rates import TaxRate


class InMemoryCatalogStore(CatalogStore):
    def __init__(
        self,
        prices: dict[str, float] | None = None,
        durations: dict[str, int] | None = None,
        packages: dict[str, Package] | None = None,
    ) -> None:
        self.prices = dict(prices or {})
        self.durations = dict(durations or {})
        self.packages = dict(packages or {})
        self.calls: list[dict] = []

    def get_price(self, item_id: str) -> float | None:
        self.calls.append({"method": "get_price", "item_id": item_id})
        return self.prices.get(item_id)

    def get_duration(self, item_id: str) -> int | None:
        self.calls.append({"method": "get_duration", "item_id": item_id})
        return self.durations.get(item_id)

    def get_package(self, package_id: str) -> Package | None:
        self.calls.append({"method": "get_package", "package_id": package_id})
        return self.packages.get(package_id)


class InMemoryDiscountRegistry(DiscountRegistry):
    def __init__(
        self,
        coupons: dict[str, Coupon] | None = None,
        tax_rates: dict[str, TaxRate] | None = None,
        memberships: dict[str, list[Membership]] | None = None,
        policy: RewardUsagePolicy | None = None,
    ) -> None:
        self.coupons = dict(coupons or {})
        self.tax_rates = dict(tax_rates or {})
        self.memberships = dict(memberships or {})
        self.policy = policy
        self.calls: list[dict] = []

    def configure_policy(self, policy: RewardUsagePolicy) -> None:
        """Swap the usage policy at runtime."""
        self.policy = policy

    def get_coupon(self, coupon_id: str) -> Coupon | None:
        self.calls.append({"method": "get_coupon", "coupon_id": coupon_id})
        return self.coupons.get(coupon_id)

    def get_tax_rate(self, tax_id: str) -> TaxRate | None:
        self.calls.append({"method": "get_tax_rate", "tax_id": tax_id})
        return self.tax_rates.get(tax_id)

    def get_customer_memberships(self, customer_id: str) -> list[Membership]:
        self.calls.append({"method": "get_customer_memberships", "customer_id": customer_id})
        return list(self.memberships.get(customer_id, []))

    def get_usage_policy(self, location_id: str | None = None) -> RewardUsagePolicy:
        self.calls.append({"method": "get_usage_policy", "location_id": location_id})
        if self.policy is None:
            # Locations without a stored configuration get single-reward bookings
            self.policy = RewardUsagePolicy()
        return self.policy


class InMemoryLoyaltyLedger(LoyaltyLedger):
    def __init__(
        self,
        balances: dict[str, int] | None = None,
        referral_balances: dict[str, float] | None = None,
        settings: LoyaltyProgramSettings | None = None,
    ) -> None:
        self.balances = dict(balances or {})
        self.referral_balances = dict(referral_balances or {})
        self.settings = settings
        self.calls: list[dict] = []

    def get_wallet_balance(self, customer_id: str) -> int:
        self.calls.append({"method": "get_wallet_balance", "customer_id": customer_id})
        return self.balances.get(customer_id, 0)

    def get_referral_balance(self, customer_id: str) -> float:
        self.calls.append({"method": "get_referral_balance", "customer_id": customer_id})
        return self.referral_balances.get(customer_id, 0.0)

    def get_program_settings(self) -> LoyaltyProgramSettings:
        self.calls.append({"method": "get_program_settings"})
        if self.settings is None:
            self.settings = LoyaltyProgramSettings()
        return self.settings

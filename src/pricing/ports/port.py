"""Collaborator ports (abstract interfaces).

Pricing never fetches anything itself. The checkout orchestration reads
prices, discount records and loyalty balances through these ports, then
hands plain values to the pricing functions. Adapters for the hosted
backend implement these; ``InMemory*`` adapters serve development and tests.
"""

from abc import ABC, abstractmethod

from pricing.catalog.items import Package
from pricing.discounts.instruments import Coupon, Membership
from pricing.discounts.policy import RewardUsagePolicy
from pricing.loyalty.points import LoyaltyProgramSettings
from pricing.tax.rates import TaxRate


class CatalogStore(ABC):
    """Service and package catalog."""

    @abstractmethod
    def get_price(self, item_id: str) -> float | None:
        """Selling price of a service, or ``None`` when unknown."""
        ...

    @abstractmethod
    def get_duration(self, item_id: str) -> int | None:
        """Duration of a service in minutes, or ``None`` when unknown."""
        ...

    @abstractmethod
    def get_package(self, package_id: str) -> Package | None:
        ...


class DiscountRegistry(ABC):
    """Coupons, memberships, tax rates and the reward usage policy."""

    @abstractmethod
    def get_coupon(self, coupon_id: str) -> Coupon | None:
        ...

    @abstractmethod
    def get_tax_rate(self, tax_id: str) -> TaxRate | None:
        ...

    @abstractmethod
    def get_customer_memberships(self, customer_id: str) -> list[Membership]:
        ...

    @abstractmethod
    def get_usage_policy(self, location_id: str | None = None) -> RewardUsagePolicy:
        """Reward stacking policy for a location."""
        ...


class LoyaltyLedger(ABC):
    """Customer point and referral balances, plus program settings."""

    @abstractmethod
    def get_wallet_balance(self, customer_id: str) -> int:
        ...

    @abstractmethod
    def get_referral_balance(self, customer_id: str) -> float:
        ...

    @abstractmethod
    def get_program_settings(self) -> LoyaltyProgramSettings:
        ...

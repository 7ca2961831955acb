"""Discount instruments: coupons, memberships and the resolved discounts the invoice consumes."""

from datetime import date
from enum import Enum

from protean.fields import Boolean, Date, Float, List, String

from pricing.domain import pricing


class DiscountType(Enum):
    NONE = "none"
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class RewardKind(Enum):
    """Kinds of reward a booking can use; the usage policy is expressed in these."""

    DISCOUNT = "discount"
    COUPON = "coupon"
    MEMBERSHIP = "membership"
    LOYALTY_POINTS = "loyalty_points"
    REFERRAL = "referral"


class MembershipStatus(Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


@pricing.value_object
class Discount:
    """An instrument already resolved to a type and value, ready to be applied.

    The invoice pipeline only ever sees ``Discount`` values; coupons,
    memberships and manual discounts are turned into one of these by the
    checkout orchestration.
    """

    kind = String(choices=RewardKind, required=True)
    discount_type = String(choices=DiscountType, default=DiscountType.NONE.value)
    discount_value = Float(default=0.0)
    source_id = String(max_length=255)


@pricing.value_object
class Coupon:
    """A coupon as stored in the discount registry.

    Inactive coupons resolve to nothing and so never change a total.
    """

    coupon_id = String(required=True, max_length=255)
    code = String(max_length=100)
    discount_type = String(choices=DiscountType, default=DiscountType.PERCENTAGE.value)
    discount_value = Float(default=0.0)
    is_active = Boolean(default=True)

    def as_discount(self) -> Discount | None:
        if not self.is_active:
            return None
        return Discount(
            kind=RewardKind.COUPON.value,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            source_id=self.coupon_id,
        )


@pricing.value_object
class Membership:
    """A customer's membership plan and its validity window.

    Empty ``applicable_services`` / ``applicable_packages`` mean the
    membership covers every service / package.
    """

    membership_id = String(required=True, max_length=255)
    name = String(max_length=255)
    discount_type = String(choices=DiscountType, default=DiscountType.PERCENTAGE.value)
    discount_value = Float(default=0.0)
    status = String(choices=MembershipStatus, default=MembershipStatus.ACTIVE.value)
    start_date = Date()
    end_date = Date()
    applicable_services = List(content_type=String, default=list)
    applicable_packages = List(content_type=String, default=list)

    def is_active_on(self, on_date: date) -> bool:
        if self.status != MembershipStatus.ACTIVE.value:
            return False
        if self.start_date is not None and on_date < self.start_date:
            return False
        if self.end_date is not None and on_date > self.end_date:
            return False
        return True

    def covers_service(self, service_id) -> bool:
        return not self.applicable_services or str(service_id) in self.applicable_services

    def covers_package(self, package_id) -> bool:
        return not self.applicable_packages or str(package_id) in self.applicable_packages

"""Loyalty points: valuation, earning and redemption limits.

Redemption has two gates. A customer must hold at least the minimum number
of points to redeem anything, and the amount left after applying the
program's caps must still reach that minimum, otherwise nothing is redeemed.
"""

import math
from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Integer, String

from pricing.domain import pricing
from pricing.utils.amounts import as_number, as_points, non_negative


class MaxRedemptionType(Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


def as_max_redemption_type(value) -> MaxRedemptionType | None:
    if value is None or value == "":
        return None
    if isinstance(value, MaxRedemptionType):
        return value
    try:
        return MaxRedemptionType(value)
    except ValueError:
        raise ValidationError(
            {"max_redemption_type": [f"Unknown redemption cap {value!r}, expected fixed or percentage"]}
        ) from None


def points_value(points, point_value=1.0) -> float:
    """Currency value of ``points``; zero when either input is not positive."""
    points = as_number(points, "points")
    point_value = as_number(point_value, "point_value")
    if points <= 0 or point_value <= 0:
        return 0.0
    return points * point_value


def points_earned(amount, points_per_spend) -> int:
    """Whole points earned on ``amount``.

    ``points_per_spend`` is the number of points granted per 100 currency
    units; fractional points are never granted.
    """
    amount = as_number(amount, "amount")
    points_per_spend = as_number(points_per_spend, "points_per_spend")
    if amount <= 0 or points_per_spend <= 0:
        return 0
    return math.floor(amount * points_per_spend / 100)


def max_redeemable_points(wallet_balance, subtotal, min_points, max_type=None, max_value=None) -> int:
    """Largest number of points that may be redeemed against ``subtotal``.

    One point covers one currency unit when applying the percentage cap and
    the subtotal cap.
    """
    wallet = as_points(wallet_balance, "wallet_balance")
    subtotal = non_negative(subtotal, "subtotal")
    minimum = non_negative(min_points, "min_redemption_points")
    cap_type = as_max_redemption_type(max_type)
    cap_value = non_negative(max_value, "max_redemption_value")

    if wallet < minimum:
        return 0

    max_points = wallet

    if cap_type == MaxRedemptionType.FIXED and cap_value:
        max_points = min(max_points, math.floor(cap_value))
    elif cap_type == MaxRedemptionType.PERCENTAGE and cap_value:
        max_discount_amount = subtotal * cap_value / 100
        max_points = min(max_points, math.floor(max_discount_amount))

    # Never more points than it takes to cover the subtotal
    max_points = min(max_points, math.ceil(subtotal))

    if max_points < minimum:
        return 0

    return max_points


@pricing.value_object
class LoyaltyProgramSettings:
    """Program-wide loyalty rules as configured by the salon."""

    enabled = Boolean(default=False)
    min_redemption_points = Integer(default=0, min_value=0)
    max_redemption_type = String(choices=MaxRedemptionType)
    max_redemption_value = Float()
    point_value = Float(default=1.0)
    points_per_spend = Float(default=0.0)


@dataclass(frozen=True)
class LoyaltyEligibility:
    is_eligible: bool
    message: str
    points_needed: int = 0


def check_loyalty_eligibility(wallet_balance, settings: LoyaltyProgramSettings) -> LoyaltyEligibility:
    """Whether a customer's balance clears the program's redemption threshold."""
    if not settings.enabled:
        return LoyaltyEligibility(is_eligible=False, message="Loyalty program is not enabled")

    balance = as_points(wallet_balance, "wallet_balance")
    minimum = settings.min_redemption_points or 0

    if balance >= minimum:
        return LoyaltyEligibility(
            is_eligible=True,
            message=f"Customer can redeem points (has {balance} points, minimum required is {minimum})",
        )

    needed = minimum - balance
    return LoyaltyEligibility(
        is_eligible=False,
        message=f"Customer needs {needed} more points to be eligible for redemption",
        points_needed=needed,
    )


@pricing.value_object
class LoyaltyRedemption:
    """A request to pay part of a booking with loyalty points.

    ``requested_points`` left empty means "as many as allowed".
    """

    wallet_balance = Integer(default=0, min_value=0)
    requested_points = Integer(min_value=0)
    min_redemption_points = Integer(default=0, min_value=0)
    max_redemption_type = String(choices=MaxRedemptionType)
    max_redemption_value = Float()
    point_value = Float(default=1.0)

    @classmethod
    def from_settings(cls, settings: LoyaltyProgramSettings, wallet_balance, requested_points=None):
        return cls(
            wallet_balance=as_points(wallet_balance, "wallet_balance"),
            requested_points=None if requested_points is None else as_points(requested_points, "requested_points"),
            min_redemption_points=settings.min_redemption_points,
            max_redemption_type=settings.max_redemption_type,
            max_redemption_value=settings.max_redemption_value,
            point_value=settings.point_value,
        )

    def redeem_against(self, subtotal) -> tuple[int, float]:
        """Points redeemed and their currency value against ``subtotal``.

        The value is capped by the subtotal so redemption alone never turns
        a total negative.
        """
        subtotal = non_negative(subtotal, "subtotal")
        limit = max_redeemable_points(
            self.wallet_balance,
            subtotal,
            self.min_redemption_points,
            self.max_redemption_type,
            self.max_redemption_value,
        )

        points = limit if self.requested_points is None else min(self.requested_points, limit)
        if points < (self.min_redemption_points or 0):
            return 0, 0.0

        value = min(points_value(points, self.point_value), subtotal)
        if value <= 0:
            return 0, 0.0

        # Only the points that pay for the capped value leave the wallet
        points = min(points, math.ceil(value / self.point_value))
        if points < (self.min_redemption_points or 0):
            return 0, 0.0
        return points, value

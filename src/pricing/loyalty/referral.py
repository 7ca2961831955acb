"""Referral wallet redemption."""

from protean.fields import Float

from pricing.domain import pricing
from pricing.utils.amounts import non_negative


@pricing.value_object
class ReferralRedemption:
    """Currency credited to a customer for referrals, spent at checkout.

    Without ``requested_amount`` the whole wallet is offered.
    """

    wallet_balance = Float(default=0.0, min_value=0.0)
    requested_amount = Float(min_value=0.0)

    def redeem_against(self, subtotal) -> float:
        balance = non_negative(self.wallet_balance, "wallet_balance")
        requested = balance if self.requested_amount is None else non_negative(self.requested_amount, "requested_amount")
        return min(requested, balance, non_negative(subtotal, "subtotal"))

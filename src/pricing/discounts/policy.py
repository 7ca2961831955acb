"""Reward usage policy — which discount instruments may be combined on one booking.

Strategies:
    single_only        at most one reward per booking
    multiple_allowed   any rewards, up to ``max_rewards_per_booking``
    combinations_only  only rewards that together form (part of) a configured combination
"""

from collections.abc import Iterable
from enum import Enum

from protean.fields import Boolean, Integer, List, String

from pricing.discounts.instruments import RewardKind
from pricing.domain import logger, pricing

_COMBINATION_SEPARATOR = "+"


class RewardStrategy(Enum):
    SINGLE_ONLY = "single_only"
    MULTIPLE_ALLOWED = "multiple_allowed"
    COMBINATIONS_ONLY = "combinations_only"


@pricing.value_object
class RewardUsagePolicy:
    """Per-location configuration of reward stacking.

    Combinations are stored as ``"coupon+membership"`` strings; use
    ``RewardUsagePolicy.build`` to pass them as lists of kinds.
    """

    strategy = String(choices=RewardStrategy, default=RewardStrategy.SINGLE_ONLY.value)
    max_rewards_per_booking = Integer(default=1, min_value=1)
    reward_combinations = List(content_type=String, default=list)
    discount_enabled = Boolean(default=True)
    coupon_enabled = Boolean(default=True)
    membership_enabled = Boolean(default=True)
    loyalty_points_enabled = Boolean(default=True)
    referral_enabled = Boolean(default=True)

    @classmethod
    def build(cls, strategy=RewardStrategy.SINGLE_ONLY, combinations=(), **kwargs):
        return cls(
            strategy=RewardStrategy(strategy).value,
            reward_combinations=[
                _COMBINATION_SEPARATOR.join(sorted(RewardKind(k).value for k in combination))
                for combination in combinations
            ],
            **kwargs,
        )

    def combinations(self) -> list[frozenset[str]]:
        return [frozenset(c.split(_COMBINATION_SEPARATOR)) for c in self.reward_combinations or []]

    def is_enabled(self, kind: RewardKind) -> bool:
        return bool(getattr(self, f"{RewardKind(kind).value}_enabled"))

    def disabled_reason(self, active_kinds: Iterable[RewardKind], candidate: RewardKind) -> str | None:
        """Why ``candidate`` cannot join ``active_kinds``, or ``None`` when it can."""
        candidate = RewardKind(candidate)
        active = [RewardKind(k) for k in active_kinds]
        strategy = RewardStrategy(self.strategy)

        if not self.is_enabled(candidate):
            return f"{candidate.value} rewards are disabled for this location"

        if strategy == RewardStrategy.SINGLE_ONLY and active:
            return "Only one discount can be used at a time"

        if len(active) >= self.max_rewards_per_booking:
            return f"Maximum of {self.max_rewards_per_booking} discounts allowed per booking"

        combinations = self.combinations()
        if strategy == RewardStrategy.COMBINATIONS_ONLY and combinations:
            wanted = {k.value for k in active} | {candidate.value}
            if not any(wanted <= combination for combination in combinations):
                return "This combination of discounts is not allowed"

        return None

    def allows(self, active_kinds: Iterable[RewardKind], candidate: RewardKind) -> bool:
        return self.disabled_reason(active_kinds, candidate) is None

    def select(self, candidates: Iterable[tuple[RewardKind, object]]) -> list:
        """Keep candidates, in the order given, for as long as the policy allows them.

        ``candidates`` are ``(kind, instrument)`` pairs in priority order; the
        instruments of the accepted pairs are returned.
        """
        accepted_kinds: list[RewardKind] = []
        accepted = []

        for kind, instrument in candidates:
            reason = self.disabled_reason(accepted_kinds, kind)
            if reason is not None:
                logger.info("reward_rejected_by_policy", kind=RewardKind(kind).value, reason=reason)
                continue
            accepted_kinds.append(RewardKind(kind))
            accepted.append(instrument)

        return accepted

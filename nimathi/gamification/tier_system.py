"""
Reward Tiers

Tier brackets (cumulative reward points):
- Bronze:  0-49
- Silver:  50-149
- Gold:    150-299
- Diamond: 300+
"""

import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RewardTier:
    name: str
    range_min: int
    range_max: float  # math.inf for the top tier
    icon: str


@dataclass(frozen=True)
class TierStatus:
    """Where a point total sits within its tier"""
    name: str
    range_min: int
    range_max: float
    points: int
    points_to_next_tier: Optional[int]
    progress_percent: float
    icon: str

    @property
    def is_top_tier(self) -> bool:
        return math.isinf(self.range_max)


REWARD_TIERS: tuple[RewardTier, ...] = (
    RewardTier("Bronze", 0, 49, "🥉"),
    RewardTier("Silver", 50, 149, "🥈"),
    RewardTier("Gold", 150, 299, "🥇"),
    RewardTier("Diamond", 300, math.inf, "💎"),
)


def get_tier(points: int) -> RewardTier:
    """Tier whose range contains points; negative totals fall into Bronze"""
    for tier in REWARD_TIERS:
        if tier.range_min <= points <= tier.range_max:
            return tier
    return REWARD_TIERS[0]


def resolve_tier(points: int) -> TierStatus:
    """
    Resolve a point total to its tier for display

    points_to_next_tier is range_max - points and None at the top tier.
    progress_percent mirrors the dashboard bar: points / range_max, 100 at
    the top tier.
    """
    tier = get_tier(points)

    if math.isinf(tier.range_max):
        points_to_next_tier = None
        progress = 100.0
    else:
        points_to_next_tier = int(tier.range_max - points)
        progress = round(max(points, 0) / tier.range_max * 100, 1)

    return TierStatus(
        name=tier.name,
        range_min=tier.range_min,
        range_max=tier.range_max,
        points=points,
        points_to_next_tier=points_to_next_tier,
        progress_percent=progress,
        icon=tier.icon,
    )

"""
Reward accounting for Nimathi

- Points per completed activity
- Reward tiers (Bronze/Silver/Gold/Diamond)
- Rolling stress-level ledger
"""

from nimathi.gamification.points_system import compute_points
from nimathi.gamification.tier_system import resolve_tier, get_tier, REWARD_TIERS, TierStatus
from nimathi.gamification.stress_ledger import record_stress_level, prune_stress_levels

__all__ = [
    "compute_points",
    "resolve_tier",
    "get_tier",
    "REWARD_TIERS",
    "TierStatus",
    "record_stress_level",
    "prune_stress_levels",
]

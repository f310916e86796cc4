"""
Stress Level Ledger

Keeps a rolling window of self-reported stress ratings on the user profile.
Each write appends one entry and then drops every entry recorded more than
the retention period before now. Entries exactly on the boundary stay.
Nothing is pruned between writes.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from nimathi.config import STRESS_RETENTION_DAYS
from nimathi.exceptions import ValidationError
from nimathi.models.user import StressEntry, UserProfile
from nimathi.utils.datetime_helpers import now_utc, to_utc

logger = logging.getLogger(__name__)

MIN_STRESS_LEVEL = 0
MAX_STRESS_LEVEL = 10


def validate_stress_level(level, user_id: Optional[str] = None) -> int:
    """Accept integer ratings in 0-10, reject everything else"""
    if isinstance(level, bool) or not isinstance(level, int):
        raise ValidationError(
            message="Stress level must be a whole number",
            field="level",
            value=level,
            user_id=user_id,
        )
    if not MIN_STRESS_LEVEL <= level <= MAX_STRESS_LEVEL:
        raise ValidationError(
            message=f"Stress level must be between {MIN_STRESS_LEVEL} and {MAX_STRESS_LEVEL}",
            field="level",
            value=level,
            user_id=user_id,
        )
    return level


def prune_stress_levels(
    entries: list[StressEntry],
    now: datetime,
    retention_days: int = STRESS_RETENTION_DAYS
) -> list[StressEntry]:
    """Entries recorded no earlier than now - retention_days, order kept"""
    cutoff = to_utc(now) - timedelta(days=retention_days)
    return [entry for entry in entries if to_utc(entry.timestamp) >= cutoff]


def record_stress_level(
    profile: UserProfile,
    level: int,
    entry_date: Optional[date] = None,
    now: Optional[datetime] = None,
    clock: Callable[[], datetime] = now_utc,
    retention_days: int = STRESS_RETENTION_DAYS
) -> UserProfile:
    """
    Append a stress rating and apply the retention window

    Args:
        profile: Current profile (not mutated)
        level: Rating in 0-10
        entry_date: Calendar day the rating is for (defaults to today)
        now: Recording instant (defaults to clock())
        clock: Source of the current instant
        retention_days: Window length

    Returns:
        Updated copy of the profile carrying the full pruned sequence
    """
    validate_stress_level(level, user_id=profile.id)

    recorded_at = to_utc(now or clock())
    entry = StressEntry(
        level=level,
        date=entry_date or recorded_at.date(),
        timestamp=recorded_at,
    )

    appended = [*profile.stress_levels, entry]
    kept = prune_stress_levels(appended, recorded_at, retention_days)

    dropped = len(appended) - len(kept)
    if dropped:
        logger.info(f"Pruned {dropped} stress entries older than {retention_days} days for user {profile.id}")

    return profile.model_copy(update={"stress_levels": kept})

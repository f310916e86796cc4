"""
Reward Points

Point Award Rules:
- Meditation: 2 points per minute (floored)
- Drawing: 15 points per saved session
- Journaling: 5 points + 1 per 25 words, capped at 20
- Anything else: 5 points

Scoring never fails. Missing, negative, non-numeric or overflowing metrics
count as 0, so the worst case for any activity is its floor (0 for meditation, 5 for
journaling).
"""

import logging
import math
from typing import Any, Mapping, Optional

from nimathi.models.activity import ActivityType

logger = logging.getLogger(__name__)

MEDITATION_POINTS_PER_MINUTE = 2
DRAWING_POINTS = 15
JOURNALING_BASE_POINTS = 5
JOURNALING_WORDS_PER_POINT = 25
JOURNALING_MAX_POINTS = 20
DEFAULT_POINTS = 5


def _metric(metadata: Optional[Mapping[str, Any]], name: str) -> float:
    """Read a non-negative numeric metric, 0 when absent or unusable"""
    if not isinstance(metadata, Mapping):
        return 0
    value = metadata.get(name)
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-numeric {name}: {value!r}")
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return number


def compute_points(activity_type: str, metadata: Optional[Mapping[str, Any]] = None) -> int:
    """
    Points earned for one completed activity

    Args:
        activity_type: meditation, drawing, journaling, or anything else
        metadata: duration_minutes (meditation) / word_count (journaling)

    Returns:
        Non-negative integer point award
    """
    if activity_type == ActivityType.MEDITATION.value:
        earned = _metric(metadata, "duration_minutes") * MEDITATION_POINTS_PER_MINUTE
        if not math.isfinite(earned):
            return 0
        return math.floor(earned)

    if activity_type == ActivityType.DRAWING.value:
        return DRAWING_POINTS

    if activity_type == ActivityType.JOURNALING.value:
        word_count = _metric(metadata, "word_count")
        earned = math.floor(word_count / JOURNALING_WORDS_PER_POINT) + JOURNALING_BASE_POINTS
        return min(JOURNALING_MAX_POINTS, earned)

    return DEFAULT_POINTS

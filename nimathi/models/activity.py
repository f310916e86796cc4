"""Activity models"""
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field

from nimathi.utils.datetime_helpers import now_utc


class ActivityType(str, Enum):
    """Wellness sessions that earn reward points"""
    MEDITATION = "meditation"
    DRAWING = "drawing"
    JOURNALING = "journaling"
    OTHER = "other"


class ActivityRecord(BaseModel):
    """A completed activity, logged under activity:{user_id}:{id}"""
    id: Optional[str] = None
    user_id: Optional[str] = None
    type: str  # unknown types are kept verbatim and scored as "other"
    duration_minutes: Optional[float] = None
    word_count: Optional[int] = None
    details: dict[str, Any] = Field(default_factory=dict)
    points_earned: Optional[int] = None
    created_at: datetime = Field(default_factory=now_utc)

    def metadata(self) -> dict[str, Any]:
        """Metrics used for points calculation"""
        return {
            "duration_minutes": self.duration_minutes,
            "word_count": self.word_count,
        }

"""Feedback form model"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from nimathi.utils.datetime_helpers import now_utc

ANONYMOUS_USER_ID = "anonymous"


class Feedback(BaseModel):
    """Feedback submission stored under feedback:{id}"""
    id: str
    user_id: str = ANONYMOUS_USER_ID
    activity_name: str
    why: str
    activity_description: str = ""
    frequency: str = ""  # daily, weekly, monthly, occasionally
    app_feedback: str = ""
    rating: Optional[str] = None
    additional_suggestions: str = ""
    created_at: datetime = Field(default_factory=now_utc)

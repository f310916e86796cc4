"""Journal models"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field

from nimathi.utils.datetime_helpers import now_utc


class JournalEntry(BaseModel):
    """Journal entry stored under journal:{user_id}:{id}"""
    id: str
    user_id: str
    title: str = ""
    content: str = ""
    mood: str = "okay"  # great, good, okay, low, sad
    tags: list[str] = Field(default_factory=list)
    word_count: int = 0
    date: date
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: Optional[datetime] = None

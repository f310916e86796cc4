"""User-related Pydantic models"""
from datetime import date, datetime
from typing import Optional
from urllib.parse import quote
from pydantic import BaseModel, Field

from nimathi.utils.datetime_helpers import now_utc

AVATAR_URL_TEMPLATE = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


def default_avatar_url(pet_name: str) -> str:
    """DiceBear avatar seeded by the user's pet name"""
    return AVATAR_URL_TEMPLATE.format(seed=quote(pet_name))


class StressEntry(BaseModel):
    """One self-reported stress rating"""
    level: int
    date: date  # calendar day the rating refers to
    timestamp: datetime  # instant it was recorded, drives retention


class UserProfile(BaseModel):
    """User profile stored under user:{id}"""
    id: str
    pet_name: Optional[str] = None
    email: Optional[str] = None
    avatar: Optional[str] = None
    reward_points: int = Field(default=0, ge=0)
    stress_levels: list[StressEntry] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile"""
    model_config = {"extra": "forbid"}

    pet_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    avatar: Optional[str] = None

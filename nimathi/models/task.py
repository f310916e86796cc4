"""Task scheduler models"""
from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from nimathi.utils.datetime_helpers import now_utc


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(BaseModel):
    """Scheduled task stored under task:{user_id}:{id}"""
    id: str
    user_id: str
    title: str
    description: str = ""
    date: date
    priority: TaskPriority = TaskPriority.MEDIUM
    completed: bool = False
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: Optional[datetime] = None

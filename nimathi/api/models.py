"""Pydantic models for API request/response validation"""
import math
import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, Field

from nimathi.gamification.tier_system import TierStatus
from nimathi.models.activity import ActivityRecord
from nimathi.models.journal import JournalEntry
from nimathi.models.task import Task, TaskPriority
from nimathi.models.user import StressEntry, UserProfile

MAX_SESSION_MINUTES = 24 * 60


class SignupRequest(BaseModel):
    """Request to create an account"""
    pet_name: str = Field(..., min_length=1, max_length=50, description="Display name")
    email: str = Field(..., min_length=3, description="Login email")
    password: str = Field(..., min_length=6, description="Login password")


class TierResponse(BaseModel):
    """Reward tier for a point total"""
    name: str
    icon: str
    range_min: int
    range_max: Optional[int] = Field(None, description="None for the top tier")
    points_to_next_tier: Optional[int] = Field(None, description="None for the top tier")
    progress_percent: float

    @classmethod
    def from_status(cls, status: TierStatus) -> "TierResponse":
        return cls(
            name=status.name,
            icon=status.icon,
            range_min=status.range_min,
            range_max=None if math.isinf(status.range_max) else int(status.range_max),
            points_to_next_tier=status.points_to_next_tier,
            progress_percent=status.progress_percent,
        )


class UserResponse(BaseModel):
    """Profile with its current tier"""
    user: UserProfile
    tier: TierResponse


class SignupResponse(UserResponse):
    message: str = "User created successfully"


class RewardStatusResponse(BaseModel):
    """Reward points and tier"""
    user_id: str
    reward_points: int
    tier: TierResponse


class TaskCreateRequest(BaseModel):
    """Request to schedule a task"""
    title: str = Field(..., description="Task title")
    description: str = Field(default="", description="Optional details")
    date: dt.date
    priority: TaskPriority = TaskPriority.MEDIUM


class TaskUpdateRequest(BaseModel):
    """Request to change a task; omitted fields are left alone"""
    model_config = {"extra": "forbid"}

    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None
    priority: Optional[TaskPriority] = None
    completed: Optional[bool] = None


class TaskResponse(BaseModel):
    task: Task


class TaskListResponse(BaseModel):
    tasks: list[Task]


class JournalEntryRequest(BaseModel):
    """Request to save a journal entry"""
    title: str = ""
    content: str = ""
    mood: str = "okay"
    tags: list[str] = Field(default_factory=list)
    word_count: Optional[int] = Field(default=None, ge=0, description="Derived from content when omitted")
    date: Optional[dt.date] = None


class JournalEntryResponse(BaseModel):
    entry: JournalEntry


class JournalListResponse(BaseModel):
    entries: list[JournalEntry]


class ActivityRequest(BaseModel):
    """Request to complete an activity"""
    type: str = Field(..., min_length=1, description="meditation, drawing, journaling or other")
    duration_minutes: Optional[float] = Field(default=None, ge=0, le=MAX_SESSION_MINUTES)
    word_count: Optional[int] = Field(default=None, ge=0)
    details: dict[str, Any] = Field(default_factory=dict)


class ActivityResponse(BaseModel):
    """Result of an activity completion"""
    activity: ActivityRecord
    points_earned: int
    reward_points: int
    tier: TierResponse
    previous_tier: str
    tier_changed: bool
    sync_status: str
    sync_error: Optional[str] = None
    activity_logged: bool


class StressLevelRequest(BaseModel):
    """Request to record a stress rating"""
    level: int = Field(..., description="0 (calm) to 10 (overwhelmed)")
    date: Optional[dt.date] = None


class StressLevelResponse(BaseModel):
    message: str = "Stress level recorded"
    stress_levels: list[StressEntry]
    sync_status: str
    sync_error: Optional[str] = None


class StressHistoryResponse(BaseModel):
    user_id: str
    stress_levels: list[StressEntry]


class FeedbackRequest(BaseModel):
    """Feedback form submission"""
    activity_name: str = Field(..., description="Activity the user enjoys")
    why: str = Field(..., description="Why it helps")
    activity_description: Optional[str] = None
    frequency: Optional[str] = None
    app_feedback: Optional[str] = None
    rating: Optional[str] = None
    additional_suggestions: Optional[str] = None


class FeedbackResponse(BaseModel):
    message: str = "Feedback submitted successfully"
    id: str


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Service status")
    service: str = "nimathi-backend"
    store: str = Field(..., description="Key-value store status")
    timestamp: dt.datetime = Field(..., description="Check timestamp")

"""API routes for the Nimathi backend"""
import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, status

from nimathi.api.auth import Session, get_container, optional_session, require_session
from nimathi.api.middleware import limiter
from nimathi.api.models import (
    SignupRequest, SignupResponse, UserResponse, RewardStatusResponse, TierResponse,
    TaskCreateRequest, TaskUpdateRequest, TaskResponse, TaskListResponse,
    JournalEntryRequest, JournalEntryResponse, JournalListResponse,
    ActivityRequest, ActivityResponse,
    StressLevelRequest, StressLevelResponse, StressHistoryResponse,
    FeedbackRequest, FeedbackResponse,
    HealthCheckResponse,
)
from nimathi.exceptions import NimathiError
from nimathi.gamification import resolve_tier
from nimathi.models.activity import ActivityRecord
from nimathi.models.user import ProfileUpdate
from nimathi.services.container import ServiceContainer
from nimathi.utils.datetime_helpers import now_utc

logger = logging.getLogger(__name__)

router = APIRouter()


def _internal_error(operation: str, error: Exception) -> HTTPException:
    logger.error(f"Error in {operation}: {error}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Internal server error while {operation}"
    )


@router.get("/api/health", response_model=HealthCheckResponse)
@limiter.limit("60/minute")
async def health_check(
    request: Request,
    container: ServiceContainer = Depends(get_container)
):
    """Health check endpoint (Rate limit: 60/minute for monitoring systems)"""
    store_ok = await container.store.ping()

    return HealthCheckResponse(
        status="ok" if store_ok else "degraded",
        store="connected" if store_ok else "disconnected",
        timestamp=now_utc()
    )


@router.post("/api/v1/auth/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
async def signup(
    request: Request,
    payload: SignupRequest,
    container: ServiceContainer = Depends(get_container)
):
    """Create an account and its profile (Rate limit: 5/minute)"""
    try:
        profile = await container.user_service.signup(
            pet_name=payload.pet_name,
            email=payload.email,
            password=payload.password
        )
        return SignupResponse(user=profile, tier=TierResponse.from_status(resolve_tier(profile.reward_points)))

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("signing up", e)


@router.get("/api/v1/users/{user_id}", response_model=UserResponse)
@limiter.limit("30/minute")
async def get_user(
    request: Request,
    user_id: str,
    session: Session = Depends(require_session),
    container: ServiceContainer = Depends(get_container)
):
    """Get user profile with tier (Rate limit: 30/minute)"""
    try:
        profile = await container.user_service.get_profile(user_id)
        return UserResponse(user=profile, tier=TierResponse.from_status(resolve_tier(profile.reward_points)))

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("fetching user", e)


@router.put("/api/v1/users/{user_id}", response_model=UserResponse)
@limiter.limit("20/minute")
async def update_user(
    request: Request,
    user_id: str,
    payload: ProfileUpdate,
    session: Session = Depends(require_session),
    container: ServiceContainer = Depends(get_container)
):
    """Update pet name or avatar (Rate limit: 20/minute)"""
    try:
        profile = await container.user_service.update_profile(user_id, payload)
        return UserResponse(user=profile, tier=TierResponse.from_status(resolve_tier(profile.reward_points)))

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("updating user", e)


@router.get("/api/v1/users/{user_id}/rewards", response_model=RewardStatusResponse)
@limiter.limit("30/minute")
async def get_rewards(
    request: Request,
    user_id: str,
    session: Session = Depends(require_session),
    container: ServiceContainer = Depends(get_container)
):
    """Get reward points and tier (Rate limit: 30/minute)"""
    try:
        profile, tier = await container.reward_service.get_reward_status(user_id)
        return RewardStatusResponse(
            user_id=user_id,
            reward_points=profile.reward_points,
            tier=TierResponse.from_status(tier)
        )

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("fetching rewards", e)


@router.get("/api/v1/users/{user_id}/tasks", response_model=TaskListResponse)
@limiter.limit("30/minute")
async def list_tasks(
    request: Request,
    user_id: str,
    on_date: Optional[date] = None,
    session: Session = Depends(require_session),
    container: ServiceContainer = Depends(get_container)
):
    """List tasks, optionally for one day (Rate limit: 30/minute)"""
    try:
        tasks = await container.task_service.list_tasks(user_id, on_date=on_date)
        return TaskListResponse(tasks=tasks)

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("fetching tasks", e)


@router.post("/api/v1/users/{user_id}/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("20/minute")
async def create_task(
    request: Request,
    user_id: str,
    payload: TaskCreateRequest,
    session: Session = Depends(require_session),
    container: ServiceContainer = Depends(get_container)
):
    """Schedule a task (Rate limit: 20/minute)"""
    try:
        task = await container.task_service.create_task(
            user_id,
            title=payload.title,
            task_date=payload.date,
            description=payload.description,
            priority=payload.priority
        )
        return TaskResponse(task=task)

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("creating task", e)


@router.patch("/api/v1/users/{user_id}/tasks/{task_id}", response_model=TaskResponse)
@limiter.limit("30/minute")
async def update_task(
    request: Request,
    user_id: str,
    task_id: str,
    payload: TaskUpdateRequest,
    session: Session = Depends(require_session),
    container: ServiceContainer = Depends(get_container)
):
    """Update a task, e.g. mark it completed (Rate limit: 30/minute)"""
    try:
        task = await container.task_service.update_task(
            user_id,
            task_id,
            **payload.model_dump(exclude_none=True)
        )
        return TaskResponse(task=task)

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("updating task", e)


@router.get("/api/v1/users/{user_id}/journal", response_model=JournalListResponse)
@limiter.limit("30/minute")
async def list_journal_entries(
    request: Request,
    user_id: str,
    session: Session = Depends(require_session),
    container: ServiceContainer = Depends(get_container)
):
    """List journal entries (Rate limit: 30/minute)"""
    try:
        entries = await container.journal_service.list_entries(user_id)
        return JournalListResponse(entries=entries)

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("fetching journal entries", e)


@router.post("/api/v1/users/{user_id}/journal", response_model=JournalEntryResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("20/minute")
async def create_journal_entry(
    request: Request,
    user_id: str,
    payload: JournalEntryRequest,
    session: Session = Depends(require_session),
    container: ServiceContainer = Depends(get_container)
):
    """
    Save a journal entry (Rate limit: 20/minute)

    Points are credited separately through the activities endpoint.
    """
    try:
        entry = await container.journal_service.create_entry(
            user_id,
            content=payload.content,
            title=payload.title,
            mood=payload.mood,
            tags=payload.tags,
            word_count=payload.word_count,
            entry_date=payload.date
        )
        return JournalEntryResponse(entry=entry)

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("creating journal entry", e)


@router.post("/api/v1/users/{user_id}/activities", response_model=ActivityResponse)
@limiter.limit("20/minute")
async def complete_activity(
    request: Request,
    user_id: str,
    payload: ActivityRequest,
    session: Session = Depends(require_session),
    container: ServiceContainer = Depends(get_container)
):
    """
    Complete an activity and credit its points (Rate limit: 20/minute)

    A failed profile write still returns 200 with sync_status="failed".
    """
    try:
        activity = ActivityRecord(
            type=payload.type,
            duration_minutes=payload.duration_minutes,
            word_count=payload.word_count,
            details=payload.details
        )
        result = await container.reward_service.complete_activity(user_id, activity)

        return ActivityResponse(
            activity=result.activity,
            points_earned=result.points_earned,
            reward_points=result.profile.reward_points,
            tier=TierResponse.from_status(result.tier),
            previous_tier=result.previous_tier,
            tier_changed=result.tier_changed,
            sync_status=result.sync_status.value,
            sync_error=result.sync_error,
            activity_logged=result.activity_logged
        )

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("creating activity", e)


@router.get("/api/v1/users/{user_id}/stress-levels", response_model=StressHistoryResponse)
@limiter.limit("30/minute")
async def get_stress_levels(
    request: Request,
    user_id: str,
    session: Session = Depends(require_session),
    container: ServiceContainer = Depends(get_container)
):
    """Stress history as of the last submission (Rate limit: 30/minute)"""
    try:
        entries = await container.reward_service.get_stress_levels(user_id)
        return StressHistoryResponse(user_id=user_id, stress_levels=entries)

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("fetching stress levels", e)


@router.post("/api/v1/users/{user_id}/stress-levels", response_model=StressLevelResponse)
@limiter.limit("20/minute")
async def record_stress_level(
    request: Request,
    user_id: str,
    payload: StressLevelRequest,
    session: Session = Depends(require_session),
    container: ServiceContainer = Depends(get_container)
):
    """Record a stress rating (Rate limit: 20/minute)"""
    try:
        result = await container.reward_service.submit_stress_level(
            user_id,
            payload.level,
            entry_date=payload.date
        )
        return StressLevelResponse(
            stress_levels=result.stress_levels,
            sync_status=result.sync_status.value,
            sync_error=result.sync_error
        )

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("recording stress level", e)


@router.post("/api/v1/feedback", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
async def submit_feedback(
    request: Request,
    payload: FeedbackRequest,
    session: Optional[Session] = Depends(optional_session),
    container: ServiceContainer = Depends(get_container)
):
    """Submit feedback; anonymous without a valid token (Rate limit: 10/minute)"""
    try:
        fields = payload.model_dump(exclude={"activity_name", "why"}, exclude_none=True)
        feedback = await container.feedback_service.submit(
            activity_name=payload.activity_name,
            why=payload.why,
            user_id=session.user_id if session else None,
            **fields
        )
        return FeedbackResponse(id=feedback.id)

    except (HTTPException, NimathiError):
        raise
    except Exception as e:
        raise _internal_error("submitting feedback", e)

"""
RewardService - Reward Accounting Business Logic

Applies activity points and stress ratings to user profiles.

Every write is two-phase: the change is applied to a copy of the profile
first (local phase), then written to the store (remote phase). A failed
remote write is never rolled back; the caller receives the updated profile
together with sync_status="failed" and a message to show the user.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Optional

from nimathi.config import STRESS_RETENTION_DAYS
from nimathi.db import queries
from nimathi.db.kv_store import KVStore
from nimathi.exceptions import NimathiError, RecordNotFoundError, ValidationError
from nimathi.gamification import compute_points, record_stress_level, resolve_tier, get_tier, TierStatus
from nimathi.models.activity import ActivityRecord
from nimathi.models.user import StressEntry, UserProfile
from nimathi.utils.datetime_helpers import now_utc

logger = logging.getLogger(__name__)

SYNC_FAILED_MESSAGE = "Your progress is saved on this device but couldn't be synced yet."


class SyncStatus(str, Enum):
    SYNCED = "synced"
    FAILED = "failed"


@dataclass
class ActivityResult:
    """Outcome of one activity completion"""
    profile: UserProfile
    activity: ActivityRecord
    points_earned: int
    tier: TierStatus
    previous_tier: str
    sync_status: SyncStatus
    sync_error: Optional[str] = None
    activity_logged: bool = True

    @property
    def tier_changed(self) -> bool:
        return self.tier.name != self.previous_tier


@dataclass
class StressResult:
    """Outcome of one stress rating submission"""
    profile: UserProfile
    entry: StressEntry
    sync_status: SyncStatus
    sync_error: Optional[str] = None

    @property
    def stress_levels(self) -> list[StressEntry]:
        return self.profile.stress_levels


class RewardService:
    """
    Service for reward points and stress tracking.

    Responsibilities:
    - Scoring completed activities and crediting points exactly once
    - Logging activities (best effort)
    - Recording stress ratings within the retention window
    - Reporting tier status for display
    """

    def __init__(
        self,
        store: KVStore,
        clock: Callable = now_utc,
        retention_days: int = STRESS_RETENTION_DAYS
    ):
        self.store = store
        self.clock = clock
        self.retention_days = retention_days

    async def complete_activity(
        self,
        user_id: str,
        activity: ActivityRecord,
        local_profile: Optional[UserProfile] = None
    ) -> ActivityResult:
        """
        Credit the points for a completed activity.

        Args:
            user_id: Owner of the activity
            activity: Completed session (type + metrics)
            local_profile: Caller's copy, used when the store can't be read

        Returns:
            ActivityResult with the updated profile and sync status

        Raises:
            RecordNotFoundError: No profile in the store and no local copy
        """
        points = compute_points(activity.type, activity.metadata())
        profile = await self._load_profile(user_id, local_profile, operation="complete_activity")
        previous_tier = get_tier(profile.reward_points)

        # Local phase
        updated = profile.model_copy(update={
            "reward_points": profile.reward_points + points,
            "updated_at": self.clock(),
        })
        record = activity.model_copy(update={"points_earned": points, "user_id": user_id})

        # Remote phase
        sync_status, sync_error = await self._sync_profile(updated, operation="complete_activity")
        record, logged = await self._log_activity(user_id, record)

        tier = resolve_tier(updated.reward_points)

        logger.info(
            f"Awarded {points} points to user {user_id} for {record.type}. "
            f"Total: {updated.reward_points}, Tier: {tier.name}, Sync: {sync_status.value}"
        )
        if tier.name != previous_tier.name:
            logger.info(f"User {user_id} moved from {previous_tier.name} to {tier.name}")

        return ActivityResult(
            profile=updated,
            activity=record,
            points_earned=points,
            tier=tier,
            previous_tier=previous_tier.name,
            sync_status=sync_status,
            sync_error=sync_error,
            activity_logged=logged,
        )

    async def submit_stress_level(
        self,
        user_id: str,
        level: int,
        entry_date: Optional[date] = None,
        local_profile: Optional[UserProfile] = None
    ) -> StressResult:
        """
        Record a stress rating and prune entries outside the window.

        Raises:
            ValidationError: Level outside 0-10
            RecordNotFoundError: No profile in the store and no local copy
        """
        profile = await self._load_profile(user_id, local_profile, operation="submit_stress_level")

        now = self.clock()
        updated = record_stress_level(
            profile,
            level,
            entry_date=entry_date,
            now=now,
            retention_days=self.retention_days,
        )
        updated = updated.model_copy(update={"updated_at": now})

        sync_status, sync_error = await self._sync_profile(updated, operation="submit_stress_level")

        logger.info(
            f"Recorded stress level {level} for user {user_id}. "
            f"Window holds {len(updated.stress_levels)} entries, Sync: {sync_status.value}"
        )

        return StressResult(
            profile=updated,
            entry=updated.stress_levels[-1],
            sync_status=sync_status,
            sync_error=sync_error,
        )

    async def get_reward_status(self, user_id: str) -> tuple[UserProfile, TierStatus]:
        """Current profile and tier status"""
        profile = await self._require_profile(user_id)
        return profile, resolve_tier(profile.reward_points)

    async def get_stress_levels(self, user_id: str) -> list[StressEntry]:
        """Stored stress entries as of the last write"""
        profile = await self._require_profile(user_id)
        return profile.stress_levels

    async def get_activity_history(self, user_id: str) -> list[ActivityRecord]:
        """Logged activities, oldest first"""
        await self._require_profile(user_id)
        return await queries.get_activities(self.store, user_id)

    async def _require_profile(self, user_id: str) -> UserProfile:
        profile = await queries.get_profile(self.store, user_id)
        if profile is None:
            raise RecordNotFoundError(
                message=f"User {user_id} not found",
                record_type="User",
                record_id=user_id,
                user_id=user_id,
            )
        return profile

    async def _load_profile(
        self,
        user_id: str,
        local_profile: Optional[UserProfile],
        operation: str
    ) -> UserProfile:
        if local_profile is not None and local_profile.id != user_id:
            raise ValidationError(
                message="Local profile belongs to a different user",
                field="local_profile",
                value=local_profile.id,
                user_id=user_id,
            )

        try:
            return await self._require_profile(user_id)
        except RecordNotFoundError:
            raise
        except Exception as e:
            if local_profile is None:
                raise
            logger.warning(f"{operation}: could not read profile for {user_id}, using local copy: {e}")
            return local_profile

    async def _sync_profile(
        self,
        profile: UserProfile,
        operation: str
    ) -> tuple[SyncStatus, Optional[str]]:
        try:
            await queries.put_profile(self.store, profile)
            return SyncStatus.SYNCED, None
        except Exception as e:
            logger.warning(f"{operation}: profile sync failed for user {profile.id}: {e}")
            if isinstance(e, NimathiError):
                return SyncStatus.FAILED, e.user_message
            return SyncStatus.FAILED, SYNC_FAILED_MESSAGE

    async def _log_activity(
        self,
        user_id: str,
        record: ActivityRecord
    ) -> tuple[ActivityRecord, bool]:
        try:
            return await queries.append_activity(self.store, user_id, record), True
        except Exception as e:
            logger.warning(f"Could not log {record.type} activity for user {user_id}: {e}")
            return record, False

"""
UserService - User Management Business Logic

Handles signup and profile reads/updates. Account credentials live in
Supabase Auth; the profile record lives in the kv store under the same id.
"""

import logging

from nimathi.auth.supabase_client import SupabaseAuthClient
from nimathi.db import queries
from nimathi.db.kv_store import KVStore
from nimathi.exceptions import RecordNotFoundError, ValidationError
from nimathi.models.user import ProfileUpdate, UserProfile, default_avatar_url
from nimathi.utils.datetime_helpers import now_utc

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user management.

    Responsibilities:
    - Signup (auth account + fresh profile)
    - Profile reads
    - Profile updates limited to user-editable fields
    """

    def __init__(self, store: KVStore, auth_client: SupabaseAuthClient):
        self.store = store
        self.auth = auth_client

    async def signup(self, pet_name: str, email: str, password: str) -> UserProfile:
        """
        Create an account and its profile.

        New profiles start with 0 reward points and no stress history.

        Raises:
            ValidationError: Missing fields or signup rejected by Supabase
        """
        if not pet_name.strip() or not email.strip() or not password:
            raise ValidationError(message="Missing required fields")

        auth_user = await self.auth.create_user(
            email=email,
            password=password,
            user_metadata={"pet_name": pet_name},
        )

        profile = UserProfile(
            id=auth_user.id,
            pet_name=pet_name,
            email=email,
            avatar=default_avatar_url(pet_name),
            reward_points=0,
            stress_levels=[],
            created_at=now_utc(),
        )
        await queries.put_profile(self.store, profile)

        logger.info(f"Created new user: {profile.id}")
        return profile

    async def get_profile(self, user_id: str) -> UserProfile:
        """
        Get a user's profile.

        Raises:
            RecordNotFoundError: No profile for user_id
        """
        profile = await queries.get_profile(self.store, user_id)
        if profile is None:
            raise RecordNotFoundError(
                message=f"User {user_id} not found",
                record_type="User",
                record_id=user_id,
                user_id=user_id,
            )
        return profile

    async def update_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile:
        """
        Apply user-editable fields to the profile.

        Reward points and stress history are not editable here.
        """
        profile = await self.get_profile(user_id)
        changes = update.model_dump(exclude_none=True)

        if not changes:
            return profile

        updated = profile.model_copy(update={**changes, "updated_at": now_utc()})
        await queries.put_profile(self.store, updated)

        logger.info(f"Updated profile fields {sorted(changes)} for user {user_id}")
        return updated


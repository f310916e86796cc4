"""User profile queries"""
import logging
from typing import Optional

from nimathi.db.kv_store import KVStore
from nimathi.db.queries.keys import user_key
from nimathi.models.user import UserProfile

logger = logging.getLogger(__name__)


async def get_profile(store: KVStore, user_id: str) -> Optional[UserProfile]:
    """Load a profile, None when the user has no record"""
    value = await store.get(user_key(user_id))
    if value is None:
        return None
    return UserProfile.model_validate(value)


async def put_profile(store: KVStore, profile: UserProfile) -> None:
    """Write the whole profile back under user:{id}"""
    await store.set(user_key(profile.id), profile.model_dump(mode="json"))
    logger.debug(f"Saved profile for user {profile.id}")


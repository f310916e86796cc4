"""Activity log queries"""
import logging

from nimathi.db.kv_store import KVStore
from nimathi.db.queries.keys import activity_key, new_record_id
from nimathi.models.activity import ActivityRecord

logger = logging.getLogger(__name__)


async def append_activity(store: KVStore, user_id: str, record: ActivityRecord) -> ActivityRecord:
    """
    Log a completed activity

    Assigns the record id and owner when missing and returns the stored copy.
    """
    stored = record.model_copy(update={
        "id": record.id or new_record_id(user_id, record.created_at),
        "user_id": user_id,
    })
    await store.set(activity_key(user_id, stored.id), stored.model_dump(mode="json"))
    logger.debug(f"Logged {stored.type} activity {stored.id} for user {user_id}")
    return stored


async def get_activities(store: KVStore, user_id: str) -> list[ActivityRecord]:
    """All logged activities for a user, oldest first"""
    values = await store.get_by_prefix(activity_key(user_id))
    return [ActivityRecord.model_validate(value) for value in values]

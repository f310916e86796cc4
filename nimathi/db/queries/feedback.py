"""Feedback queries"""
import logging

from nimathi.db.kv_store import KVStore
from nimathi.db.queries.keys import feedback_key
from nimathi.models.feedback import Feedback

logger = logging.getLogger(__name__)


async def save_feedback(store: KVStore, feedback: Feedback) -> None:
    await store.set(feedback_key(feedback.id), feedback.model_dump(mode="json"))
    logger.debug(f"Saved feedback {feedback.id} from {feedback.user_id}")

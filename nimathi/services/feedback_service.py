"""FeedbackService - feedback form submissions"""

import logging
from typing import Optional

from nimathi.db import queries
from nimathi.db.kv_store import KVStore
from nimathi.exceptions import ValidationError
from nimathi.models.feedback import ANONYMOUS_USER_ID, Feedback
from nimathi.utils.datetime_helpers import now_utc

logger = logging.getLogger(__name__)


class FeedbackService:
    """Service for feedback submissions"""

    def __init__(self, store: KVStore):
        self.store = store

    async def submit(
        self,
        activity_name: str,
        why: str,
        user_id: Optional[str] = None,
        **fields
    ) -> Feedback:
        """
        Store a feedback submission; user_id None means anonymous.

        Raises:
            ValidationError: activity_name or why is blank
        """
        if not activity_name.strip() or not why.strip():
            raise ValidationError(message="Please fill in the required fields")

        owner = user_id or ANONYMOUS_USER_ID
        now = now_utc()
        feedback = Feedback(
            id=queries.new_record_id(owner, now),
            user_id=owner,
            activity_name=activity_name.strip(),
            why=why.strip(),
            created_at=now,
            **{name: value for name, value in fields.items() if value is not None},
        )
        await queries.save_feedback(self.store, feedback)

        logger.info(f"Stored feedback {feedback.id} from {owner}")
        return feedback

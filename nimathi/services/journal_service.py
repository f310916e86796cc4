"""JournalService - journal entries"""

import logging
from datetime import date
from typing import Optional

from nimathi.db import queries
from nimathi.db.kv_store import KVStore
from nimathi.models.journal import JournalEntry
from nimathi.utils.datetime_helpers import now_utc
from nimathi.utils.text import count_words

logger = logging.getLogger(__name__)


class JournalService:
    """Service for journal entries"""

    def __init__(self, store: KVStore):
        self.store = store

    async def create_entry(
        self,
        user_id: str,
        content: str,
        title: str = "",
        mood: str = "okay",
        tags: Optional[list[str]] = None,
        word_count: Optional[int] = None,
        entry_date: Optional[date] = None
    ) -> JournalEntry:
        """
        Save a journal entry.

        word_count is derived from content when not supplied.
        """
        now = now_utc()
        entry = JournalEntry(
            id=queries.new_record_id(user_id, now),
            user_id=user_id,
            title=title,
            content=content,
            mood=mood,
            tags=tags or [],
            word_count=word_count if word_count is not None else count_words(content),
            date=entry_date or now.date(),
            created_at=now,
        )
        await queries.save_journal_entry(self.store, entry)

        logger.info(f"Saved journal entry {entry.id} ({entry.word_count} words) for user {user_id}")
        return entry

    async def list_entries(self, user_id: str) -> list[JournalEntry]:
        """Entries in creation order"""
        return await queries.get_journal_entries(self.store, user_id)

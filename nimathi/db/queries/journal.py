"""Journal queries"""
import logging

from nimathi.db.kv_store import KVStore
from nimathi.db.queries.keys import journal_key
from nimathi.models.journal import JournalEntry

logger = logging.getLogger(__name__)


async def save_journal_entry(store: KVStore, entry: JournalEntry) -> None:
    await store.set(journal_key(entry.user_id, entry.id), entry.model_dump(mode="json"))
    logger.debug(f"Saved journal entry {entry.id} for user {entry.user_id}")


async def get_journal_entries(store: KVStore, user_id: str) -> list[JournalEntry]:
    """All journal entries for a user in creation order"""
    values = await store.get_by_prefix(journal_key(user_id))
    return [JournalEntry.model_validate(value) for value in values]

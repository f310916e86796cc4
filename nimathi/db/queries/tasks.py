"""Task scheduler queries"""
import logging
from typing import Optional

from nimathi.db.kv_store import KVStore
from nimathi.db.queries.keys import task_key
from nimathi.models.task import Task

logger = logging.getLogger(__name__)


async def save_task(store: KVStore, task: Task) -> None:
    await store.set(task_key(task.user_id, task.id), task.model_dump(mode="json"))
    logger.debug(f"Saved task {task.id} for user {task.user_id}")


async def get_task(store: KVStore, user_id: str, task_id: str) -> Optional[Task]:
    value = await store.get(task_key(user_id, task_id))
    return Task.model_validate(value) if value is not None else None


async def get_tasks(store: KVStore, user_id: str) -> list[Task]:
    """All tasks for a user in creation order"""
    values = await store.get_by_prefix(task_key(user_id))
    return [Task.model_validate(value) for value in values]

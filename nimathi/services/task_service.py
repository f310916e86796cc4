"""TaskService - task scheduler CRUD"""

import logging
from datetime import date
from typing import Optional

from nimathi.db import queries
from nimathi.db.kv_store import KVStore
from nimathi.exceptions import RecordNotFoundError, ValidationError
from nimathi.models.task import Task, TaskPriority
from nimathi.utils.datetime_helpers import now_utc

logger = logging.getLogger(__name__)


class TaskService:
    """Service for scheduled tasks"""

    def __init__(self, store: KVStore):
        self.store = store

    async def create_task(
        self,
        user_id: str,
        title: str,
        task_date: date,
        description: str = "",
        priority: TaskPriority = TaskPriority.MEDIUM
    ) -> Task:
        if not title.strip():
            raise ValidationError(message="Task title is required", field="title", value=title, user_id=user_id)

        now = now_utc()
        task = Task(
            id=queries.new_record_id(user_id, now),
            user_id=user_id,
            title=title.strip(),
            description=description,
            date=task_date,
            priority=priority,
            completed=False,
            created_at=now,
        )
        await queries.save_task(self.store, task)

        logger.info(f"Created task {task.id} for user {user_id} on {task_date}")
        return task

    async def list_tasks(self, user_id: str, on_date: Optional[date] = None) -> list[Task]:
        """Tasks in creation order, optionally only those scheduled on one day"""
        tasks = await queries.get_tasks(self.store, user_id)
        if on_date is not None:
            tasks = [task for task in tasks if task.date == on_date]
        return tasks

    async def update_task(self, user_id: str, task_id: str, **changes) -> Task:
        """
        Update fields of an existing task (title, description, date, priority, completed).

        Raises:
            RecordNotFoundError: Unknown task
            ValidationError: Blank title
        """
        task = await queries.get_task(self.store, user_id, task_id)
        if task is None:
            raise RecordNotFoundError(
                message=f"Task {task_id} not found",
                record_type="Task",
                record_id=task_id,
                user_id=user_id,
            )

        changes = {field: value for field, value in changes.items() if value is not None}
        if "title" in changes:
            if not changes["title"].strip():
                raise ValidationError(message="Task title is required", field="title", value=changes["title"], user_id=user_id)
            changes["title"] = changes["title"].strip()

        if not changes:
            return task

        updated = task.model_copy(update={**changes, "updated_at": now_utc()})
        await queries.save_task(self.store, updated)

        logger.info(f"Updated task {task_id} for user {user_id}: {sorted(changes)}")
        return updated

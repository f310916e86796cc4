"""
Service Container - Dependency Injection Container

Holds the infrastructure (kv store, auth client, optional database pool)
and lazily builds services on first access. The API keeps one container on
app.state instead of a module-level global.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from nimathi import config
from nimathi.auth.supabase_client import SupabaseAuthClient
from nimathi.db.connection import Database
from nimathi.db.kv_store import InMemoryKVStore, KVStore, PostgresKVStore

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    """

    # Infrastructure dependencies (injected)
    store: KVStore
    auth_client: SupabaseAuthClient
    db: Optional[Database] = None

    # Services (lazy-loaded via properties)
    _user_service: Optional[object] = field(default=None, init=False, repr=False)
    _reward_service: Optional[object] = field(default=None, init=False, repr=False)
    _task_service: Optional[object] = field(default=None, init=False, repr=False)
    _journal_service: Optional[object] = field(default=None, init=False, repr=False)
    _feedback_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def user_service(self):
        """Get UserService instance (lazy-loaded)"""
        if self._user_service is None:
            from nimathi.services.user_service import UserService
            self._user_service = UserService(self.store, self.auth_client)
            logger.debug("UserService instantiated")
        return self._user_service

    @property
    def reward_service(self):
        """Get RewardService instance (lazy-loaded)"""
        if self._reward_service is None:
            from nimathi.services.reward_service import RewardService
            self._reward_service = RewardService(self.store)
            logger.debug("RewardService instantiated")
        return self._reward_service

    @property
    def task_service(self):
        """Get TaskService instance (lazy-loaded)"""
        if self._task_service is None:
            from nimathi.services.task_service import TaskService
            self._task_service = TaskService(self.store)
            logger.debug("TaskService instantiated")
        return self._task_service

    @property
    def journal_service(self):
        """Get JournalService instance (lazy-loaded)"""
        if self._journal_service is None:
            from nimathi.services.journal_service import JournalService
            self._journal_service = JournalService(self.store)
            logger.debug("JournalService instantiated")
        return self._journal_service

    @property
    def feedback_service(self):
        """Get FeedbackService instance (lazy-loaded)"""
        if self._feedback_service is None:
            from nimathi.services.feedback_service import FeedbackService
            self._feedback_service = FeedbackService(self.store)
            logger.debug("FeedbackService instantiated")
        return self._feedback_service

    async def close(self) -> None:
        """Release the auth client and the database pool"""
        await self.auth_client.close()
        if self.db is not None:
            await self.db.close_pool()


async def build_container() -> ServiceContainer:
    """
    Create the container from configuration.

    Opens the database pool and ensures the kv table when
    STORE_BACKEND=postgres.
    """
    auth_client = SupabaseAuthClient(
        url=config.SUPABASE_URL,
        service_role_key=config.SUPABASE_SERVICE_ROLE_KEY,
        timeout=config.SUPABASE_TIMEOUT_SECONDS,
    )

    if config.STORE_BACKEND == "memory":
        logger.info("Using in-memory kv store")
        return ServiceContainer(store=InMemoryKVStore(), auth_client=auth_client)

    db = Database(config.DATABASE_URL)
    await db.init_pool()
    store = PostgresKVStore(db, table_name=config.KV_TABLE_NAME)
    await store.ensure_schema()

    logger.info("Service container initialized")
    return ServiceContainer(store=store, auth_client=auth_client, db=db)
